from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from api.exceptions import custom_exception_handler
from apps.core.cache import CachedResponse, ResponseCache
from apps.core.exceptions import InsufficientStockException, NotFoundException
from apps.core.pagination import build_pagination, parse_page_params
from apps.core.utils import (
    build_excerpt,
    format_money,
    generate_order_number,
    normalize_tags,
    quantize_money,
)


class TestPagination:

    def test_defaults(self):
        params = parse_page_params({})
        assert (params.page, params.limit, params.offset) == (1, 10, 0)

    @pytest.mark.parametrize('query, expected', [
        ({'page': '0'}, (1, 10)),
        ({'page': '-3'}, (1, 10)),
        ({'page': 'abc'}, (1, 10)),
        ({'limit': '0'}, (1, 10)),
        ({'limit': '101'}, (1, 10)),
        ({'limit': '100', 'page': '3'}, (3, 100)),
    ])
    def test_out_of_range_values_fall_back(self, query, expected):
        params = parse_page_params(query)
        assert (params.page, params.limit) == expected

    def test_metadata(self):
        meta = build_pagination(parse_page_params({'page': '2', 'limit': '10'}), 25)
        assert meta == {
            'page': 2,
            'limit': 10,
            'total_items': 25,
            'total_pages': 3,
            'has_next': True,
            'has_previous': True,
            'next_page': 3,
            'previous_page': 1,
        }

    def test_empty_result(self):
        meta = build_pagination(parse_page_params({}), 0)
        assert meta['total_pages'] == 0
        assert meta['has_next'] is False
        assert meta['next_page'] is None


class TestResponseCache:

    def test_set_and_get(self):
        cache = ResponseCache()
        cache.set('/api/products/', {'success': True})

        cached = cache.get('/api/products/')
        assert cached.data == {'success': True}
        assert cache.get('/api/promotions/') is None
        assert cache.get_stats()['hits'] == 1
        assert cache.get_stats()['misses'] == 1

    def test_stored_payload_is_a_copy(self):
        cache = ResponseCache()
        payload = {'items': [1]}
        cache.set('/api/products/', payload)
        payload['items'].append(2)
        assert cache.get('/api/products/').data == {'items': [1]}

    def test_expired_entries_are_dropped(self):
        cache = ResponseCache(ttl_seconds=60)
        cache.set('/api/products/', {})
        cache._cache[cache.make_key('/api/products/')].timestamp = datetime.utcnow() - timedelta(seconds=61)

        assert cache.get('/api/products/') is None
        assert len(cache) == 0

    def test_is_expired(self):
        fresh = CachedResponse(data=None, status_code=200, timestamp=datetime.utcnow(), ttl_seconds=5)
        stale = CachedResponse(
            data=None, status_code=200, timestamp=datetime.utcnow() - timedelta(seconds=6), ttl_seconds=5
        )
        assert not fresh.is_expired()
        assert stale.is_expired()

    def test_invalidate_by_substring(self):
        cache = ResponseCache()
        cache.set('/api/products/?page=1', {})
        cache.set('/api/products/42/', {})
        cache.set('/api/categories/', {})

        assert cache.invalidate('/products') == 2
        assert cache.get('/api/categories/') is not None

    def test_oldest_entry_evicted_at_capacity(self):
        cache = ResponseCache(max_size=2)
        cache.set('/a', 1)
        cache.set('/b', 2)
        cache.set('/c', 3)

        assert len(cache) == 2
        assert cache.get('/a') is None
        assert cache.get('/c').data == 3


class TestUtils:

    def test_order_number_format(self):
        number = generate_order_number(datetime(2026, 3, 7, 12, 0))
        assert number.startswith('FL-260307-')
        suffix = number.rsplit('-', 1)[1]
        assert len(suffix) == 4
        assert suffix.isalnum() and suffix.upper() == suffix

    def test_money_rounds_half_up(self):
        assert quantize_money('2.345') == Decimal('2.35')
        assert quantize_money(0.1 + 0.2) == Decimal('0.30')
        assert format_money(20) == '20.00'

    def test_excerpt(self):
        assert build_excerpt('x' * 200) == 'x' * 150 + '...'

    @pytest.mark.parametrize('raw, expected', [
        (None, None),
        ('', None),
        (['a', 'b'], ['a', 'b']),
        ('["a", "b"]', ['a', 'b']),
        ('single', ['single']),
    ])
    def test_normalize_tags(self, raw, expected):
        assert normalize_tags(raw) == expected


class TestErrorEnvelope:

    def test_domain_exception(self):
        response = custom_exception_handler(NotFoundException('Order not found'), {})
        assert response.status_code == 404
        assert response.data == {'success': False, 'message': 'Order not found'}

    def test_stock_exception_is_bad_request(self):
        response = custom_exception_handler(InsufficientStockException('Not enough product in stock'), {})
        assert response.status_code == 400

    def test_validation_error_lists_messages(self):
        exc = ValidationError({'name': ['This field is required.'], 'price': ['A valid number is required.']})
        response = custom_exception_handler(exc, {})
        assert response.status_code == 400
        assert response.data['message'] == 'This field is required., A valid number is required.'
        assert set(response.data['errors']) == {'name', 'price'}

    def test_unexpected_error_hides_details(self, settings):
        settings.DEBUG = False
        response = custom_exception_handler(RuntimeError('boom'), {})
        assert response.status_code == 500
        assert response.data == {'success': False, 'message': 'Server Error'}


@pytest.mark.django_db
def test_health_check(anon_client):
    response = anon_client.get('/api/health/')
    body = response.json()
    assert response.status_code == 200
    assert body['data']['status'] == 'healthy'
    assert body['data']['database'] == 'healthy'
    assert 'hit_rate' in body['data']['cache']


def test_api_is_a_regular_package():
    import api

    assert api.__file__ is not None
