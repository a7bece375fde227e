from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.catalog import services
from apps.catalog.models import Promotion
from apps.core.exceptions import InvalidOperationException, NotFoundException

pytestmark = pytest.mark.django_db


@pytest.fixture
def make_promotion(db):
    def _make(products=(), discount_type=Promotion.TYPE_PERCENTAGE, value='10', **extra):
        now = timezone.now()
        promotion = Promotion.objects.create(
            name=extra.pop('name', 'Spring Sale'),
            discount_type=discount_type,
            discount_value=Decimal(value),
            start_date=extra.pop('start_date', now - timedelta(days=1)),
            end_date=extra.pop('end_date', now + timedelta(days=1)),
            **extra,
        )
        promotion.products.set(products)
        return promotion

    return _make


def test_validate_promotion_values():
    now = timezone.now()
    with pytest.raises(InvalidOperationException):
        services.validate_promotion_values('percentage', Decimal('10'), now, now)
    with pytest.raises(InvalidOperationException):
        services.validate_promotion_values('percentage', Decimal('150'), now, now + timedelta(days=1))
    with pytest.raises(InvalidOperationException):
        services.validate_promotion_values('fixed_amount', Decimal('-1'), now, now + timedelta(days=1))
    services.validate_promotion_values('fixed_amount', Decimal('150'), now, now + timedelta(days=1))


def test_running_promotions_only(make_promotion):
    now = timezone.now()
    running = make_promotion(name='Now')
    make_promotion(name='Later', start_date=now + timedelta(days=2), end_date=now + timedelta(days=3))
    make_promotion(name='Paused', is_active=False)

    assert [p.id for p in services.list_running_promotions()] == [running.id]


def test_product_payload_carries_best_promotion(anon_client, make_product, make_promotion):
    product = make_product(price='40.00')
    make_promotion([product], Promotion.TYPE_PERCENTAGE, '10', name='Ten percent')
    best = make_promotion([product], Promotion.TYPE_FIXED_AMOUNT, '5', name='Five off')

    response = anon_client.get(f'/api/products/{product.id}/')

    promotion = response.json()['data']['promotion']
    assert promotion['id'] == str(best.id)
    assert promotion['discount_amount'] == '5.00'
    assert promotion['final_price'] == '35.00'
    assert response.json()['data']['price'] == '40.00'


def test_product_without_running_promotion(anon_client, make_product, make_promotion):
    product = make_product()
    make_promotion([product], is_active=False)

    response = anon_client.get(f'/api/products/{product.id}/')
    assert response.json()['data']['promotion'] is None


def test_anonymous_reads_are_cached_until_commit(anon_client, staff_client, make_product,
                                                 django_capture_on_commit_callbacks):
    product = make_product(price='10.00')
    url = f'/api/products/{product.id}/'
    assert anon_client.get(url).json()['data']['price'] == '10.00'

    with django_capture_on_commit_callbacks(execute=False):
        staff_client.put(f'/api/products/admin/{product.id}/', {'price': '12.00'}, format='json')
    assert anon_client.get(url).json()['data']['price'] == '10.00'

    with django_capture_on_commit_callbacks(execute=True):
        staff_client.put(f'/api/products/admin/{product.id}/', {'price': '14.00'}, format='json')
    assert anon_client.get(url).json()['data']['price'] == '14.00'


def test_authenticated_reads_bypass_cache(anon_client, customer_client, make_product):
    product = make_product(price='10.00')
    url = f'/api/products/{product.id}/'
    anon_client.get(url)
    type(product).objects.filter(pk=product.pk).update(price=Decimal('11.00'))

    assert customer_client.get(url).json()['data']['price'] == '11.00'
    assert anon_client.get(url).json()['data']['price'] == '10.00'


def test_add_and_remove_promotion_products(make_product, make_promotion):
    a = make_product()
    b = make_product(name='Lilies')
    promotion = make_promotion()

    promotion = services.add_promotion_products(promotion.id, [a.id, b.id])
    assert set(p.id for p in promotion.products.all()) == {a.id, b.id}

    promotion = services.remove_promotion_products(promotion.id, [a.id])
    assert [p.id for p in promotion.products.all()] == [b.id]

    with pytest.raises(InvalidOperationException):
        services.add_promotion_products(promotion.id, [])
    with pytest.raises(NotFoundException):
        services.add_promotion_products(promotion.id, ['00000000-0000-0000-0000-000000000000'])


def test_admin_promotion_api(staff_client, customer_client, make_product):
    product = make_product()
    now = timezone.now()
    payload = {
        'name': 'Summer',
        'discount_type': 'percentage',
        'discount_value': '20',
        'start_date': (now - timedelta(hours=1)).isoformat(),
        'end_date': (now + timedelta(days=7)).isoformat(),
        'product_ids': [str(product.id)],
    }

    assert customer_client.post('/api/promotions/admin/', payload, format='json').status_code == 403

    response = staff_client.post('/api/promotions/admin/', payload, format='json')
    assert response.status_code == 201
    assert response.json()['data']['products'][0]['id'] == str(product.id)

    response = staff_client.post('/api/promotions/admin/', {**payload, 'discount_value': '120'}, format='json')
    assert response.status_code == 400
    assert 'discount_value' in response.json()['errors']

    response = staff_client.post(
        '/api/promotions/admin/', {**payload, 'end_date': payload['start_date']}, format='json'
    )
    assert response.status_code == 400
