from datetime import date, timedelta
from decimal import Decimal

import pytest

from apps.core.exceptions import InvalidOperationException, InvalidTransitionException, NotFoundException
from apps.quotes import services
from apps.quotes.models import Quote, QuoteItem

pytestmark = pytest.mark.django_db

REQUEST = {
    'description': 'Flowers for a summer wedding reception',
    'event_type': 'wedding',
    'event_date': date(2026, 7, 18),
    'budget': Decimal('1500.00'),
}
ITEMS = [
    {'description': 'Bridal bouquet', 'quantity': 1, 'unit_price': Decimal('180.00')},
    {'description': 'Table centrepiece', 'quantity': 12, 'unit_price': Decimal('45.50')},
]


@pytest.fixture
def quote(customer):
    return services.request_quote(customer, REQUEST)


@pytest.fixture
def sent_quote(quote):
    return services.update_quote_admin(quote.id, {'status': Quote.STATUS_SENT, 'items': ITEMS})


def test_request_notifies_admin(customer, settings, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        quote = services.request_quote(customer, REQUEST)

    assert quote.status == Quote.STATUS_REQUESTED
    assert mailoutbox[0].to == [settings.ADMIN_EMAIL]
    assert 'wedding' in mailoutbox[0].body


def test_customer_updates_only_while_requested(customer, quote):
    updated = services.update_quote(customer, quote.id, {'budget': Decimal('2000.00')})
    assert updated.budget == Decimal('2000.00')

    Quote.objects.filter(pk=quote.pk).update(status=Quote.STATUS_PROCESSING)
    with pytest.raises(InvalidTransitionException):
        services.update_quote(customer, quote.id, {'budget': Decimal('100.00')})


def test_customer_can_clear_optional_fields(customer, customer_client, quote):
    updated = services.update_quote(customer, quote.id, {'event_date': None, 'budget': None})
    assert updated.event_date is None
    assert updated.budget is None
    assert updated.description == REQUEST['description']

    response = customer_client.put(
        f'/api/quotes/{quote.id}/', {'event_date': '2026-08-01', 'budget': None}, format='json'
    )
    assert response.status_code == 200
    assert response.json()['data']['event_date'] == '2026-08-01'
    assert response.json()['data']['budget'] is None


def test_admin_update_replaces_items_and_emails_customer(
    customer, quote, mailoutbox, django_capture_on_commit_callbacks
):
    services.update_quote_admin(quote.id, {'items': [ITEMS[0]]})

    with django_capture_on_commit_callbacks(execute=True):
        updated = services.update_quote_admin(quote.id, {
            'status': Quote.STATUS_SENT,
            'items': ITEMS,
            'validity_date': date(2026, 6, 30),
        })

    assert QuoteItem.objects.filter(quote=quote).count() == 2
    assert updated.total_amount == Decimal('726.00')
    assert updated.validity_date == date(2026, 6, 30)
    assert mailoutbox[-1].to == [customer.email]
    assert mailoutbox[-1].subject == 'Quote Ready for Review'


def test_accept_requires_sent_status(customer, quote):
    with pytest.raises(InvalidTransitionException):
        services.accept_quote(customer, quote.id)


def test_accept_requires_items(customer, quote):
    services.update_quote_admin(quote.id, {'status': Quote.STATUS_SENT})
    with pytest.raises(InvalidOperationException):
        services.accept_quote(customer, quote.id)


def test_accept_sent_quote(customer, sent_quote):
    accepted = services.accept_quote(customer, sent_quote.id)
    assert accepted.status == Quote.STATUS_ACCEPTED

    with pytest.raises(InvalidTransitionException):
        services.decline_quote(customer, sent_quote.id)


def test_decline_records_reason(customer, sent_quote, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        declined = services.decline_quote(customer, sent_quote.id, 'Over budget')

    assert declined.status == Quote.STATUS_DECLINED
    assert declined.client_comment == 'Over budget'
    assert 'Over budget' in mailoutbox[-1].body


def test_quotes_are_private(other_customer, quote):
    with pytest.raises(NotFoundException):
        services.get_quote(other_customer, quote.id)
    with pytest.raises(NotFoundException):
        services.accept_quote(other_customer, quote.id)


def test_expire_quotes(customer):
    today = date(2026, 5, 10)
    stale = Quote.objects.create(
        user=customer, description='x' * 20, event_type='birthday', validity_date=today - timedelta(days=1)
    )
    fresh = Quote.objects.create(
        user=customer, description='x' * 20, event_type='birthday', validity_date=today
    )
    accepted = Quote.objects.create(
        user=customer, description='x' * 20, event_type='birthday',
        status=Quote.STATUS_ACCEPTED, validity_date=today - timedelta(days=5),
    )

    assert services.expire_quotes(today=today) == 1

    stale.refresh_from_db()
    fresh.refresh_from_db()
    accepted.refresh_from_db()
    assert stale.status == Quote.STATUS_EXPIRED
    assert fresh.status == Quote.STATUS_REQUESTED
    assert accepted.status == Quote.STATUS_ACCEPTED


def test_quote_api_flow(customer_client, staff_client):
    response = customer_client.post('/api/quotes/', {
        'description': 'Weekly lobby arrangements for our office',
        'event_type': 'corporate',
    }, format='json')
    assert response.status_code == 201
    quote_id = response.json()['data']['id']

    assert customer_client.get('/api/quotes/admin/').status_code == 403

    response = staff_client.put(f'/api/quotes/admin/{quote_id}/', {
        'status': 'sent',
        'items': [{'description': 'Lobby arrangement', 'quantity': 4, 'unit_price': '60.00'}],
    }, format='json')
    assert response.status_code == 200
    assert response.json()['data']['total_amount'] == '240.00'

    response = customer_client.put(f'/api/quotes/{quote_id}/accept/')
    assert response.status_code == 200
    assert response.json()['data']['status'] == 'accepted'

    response = customer_client.put(f'/api/quotes/{quote_id}/decline/', {}, format='json')
    assert response.status_code == 400
