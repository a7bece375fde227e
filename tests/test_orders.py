from decimal import Decimal

import pytest

from apps.catalog.models import Product
from apps.core.exceptions import InsufficientStockException, InvalidTransitionException, NotFoundException
from apps.shop import services
from apps.shop.models import CartItem, Order, OrderItem

pytestmark = pytest.mark.django_db


@pytest.fixture
def stocked_cart(customer, make_product):
    a = make_product(name='Tulips', price='10.00', stock=3)
    b = make_product(name='Orchid', price='24.50', stock=1)
    services.add_to_cart(customer, a.id, 2)
    services.add_to_cart(customer, b.id, 1)
    return a, b


def test_checkout_converts_cart_into_order(customer, address, stocked_cart):
    a, b = stocked_cart

    order = services.create_order(customer, shipping_address_id=address.id, payment_method='credit_card')

    assert order.total_amount == Decimal('44.50')
    assert order.status == Order.STATUS_PENDING
    assert order.payment_status == 'pending'
    assert order.billing_address_id == address.id
    assert order.order_number.startswith('FL-')
    assert {(item.product_id, item.quantity) for item in order.items.all()} == {(a.id, 2), (b.id, 1)}

    a.refresh_from_db()
    b.refresh_from_db()
    assert a.stock == 1
    assert b.stock == 0
    assert not CartItem.objects.filter(cart__user=customer).exists()


def test_checkout_is_all_or_nothing(customer, address, stocked_cart):
    a, b = stocked_cart
    Product.objects.filter(pk=b.pk).update(stock=0)

    with pytest.raises(InsufficientStockException):
        services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    a.refresh_from_db()
    assert a.stock == 3
    assert Order.objects.count() == 0
    assert OrderItem.objects.count() == 0
    assert CartItem.objects.filter(cart__user=customer).count() == 2


def test_checkout_with_empty_cart(customer, address):
    with pytest.raises(NotFoundException) as excinfo:
        services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')
    assert excinfo.value.message == 'Your cart is empty'


def test_checkout_rejects_someone_elses_address(customer, other_customer, make_address, stocked_cart):
    foreign = make_address(other_customer)
    with pytest.raises(NotFoundException):
        services.create_order(customer, shipping_address_id=foreign.id, payment_method='paypal')
    assert Order.objects.count() == 0


def test_confirmation_email_is_sent_after_commit(
    customer, address, stocked_cart, mailoutbox, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True):
        order = services.create_order(customer, shipping_address_id=address.id, payment_method='credit_card')

    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == [customer.email]
    assert order.order_number in mailoutbox[0].subject
    assert '44.50' in mailoutbox[0].body


def test_failed_confirmation_email_does_not_fail_the_order(
    customer, address, stocked_cart, monkeypatch, mailoutbox, django_capture_on_commit_callbacks
):
    a, b = stocked_cart

    def smtp_down(*args, **kwargs):
        raise ConnectionError('smtp down')

    monkeypatch.setattr('apps.core.notifications.send_mail', smtp_down)

    with django_capture_on_commit_callbacks(execute=True):
        order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    assert Order.objects.filter(pk=order.pk).exists()
    a.refresh_from_db()
    b.refresh_from_db()
    assert (a.stock, b.stock) == (1, 0)
    assert not CartItem.objects.filter(cart__user=customer).exists()
    assert mailoutbox == []


def test_taken_order_number_is_redrawn(customer, address, stocked_cart, monkeypatch):
    Order.objects.create(
        user=customer, order_number='FL-260101-AAAA', total_amount=Decimal('1.00'), payment_method='paypal'
    )
    numbers = iter(['FL-260101-AAAA', 'FL-260101-BBBB'])
    monkeypatch.setattr(services, 'generate_order_number', lambda: next(numbers))

    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    assert order.order_number == 'FL-260101-BBBB'
    assert Order.objects.count() == 2
    assert order.items.count() == 2


def test_cancel_restores_stock(customer, address, stocked_cart):
    a, b = stocked_cart
    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    cancelled = services.cancel_order(customer, order.id)

    assert cancelled.status == Order.STATUS_CANCELLED
    a.refresh_from_db()
    b.refresh_from_db()
    assert a.stock == 3
    assert b.stock == 1


@pytest.mark.parametrize('status', ['shipped', 'delivered', 'cancelled', 'returned'])
def test_cancel_rejected_outside_pending_or_processing(customer, address, stocked_cart, status):
    a, b = stocked_cart
    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')
    Order.objects.filter(pk=order.pk).update(status=status)

    with pytest.raises(InvalidTransitionException):
        services.cancel_order(customer, order.id)

    a.refresh_from_db()
    b.refresh_from_db()
    assert a.stock == 1
    assert b.stock == 0
    assert Order.objects.get(pk=order.pk).status == status


def test_cancel_api_rejects_second_cancellation(customer, customer_client, address, stocked_cart):
    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')
    assert customer_client.put(f'/api/orders/{order.id}/cancel/').status_code == 200

    response = customer_client.put(f'/api/orders/{order.id}/cancel/')
    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Order cannot be cancelled at this stage'}


def test_orders_are_private(customer, other_customer, address, stocked_cart):
    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')
    with pytest.raises(NotFoundException):
        services.get_order(other_customer, order.id)
    with pytest.raises(NotFoundException):
        services.cancel_order(other_customer, order.id)


def test_admin_status_update_notifies_customer(
    customer, address, stocked_cart, mailoutbox, django_capture_on_commit_callbacks
):
    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    with django_capture_on_commit_callbacks(execute=True):
        updated = services.update_order_status(order.id, status='shipped', payment_status='paid')

    assert updated.status == 'shipped'
    assert updated.payment_status == 'paid'
    assert mailoutbox[-1].subject == f"Order Status Update - {order.order_number}"


def test_checkout_api(customer_client, address, stocked_cart):
    response = customer_client.post(
        '/api/orders/',
        {'shipping_address_id': str(address.id), 'payment_method': 'credit_card', 'notes': 'Ring twice'},
        format='json',
    )

    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert body['data']['total_amount'] == '44.50'
    assert body['data']['notes'] == 'Ring twice'
    assert len(body['data']['items']) == 2

    response = customer_client.get('/api/orders/')
    assert response.json()['pagination']['total_items'] == 1


def test_checkout_api_rejects_unknown_payment_method(customer_client, address, stocked_cart):
    response = customer_client.post(
        '/api/orders/',
        {'shipping_address_id': str(address.id), 'payment_method': 'barter'},
        format='json',
    )
    assert response.status_code == 400
    assert response.json()['success'] is False


def test_admin_order_routes_require_admin_role(customer_client, staff_client, address, customer, stocked_cart):
    order = services.create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    assert customer_client.get('/api/orders/admin/').status_code == 403

    response = staff_client.put(f'/api/orders/admin/{order.id}/status/', {'status': 'processing'}, format='json')
    assert response.status_code == 200
    assert response.json()['data']['status'] == 'processing'

    response = staff_client.put(f'/api/orders/admin/{order.id}/status/', {}, format='json')
    assert response.status_code == 400
