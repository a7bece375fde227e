from decimal import Decimal

import pytest

from apps.core.exceptions import InvalidOperationException, NotFoundException
from apps.shop import services
from apps.shop.models import Cart, CartItem

pytestmark = pytest.mark.django_db


def summary(cart):
    return services.cart_summary(cart)


def test_cart_is_created_lazily(customer):
    assert not Cart.objects.filter(user=customer).exists()
    cart = services.get_cart(customer)
    assert summary(cart)['total'] == '0.00'
    assert summary(cart)['item_count'] == 0
    assert Cart.objects.filter(user=customer).count() == 1


def test_add_merges_into_single_line(customer, make_product):
    product = make_product(price='12.50', stock=5)
    services.add_to_cart(customer, product.id, 2)
    cart = services.add_to_cart(customer, product.id, 1)

    data = summary(cart)
    assert data['item_count'] == 1
    assert data['items'][0].quantity == 3
    assert data['total'] == '37.50'


def test_merge_captures_current_price(customer, make_product):
    product = make_product(price='10.00', stock=5)
    services.add_to_cart(customer, product.id, 1)
    product.price = Decimal('11.00')
    product.save()

    cart = services.add_to_cart(customer, product.id, 1)
    assert summary(cart)['items'][0].unit_price == Decimal('11.00')


def test_add_rejects_quantity_above_stock_including_existing_line(customer, make_product):
    product = make_product(stock=3)
    services.add_to_cart(customer, product.id, 2)
    with pytest.raises(InvalidOperationException):
        services.add_to_cart(customer, product.id, 2)
    assert CartItem.objects.get(cart__user=customer).quantity == 2


def test_add_rejects_inactive_and_missing_products(customer, make_product):
    inactive = make_product(is_active=False)
    with pytest.raises(InvalidOperationException):
        services.add_to_cart(customer, inactive.id, 1)
    with pytest.raises(NotFoundException):
        services.add_to_cart(customer, '00000000-0000-0000-0000-000000000000', 1)


def test_update_quantity_and_zero_removes(customer, make_product):
    product = make_product(price='4.00', stock=10)
    cart = services.add_to_cart(customer, product.id, 1)
    item = cart.items.get()

    cart = services.update_cart_item(customer, item.id, 4)
    assert summary(cart)['total'] == '16.00'

    cart = services.update_cart_item(customer, item.id, 0)
    assert summary(cart)['item_count'] == 0


def test_update_above_stock_fails(customer, make_product):
    product = make_product(stock=2)
    item = services.add_to_cart(customer, product.id, 1).items.get()
    with pytest.raises(InvalidOperationException):
        services.update_cart_item(customer, item.id, 3)


def test_items_of_other_users_are_not_found(customer, other_customer, make_product):
    product = make_product()
    item = services.add_to_cart(customer, product.id, 1).items.get()
    with pytest.raises(NotFoundException):
        services.update_cart_item(other_customer, item.id, 2)
    with pytest.raises(NotFoundException):
        services.remove_cart_item(other_customer, item.id)


def test_total_tracks_every_mutation(customer, make_product):
    a = make_product(price='2.25', stock=10)
    b = make_product(price='3.10', stock=10)

    services.add_to_cart(customer, a.id, 2)
    cart = services.add_to_cart(customer, b.id, 3)
    assert summary(cart)['total'] == '13.80'

    line_a = cart.items.get(product=a)
    cart = services.remove_cart_item(customer, line_a.id)
    assert summary(cart)['total'] == '9.30'


def test_clear_cart(customer, make_product):
    with pytest.raises(NotFoundException):
        services.clear_cart(customer)

    services.add_to_cart(customer, make_product().id, 1)
    cart = services.clear_cart(customer)
    assert summary(cart)['item_count'] == 0


def test_cart_api_roundtrip(customer_client, make_product):
    product = make_product(price='10.00', stock=3)

    response = customer_client.post('/api/cart/items/', {'product_id': str(product.id), 'quantity': 2}, format='json')
    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert body['data']['total'] == '20.00'
    assert body['data']['item_count'] == 1
    assert body['data']['items'][0]['product']['id'] == str(product.id)

    item_id = body['data']['items'][0]['id']
    response = customer_client.put(f'/api/cart/items/{item_id}/', {'quantity': 5}, format='json')
    assert response.status_code == 400
    assert response.json()['success'] is False


def test_cart_requires_authentication(anon_client):
    response = anon_client.get('/api/cart/')
    assert response.status_code == 401
    assert response.json()['success'] is False
