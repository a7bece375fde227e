from decimal import Decimal

import pytest

from apps.catalog import services
from apps.catalog.models import Category, Product
from apps.core.exceptions import InvalidOperationException, NotFoundException
from apps.shop.services import add_to_cart, create_order

pytestmark = pytest.mark.django_db


def test_category_tree_nests_children(anon_client):
    plants = Category.objects.create(name='Plants', sort_order=2)
    bouquets = Category.objects.create(name='Bouquets', sort_order=1)
    Category.objects.create(name='Roses', parent=bouquets)
    Category.objects.create(name='Hidden', parent=plants, is_active=False)

    response = anon_client.get('/api/categories/tree/')

    tree = response.json()['data']
    assert [node['name'] for node in tree] == ['Bouquets', 'Plants']
    assert [child['name'] for child in tree[0]['children']] == ['Roses']
    assert tree[1]['children'] == []


def test_category_delete_restrictions(category, make_product):
    child = Category.objects.create(name='Roses', parent=category)
    with pytest.raises(InvalidOperationException):
        services.delete_category(category.id)

    make_product(category=child)
    with pytest.raises(InvalidOperationException):
        services.delete_category(child.id)


def test_category_cannot_be_its_own_parent(category):
    with pytest.raises(InvalidOperationException):
        services.update_category(category.id, {'parent_id': category.id})


def test_list_products_filters_and_sorts(category, make_product):
    make_product(name='Cheap Daisies', price='5.00', category=category)
    make_product(name='Fancy Orchid', price='50.00', category=category)
    make_product(name='Plain Fern', price='15.00')
    make_product(name='Retired Rose', price='20.00', is_active=False)

    rows, pagination = services.list_products({'sort': 'price_desc'})
    assert [p.name for p in rows] == ['Fancy Orchid', 'Plain Fern', 'Cheap Daisies']
    assert pagination['total_items'] == 3

    rows, _ = services.list_products({'category': str(category.id), 'min_price': '10'})
    assert [p.name for p in rows] == ['Fancy Orchid']

    rows, _ = services.list_products({'search': 'fern'})
    assert [p.name for p in rows] == ['Plain Fern']


def test_list_products_pagination(make_product):
    for index in range(5):
        make_product(name=f'Bouquet {index}')

    rows, pagination = services.list_products({'page': '2', 'limit': '2', 'sort': 'name_asc'})
    assert [p.name for p in rows] == ['Bouquet 2', 'Bouquet 3']
    assert pagination['total_pages'] == 3
    assert pagination['has_next'] is True
    assert pagination['previous_page'] == 1


def test_search_requires_query(anon_client):
    response = anon_client.get('/api/products/search/')
    assert response.status_code == 400
    assert response.json()['message'] == 'Search query is required'


def test_create_product_sku_rules(category):
    product = services.create_product({'name': 'Peonies', 'price': Decimal('18.00'), 'category_id': category.id})
    assert product.sku.startswith('P')
    assert product.category == category

    services.create_product({'name': 'Tulips', 'price': Decimal('9.00'), 'sku': 'TUL-1'})
    with pytest.raises(InvalidOperationException):
        services.create_product({'name': 'More Tulips', 'price': Decimal('9.00'), 'sku': 'TUL-1'})


def test_product_images_first_is_primary(staff_client):
    response = staff_client.post('/api/products/admin/', {
        'name': 'Wild Bouquet',
        'price': '22.00',
        'stock': 4,
        'image_urls': ['https://img.example/a.jpg', 'https://img.example/b.jpg'],
    }, format='json')

    assert response.status_code == 201
    images = response.json()['data']['images']
    assert [image['is_primary'] for image in images] == [True, False]


def test_product_in_an_order_cannot_be_deleted(customer, address, make_product):
    product = make_product()
    add_to_cart(customer, product.id, 1)
    create_order(customer, shipping_address_id=address.id, payment_method='paypal')

    with pytest.raises(InvalidOperationException):
        services.delete_product(product.id)
    assert Product.objects.filter(pk=product.pk).exists()


def test_missing_product(anon_client):
    response = anon_client.get('/api/products/00000000-0000-0000-0000-000000000000/')
    assert response.status_code == 404
    assert response.json() == {'success': False, 'message': 'Product not found'}


def test_admin_routes_reject_customers(customer_client, anon_client):
    payload = {'name': 'Roses', 'price': '10.00'}
    response = customer_client.post('/api/products/admin/', payload, format='json')
    assert response.status_code == 403
    assert response.json()['message'] == 'Not authorized to access this route'

    assert anon_client.post('/api/products/admin/', payload, format='json').status_code == 401
