"""Pytest fixtures for the ChezFlora backend."""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.accounts.authentication import generate_access_token
from apps.accounts.models import Address, User
from apps.catalog.models import Category, Product
from apps.core.cache import get_response_cache


@pytest.fixture(autouse=True)
def clear_response_cache():
    cache = get_response_cache()
    cache.clear()
    yield
    cache.clear()


def _make_user(email, role=User.ROLE_CLIENT, **extra):
    return User.objects.create_user(
        email=email,
        password='roses123',
        first_name=extra.pop('first_name', 'Rose'),
        last_name=extra.pop('last_name', 'Petal'),
        role=role,
        **extra,
    )


@pytest.fixture
def customer(db) -> User:
    return _make_user('rose@example.com')


@pytest.fixture
def other_customer(db) -> User:
    return _make_user('lily@example.com', first_name='Lily')


@pytest.fixture
def staff_user(db) -> User:
    return _make_user('staff@chezflora.com', role=User.ROLE_ADMIN, first_name='Flora')


def _client_for(user) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {generate_access_token(user)}")
    return client


@pytest.fixture
def anon_client() -> APIClient:
    return APIClient()


@pytest.fixture
def customer_client(customer) -> APIClient:
    return _client_for(customer)


@pytest.fixture
def staff_client(staff_user) -> APIClient:
    return _client_for(staff_user)


@pytest.fixture
def category(db) -> Category:
    return Category.objects.create(name='Bouquets', sort_order=1)


@pytest.fixture
def make_product(db):
    counter = {'n': 0}

    def _make(name='Red Roses', price='10.00', stock=10, **extra):
        counter['n'] += 1
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock=stock,
            sku=extra.pop('sku', f"SKU-{counter['n']:04d}"),
            **extra,
        )

    return _make


@pytest.fixture
def make_address(db):
    def _make(user, **extra):
        fields = {
            'first_name': user.first_name,
            'last_name': user.last_name,
            'address_line1': '12 Rue des Fleurs',
            'city': 'Paris',
            'postal_code': '75001',
            'country': 'France',
        }
        fields.update(extra)
        return Address.objects.create(user=user, **fields)

    return _make


@pytest.fixture
def address(customer, make_address) -> Address:
    return make_address(customer, is_default=True)
