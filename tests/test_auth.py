from datetime import timedelta

import pytest
from django.utils import timezone

from apps.accounts import services
from apps.accounts.authentication import decode_access_token, generate_refresh_token
from apps.accounts.models import User
from apps.core.exceptions import AuthenticationException, InvalidOperationException, PermissionException

pytestmark = pytest.mark.django_db

REGISTRATION = {
    'first_name': 'Marie',
    'last_name': 'Curie',
    'email': 'marie@example.com',
    'password': 'roses123',
}


def test_register_returns_tokens_and_sends_welcome(anon_client, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        response = anon_client.post('/api/auth/register/', REGISTRATION, format='json')

    assert response.status_code == 201
    data = response.json()['data']
    assert data['user']['email'] == 'marie@example.com'
    assert data['user']['role'] == 'client'
    assert 'password' not in data['user']
    assert decode_access_token(data['token'])['id'] == data['user']['id']
    assert data['refresh_token']
    assert mailoutbox[0].subject == 'Welcome to ChezFlora'


def test_register_duplicate_email(customer):
    with pytest.raises(InvalidOperationException):
        services.register_user({**REGISTRATION, 'email': 'ROSE@example.com'})


def test_register_validates_password_length(anon_client):
    response = anon_client.post('/api/auth/register/', {**REGISTRATION, 'password': '123'}, format='json')
    assert response.status_code == 400
    assert 'password' in response.json()['errors']


def test_login(customer):
    user, tokens = services.login_user('rose@example.com', 'roses123')
    assert user == customer
    assert set(tokens) == {'token', 'refresh_token'}
    customer.refresh_from_db()
    assert customer.last_login is not None


def test_login_failures(customer):
    with pytest.raises(InvalidOperationException):
        services.login_user('', '')
    with pytest.raises(AuthenticationException):
        services.login_user('rose@example.com', 'wrong')
    with pytest.raises(AuthenticationException):
        services.login_user('nobody@example.com', 'roses123')

    customer.status = 'inactive'
    customer.save()
    with pytest.raises(PermissionException):
        services.login_user('rose@example.com', 'roses123')


def test_login_api_wrong_password(anon_client, customer):
    response = anon_client.post('/api/auth/login/', {'email': customer.email, 'password': 'nope'}, format='json')
    assert response.status_code == 401
    assert response.json() == {'success': False, 'message': 'Invalid credentials'}


def test_me_requires_bearer_token(anon_client, customer_client):
    assert anon_client.get('/api/auth/me/').status_code == 401

    anon_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
    assert anon_client.get('/api/auth/me/').status_code == 401

    response = customer_client.get('/api/auth/me/')
    assert response.status_code == 200
    assert response.json()['data']['email'] == 'rose@example.com'


def test_refresh_token_cannot_be_used_as_access_token(anon_client, customer):
    anon_client.credentials(HTTP_AUTHORIZATION=f"Bearer {generate_refresh_token(customer)}")
    assert anon_client.get('/api/auth/me/').status_code == 401


def test_deactivated_user_is_forbidden(customer, customer_client):
    customer.status = 'banned'
    customer.save()
    response = customer_client.get('/api/auth/me/')
    assert response.status_code == 403


def test_refresh_issues_new_pair(anon_client, customer):
    response = anon_client.post(
        '/api/auth/refresh-token/', {'refresh_token': generate_refresh_token(customer)}, format='json'
    )
    assert response.status_code == 200
    assert decode_access_token(response.json()['data']['token'])['id'] == str(customer.id)

    response = anon_client.post('/api/auth/refresh-token/', {'refresh_token': 'garbage'}, format='json')
    assert response.status_code == 401


def test_update_profile_ignores_email(customer_client, customer):
    response = customer_client.put('/api/auth/me/', {'first_name': 'Rosa', 'email': 'x@example.com'}, format='json')
    assert response.status_code == 200
    customer.refresh_from_db()
    assert customer.first_name == 'Rosa'
    assert customer.email == 'rose@example.com'


def test_change_password(customer_client, customer):
    response = customer_client.put(
        '/api/auth/change-password/',
        {'current_password': 'wrong', 'new_password': 'tulips456'},
        format='json',
    )
    assert response.status_code == 401

    response = customer_client.put(
        '/api/auth/change-password/',
        {'current_password': 'roses123', 'new_password': 'tulips456'},
        format='json',
    )
    assert response.status_code == 200
    customer.refresh_from_db()
    assert customer.check_password('tulips456')


def test_forgot_and_reset_password(anon_client, customer, mailoutbox):
    response = anon_client.post('/api/auth/forgot-password/', {'email': customer.email}, format='json')
    assert response.status_code == 200
    customer.refresh_from_db()
    assert customer.reset_token
    assert customer.reset_token in mailoutbox[0].body

    response = anon_client.put(
        f'/api/auth/reset-password/{customer.reset_token}/', {'password': 'peonies789'}, format='json'
    )
    assert response.status_code == 200
    customer.refresh_from_db()
    assert customer.reset_token is None
    assert customer.check_password('peonies789')


def test_forgot_password_unknown_email_looks_the_same(anon_client, mailoutbox):
    response = anon_client.post('/api/auth/forgot-password/', {'email': 'ghost@example.com'}, format='json')
    assert response.status_code == 200
    assert mailoutbox == []


def test_reset_with_expired_token(customer):
    customer.reset_token = 'abc'
    customer.reset_token_expires = timezone.now() - timedelta(minutes=1)
    customer.save()
    with pytest.raises(InvalidOperationException):
        services.reset_password('abc', 'newpass1')


def test_cleanup_expired_tokens(customer, other_customer):
    now = timezone.now()
    User.objects.filter(pk=customer.pk).update(reset_token='old', reset_token_expires=now - timedelta(hours=2))
    User.objects.filter(pk=other_customer.pk).update(reset_token='new', reset_token_expires=now + timedelta(hours=1))

    assert services.cleanup_expired_tokens() == 1
    other_customer.refresh_from_db()
    assert other_customer.reset_token == 'new'


def test_logout(customer_client):
    response = customer_client.post('/api/auth/logout/')
    assert response.json() == {'success': True, 'message': 'Logged out successfully'}
