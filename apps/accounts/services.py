"""
Accounts services: registration, credentials, and the address book

The address book keeps at most one default address per user. Every write
that touches ``is_default`` runs in a single transaction that first clears
the flag on the user's other addresses.
"""
import logging
import secrets
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import (
    AuthenticationException,
    ChezFloraException,
    InvalidOperationException,
    NotFoundException,
    PermissionException,
)
from apps.core.notifications import notify_on_commit, send_email
from apps.core.pagination import paginate
from .authentication import decode_refresh_token, issue_token_pair
from .models import Address, User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('first_name', 'last_name', 'phone')
ADDRESS_FIELDS = (
    'address_name', 'first_name', 'last_name', 'address_line1', 'address_line2',
    'city', 'postal_code', 'country', 'phone',
)


# =============================================================================
# AUTHENTICATION
# =============================================================================

def register_user(data: Dict[str, Any]) -> Tuple[User, Dict[str, str]]:
    email = User.objects.normalize_email(data['email'])
    if User.objects.filter(email__iexact=email).exists():
        raise InvalidOperationException('Email already in use', field='email')

    with transaction.atomic():
        user = User.objects.create_user(
            email=email,
            password=data['password'],
            first_name=data['first_name'],
            last_name=data['last_name'],
            phone=data.get('phone'),
            role=User.ROLE_CLIENT,
            status=User.STATUS_ACTIVE,
        )
        notify_on_commit(
            to=user.email,
            subject='Welcome to ChezFlora',
            template='welcome',
            context={'first_name': user.first_name},
        )

    logger.info(f"Registered user {user.id}")
    return user, issue_token_pair(user)


def login_user(email: str, password: str) -> Tuple[User, Dict[str, str]]:
    if not email or not password:
        raise InvalidOperationException('Please provide email and password')

    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        raise AuthenticationException('Invalid credentials')

    if not user.is_active:
        raise PermissionException('Your account has been deactivated. Please contact support.')

    if not user.check_password(password):
        raise AuthenticationException('Invalid credentials')

    user.last_login = timezone.now()
    user.save(update_fields=['last_login', 'updated_at'])
    logger.info(f"User {user.id} logged in")
    return user, issue_token_pair(user)


def refresh_tokens(refresh_token: str) -> Dict[str, str]:
    if not refresh_token:
        raise InvalidOperationException('Refresh token is required')

    payload = decode_refresh_token(refresh_token)
    if payload is None:
        raise AuthenticationException('Invalid or expired refresh token')

    user = User.objects.filter(pk=payload.get('id')).first()
    if user is None or not user.is_active:
        raise NotFoundException('User not found or inactive', entity='user')

    return issue_token_pair(user)


def update_profile(user: User, data: Dict[str, Any]) -> User:
    changed = []
    for field in PROFILE_FIELDS:
        value = data.get(field)
        if value:
            setattr(user, field, value)
            changed.append(field)
    if changed:
        user.save(update_fields=changed + ['updated_at'])
    return user


def change_password(user: User, current_password: str, new_password: str) -> None:
    if not user.check_password(current_password):
        raise AuthenticationException('Current password is incorrect')

    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"User {user.id} changed password")


def request_password_reset(email: str) -> None:
    """
    Silently does nothing for unknown emails. If the reset email cannot be
    sent the token is cleared again and the failure surfaces as a 500.
    """
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        return

    lifetime = settings.PASSWORD_RESET_TOKEN_LIFETIME
    user.reset_token = secrets.token_hex(32)
    user.reset_token_expires = timezone.now() + timedelta(seconds=lifetime)
    user.save(update_fields=['reset_token', 'reset_token_expires', 'updated_at'])

    try:
        send_email(
            to=user.email,
            subject='Password Reset Request',
            template='passwordReset',
            context={
                'first_name': user.first_name,
                'reset_url': f"{settings.FRONTEND_URL}/reset-password/{user.reset_token}",
                'expiry_hours': max(1, lifetime // 3600),
            },
        )
    except Exception as e:
        logger.error(f"Failed to send password reset email: {e}")
        user.reset_token = None
        user.reset_token_expires = None
        user.save(update_fields=['reset_token', 'reset_token_expires', 'updated_at'])
        raise ChezFloraException(
            'Failed to send password reset email', code='EMAIL_FAILED', status_code=500
        )


def reset_password(token: str, password: str) -> None:
    user = User.objects.filter(
        reset_token=token,
        reset_token_expires__gt=timezone.now(),
    ).first()
    if user is None:
        raise InvalidOperationException('Invalid or expired token', field='token')

    with transaction.atomic():
        user.set_password(password)
        user.reset_token = None
        user.reset_token_expires = None
        user.save(update_fields=['password', 'reset_token', 'reset_token_expires', 'updated_at'])
        notify_on_commit(
            to=user.email,
            subject='Your password has been changed',
            template='passwordChanged',
            context={'first_name': user.first_name},
        )


def cleanup_expired_tokens(now=None) -> int:
    """Clear password reset tokens that have expired. Returns rows touched."""
    now = now or timezone.now()
    cleaned = User.objects.filter(reset_token_expires__lt=now).update(
        reset_token=None,
        reset_token_expires=None,
    )
    logger.info(f"Cleaned up {cleaned} expired reset tokens")
    return cleaned


# =============================================================================
# ADDRESS BOOK
# =============================================================================

def _unset_other_defaults(user: User, keep_id=None) -> None:
    others = Address.objects.filter(user=user, is_default=True)
    if keep_id is not None:
        others = others.exclude(pk=keep_id)
    others.update(is_default=False)


def list_addresses(user: User, query_params) -> Tuple[List[Address], Dict]:
    queryset = Address.objects.filter(user=user).order_by('-is_default', '-created_at')
    return paginate(queryset, query_params)


def get_address(user: User, address_id) -> Address:
    address = Address.objects.filter(pk=address_id, user=user).first()
    if address is None:
        raise NotFoundException('Address not found', entity='address')
    return address


@transaction.atomic
def create_address(user: User, data: Dict[str, Any]) -> Address:
    # A user's first address becomes the default
    is_default = bool(data.get('is_default')) or not Address.objects.filter(user=user).exists()
    if is_default:
        _unset_other_defaults(user)

    address = Address.objects.create(
        user=user,
        is_default=is_default,
        **{field: data.get(field) for field in ADDRESS_FIELDS if field in data},
    )
    logger.info(f"Created address {address.id} for user {user.id} (default={is_default})")
    return address


@transaction.atomic
def update_address(user: User, address_id, data: Dict[str, Any]) -> Address:
    address = get_address(user, address_id)

    for field in ADDRESS_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == 'address_line2' or value:
            setattr(address, field, value)

    if 'is_default' in data and data['is_default'] is not None:
        if data['is_default'] and not address.is_default:
            _unset_other_defaults(user, keep_id=address.pk)
        address.is_default = bool(data['is_default'])

    address.save()
    return address


@transaction.atomic
def set_default_address(user: User, address_id) -> Address:
    address = get_address(user, address_id)
    _unset_other_defaults(user, keep_id=address.pk)
    if not address.is_default:
        address.is_default = True
        address.save(update_fields=['is_default', 'updated_at'])
    return address


@transaction.atomic
def delete_address(user: User, address_id) -> Optional[Address]:
    """
    Deletes the address. When it was the default, the most recently created
    remaining address is promoted and returned. The default cannot be
    deleted while it is the user's only address.
    """
    address = get_address(user, address_id)
    promoted = None

    if address.is_default:
        replacement = (
            Address.objects.select_for_update()
            .filter(user=user)
            .exclude(pk=address.pk)
            .order_by('-created_at')
            .first()
        )
        if replacement is None:
            raise InvalidOperationException(
                'Cannot delete your only address while it is the default'
            )
        address.delete()
        replacement.is_default = True
        replacement.save(update_fields=['is_default', 'updated_at'])
        promoted = replacement
        logger.info(f"Promoted address {replacement.id} to default for user {user.id}")
    else:
        address.delete()

    return promoted
