"""
Bearer token issuing and verification

Access and refresh tokens are signed, timestamped payloads produced by
django.core.signing; the two kinds use different salts so one can never be
replayed as the other.
"""
import logging
from typing import Dict, Optional

from django.conf import settings
from django.core import signing
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from .models import User

logger = logging.getLogger(__name__)

ACCESS_SALT = 'chezflora.access'
REFRESH_SALT = 'chezflora.refresh'


def _issue(user: User, salt: str) -> str:
    return signing.dumps({'id': str(user.pk)}, salt=salt, compress=True)


def _decode(token: str, salt: str, max_age: int) -> Optional[Dict]:
    """Returns the payload, or None when the token is invalid or expired."""
    try:
        return signing.loads(token, salt=salt, max_age=max_age)
    except signing.SignatureExpired:
        logger.debug("Rejected expired token")
        return None
    except signing.BadSignature:
        logger.debug("Rejected token with bad signature")
        return None


def generate_access_token(user: User) -> str:
    return _issue(user, ACCESS_SALT)


def generate_refresh_token(user: User) -> str:
    return _issue(user, REFRESH_SALT)


def issue_token_pair(user: User) -> Dict[str, str]:
    return {
        'token': generate_access_token(user),
        'refresh_token': generate_refresh_token(user),
    }


def decode_access_token(token: str) -> Optional[Dict]:
    return _decode(token, ACCESS_SALT, settings.ACCESS_TOKEN_LIFETIME)


def decode_refresh_token(token: str) -> Optional[Dict]:
    return _decode(token, REFRESH_SALT, settings.REFRESH_TOKEN_LIFETIME)


class BearerTokenAuthentication(BaseAuthentication):
    """
    Authorization: Bearer <access token>
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header')

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid token')

        payload = decode_access_token(token)
        if payload is None:
            raise exceptions.AuthenticationFailed('Invalid or expired token')

        user = User.objects.filter(pk=payload.get('id')).first()
        if user is None:
            raise exceptions.AuthenticationFailed('User not found')

        if not user.is_active:
            raise exceptions.PermissionDenied('Your account has been deactivated')

        return user, token

    def authenticate_header(self, request):
        return self.keyword
