"""
Custom Exception Handler for API
"""
import logging
import traceback

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.exceptions import ChezFloraException

logger = logging.getLogger(__name__)


def _flatten_messages(errors) -> list:
    if isinstance(errors, dict):
        messages = []
        for value in errors.values():
            messages.extend(_flatten_messages(value))
        return messages
    if isinstance(errors, (list, tuple)):
        messages = []
        for value in errors:
            messages.extend(_flatten_messages(value))
        return messages
    return [str(errors)]


def _error_body(message, errors=None):
    body = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


def custom_exception_handler(exc, context):
    """
    Custom exception handler that renders every error as
    ``{success: false, message, errors?}``.
    """
    if isinstance(exc, ChezFloraException):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        else:
            logger.info(f"{exc.code}: {exc.message}")
        return Response(_error_body(exc.message), status=exc.status_code)

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error: {exc}")
        return Response(
            _error_body("Duplicate field value entered"),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, DjangoValidationError):
        return Response(
            _error_body('; '.join(exc.messages)),
            status=status.HTTP_400_BAD_REQUEST,
        )

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            messages = _flatten_messages(response.data)
            response.data = _error_body(
                ', '.join(messages) or 'Validation error',
                errors=response.data,
            )
        elif isinstance(exc, Http404):
            response.data = _error_body('Resource not found')
        else:
            detail = response.data.get('detail') if isinstance(response.data, dict) else None
            response.data = _error_body(str(detail if detail is not None else exc))
        return response

    # Handle unexpected exceptions
    logger.exception(f"Unhandled exception: {exc}")
    body = _error_body("Server Error")
    if settings.DEBUG:
        body["error"] = str(exc)
        body["stack"] = traceback.format_exc()
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
