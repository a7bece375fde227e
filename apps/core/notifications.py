"""
Transactional email for ChezFlora workflows

Emails are plain-text renderings of named templates sent through Django's
mail backend. Workflow code schedules them with ``notify_on_commit`` so a
message only goes out once the surrounding transaction has committed, and a
delivery failure is logged without affecting the caller.
"""
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction

logger = logging.getLogger(__name__)


EMAIL_TEMPLATES: Dict[str, str] = {
    "welcome": (
        "Dear {first_name},\n\n"
        "Thank you for registering with ChezFlora!"
    ),
    "passwordReset": (
        "Hello {first_name},\n\n"
        "Use the link below to reset your password. It expires in {expiry_hours} hour(s).\n"
        "{reset_url}"
    ),
    "passwordChanged": (
        "Hello {first_name},\n\n"
        "Your ChezFlora password has been changed."
    ),
    "orderConfirmation": (
        "Hello {first_name},\n\n"
        "Thank you for your order {order_number} placed on {order_date}.\n"
        "Total: {total_amount} ({payment_method})\n"
        "Shipping to: {shipping_address}\n\n"
        "Track it here: {order_url}"
    ),
    "orderCancelled": (
        "Hello {first_name},\n\n"
        "Your order {order_number} was cancelled on {cancellation_date}.\n"
        "Questions? Contact us at {support_email}."
    ),
    "orderStatusUpdate": (
        "Hello {first_name},\n\n"
        "Order {order_number} is now '{status}' (payment: {payment_status}) as of {update_date}.\n"
        "{order_url}"
    ),
    "quoteRequest": (
        "New quote request from {customer_name} <{customer_email}>.\n"
        "Event: {event_type} on {event_date}\n\n"
        "{description}\n\n"
        "{admin_url}"
    ),
    "quoteUpdated": (
        "Quote {quote_id} was updated by {customer_name} <{customer_email}>.\n"
        "Event: {event_type} on {event_date}\n\n"
        "{description}\n\n"
        "{admin_url}"
    ),
    "quoteAccepted": (
        "{customer_name} <{customer_email}> accepted quote {quote_id} "
        "({event_type}, {event_date}).\n{admin_url}"
    ),
    "quoteDeclined": (
        "{customer_name} <{customer_email}> declined quote {quote_id} ({event_type}).\n"
        "Reason: {decline_reason}\n{admin_url}"
    ),
    "quoteSent": (
        "Hello {first_name},\n\n"
        "Your quote for {event_type} ({event_date}) is ready for review and valid until {valid_until}.\n"
        "{quote_url}"
    ),
    "lowStockAlert": (
        "Hello {first_name},\n\n"
        "{product_count} product(s) are running low on stock:\n\n"
        "{product_list}\n\n"
        "{admin_url}"
    ),
}


class _SafeContext(dict):
    def __missing__(self, key):
        return ''


def render_template(template: str, context: Optional[Dict[str, Any]] = None) -> str:
    """Render a named template; unknown placeholders render empty."""
    if template not in EMAIL_TEMPLATES:
        raise KeyError(f"Unknown email template: {template}")
    return EMAIL_TEMPLATES[template].format_map(_SafeContext(context or {}))


def send_email(
    to: str,
    subject: str,
    template: str = None,
    context: Dict[str, Any] = None,
    text: str = None,
    html: str = None,
) -> int:
    """
    Send one email. Raises on delivery failure; callers decide whether that
    is fatal.
    """
    body = text if text is not None else render_template(template, context)
    sent = send_mail(
        subject=subject,
        message=body or 'No text content provided',
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to],
        html_message=html,
        fail_silently=False,
    )
    logger.info(f"Email sent to {to}: {subject}")
    return sent


def send_email_safely(**kwargs) -> bool:
    """Best-effort send: failures are logged and reported as False."""
    try:
        send_email(**kwargs)
        return True
    except Exception as e:
        logger.error(f"Failed to send '{kwargs.get('subject')}' email to {kwargs.get('to')}: {e}")
        return False


def notify_on_commit(**kwargs):
    """
    Queue a best-effort email to be sent after the current transaction
    commits. Outside a transaction it is sent immediately.
    """
    transaction.on_commit(lambda: send_email_safely(**kwargs))
