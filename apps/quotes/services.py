"""
Quote workflow

Customers request quotes and may edit them while still ``requested``. Staff
price them (items) and send them; the customer then accepts or declines.
Each customer action notifies the shop admin after commit.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import InvalidTransitionException, InvalidOperationException, NotFoundException
from apps.core.notifications import notify_on_commit
from apps.core.pagination import paginate
from .models import Quote, QuoteItem

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('description', 'event_type')
CLEARABLE_FIELDS = ('event_date', 'budget', 'client_comment')


def _quote_queryset():
    return Quote.objects.select_related('user').prefetch_related('items')


def _format_date(value) -> str:
    return value.isoformat() if value else 'Not specified'


def _notify_admin(quote: Quote, subject: str, template: str, **extra) -> None:
    user = quote.user
    context = {
        'customer_name': user.full_name,
        'customer_email': user.email,
        'quote_id': str(quote.id),
        'event_type': quote.event_type,
        'event_date': _format_date(quote.event_date),
        'description': quote.description,
        'admin_url': f"{settings.ADMIN_URL}/quotes/{quote.id}",
    }
    context.update(extra)
    notify_on_commit(to=settings.ADMIN_EMAIL, subject=subject, template=template, context=context)


def _locked_quote(user, quote_id) -> Quote:
    quote = Quote.objects.select_for_update().select_related('user').filter(pk=quote_id, user=user).first()
    if quote is None:
        raise NotFoundException('Quote not found', entity='quote')
    return quote


# =============================================================================
# CUSTOMER
# =============================================================================

@transaction.atomic
def request_quote(user, data: Dict[str, Any]) -> Quote:
    quote = Quote.objects.create(
        user=user,
        status=Quote.STATUS_REQUESTED,
        description=data['description'],
        event_type=data['event_type'],
        event_date=data.get('event_date'),
        budget=data.get('budget'),
        client_comment=data.get('client_comment'),
    )
    _notify_admin(quote, 'New Quote Request', 'quoteRequest')
    logger.info(f"Quote {quote.id} requested by user {user.id}")
    return _quote_queryset().get(pk=quote.pk)


def list_quotes(user, query_params) -> Tuple[List[Quote], Dict]:
    queryset = _quote_queryset().filter(user=user)
    status = query_params.get('status')
    if status:
        queryset = queryset.filter(status=status)
    return paginate(queryset.order_by('-created_at'), query_params)


def get_quote(user, quote_id) -> Quote:
    quote = _quote_queryset().filter(pk=quote_id, user=user).first()
    if quote is None:
        raise NotFoundException('Quote not found', entity='quote')
    return quote


@transaction.atomic
def update_quote(user, quote_id, data: Dict[str, Any]) -> Quote:
    quote = _locked_quote(user, quote_id)
    if quote.status != Quote.STATUS_REQUESTED:
        raise InvalidTransitionException(
            'Quote can only be updated when in requested status', current_status=quote.status
        )

    for field in REQUIRED_FIELDS:
        if data.get(field):
            setattr(quote, field, data[field])
    for field in CLEARABLE_FIELDS:
        if field in data:
            setattr(quote, field, data[field])
    quote.save()

    _notify_admin(quote, 'Quote Request Updated', 'quoteUpdated')
    return _quote_queryset().get(pk=quote.pk)


@transaction.atomic
def accept_quote(user, quote_id) -> Quote:
    quote = _locked_quote(user, quote_id)
    if quote.status != Quote.STATUS_SENT:
        raise InvalidTransitionException(
            'Only quotes in "sent" status can be accepted', current_status=quote.status
        )
    if not quote.items.exists():
        raise InvalidOperationException('Quote does not have any items to accept')

    quote.status = Quote.STATUS_ACCEPTED
    quote.save(update_fields=['status', 'updated_at'])

    _notify_admin(quote, 'Quote Accepted', 'quoteAccepted')
    logger.info(f"Quote {quote.id} accepted")
    return _quote_queryset().get(pk=quote.pk)


@transaction.atomic
def decline_quote(user, quote_id, decline_reason: Optional[str] = None) -> Quote:
    quote = _locked_quote(user, quote_id)
    if quote.status != Quote.STATUS_SENT:
        raise InvalidTransitionException(
            'Only quotes in "sent" status can be declined', current_status=quote.status
        )

    quote.status = Quote.STATUS_DECLINED
    if decline_reason:
        quote.client_comment = decline_reason
    quote.save(update_fields=['status', 'client_comment', 'updated_at'])

    _notify_admin(
        quote, 'Quote Declined', 'quoteDeclined',
        decline_reason=decline_reason or 'No reason provided',
    )
    logger.info(f"Quote {quote.id} declined")
    return _quote_queryset().get(pk=quote.pk)


# =============================================================================
# ADMIN
# =============================================================================

def list_all_quotes(query_params) -> Tuple[List[Quote], Dict]:
    queryset = _quote_queryset()

    for param, lookup in (('status', 'status'), ('user_id', 'user_id'), ('event_type', 'event_type')):
        value = query_params.get(param)
        if value:
            queryset = queryset.filter(**{lookup: value})

    from_date = query_params.get('from_date')
    if from_date:
        queryset = queryset.filter(event_date__gte=from_date)
    to_date = query_params.get('to_date')
    if to_date:
        queryset = queryset.filter(event_date__lte=to_date)

    return paginate(queryset.order_by('-created_at'), query_params)


def get_quote_admin(quote_id) -> Quote:
    quote = _quote_queryset().filter(pk=quote_id).first()
    if quote is None:
        raise NotFoundException('Quote not found', entity='quote')
    return quote


@transaction.atomic
def update_quote_admin(quote_id, data: Dict[str, Any]) -> Quote:
    """
    Staff update. Any status may be set; a given ``items`` list replaces
    the quote's items entirely. Moving to ``sent`` emails the customer.
    """
    quote = Quote.objects.select_for_update().select_related('user').filter(pk=quote_id).first()
    if quote is None:
        raise NotFoundException('Quote not found', entity='quote')

    status = data.get('status')
    if status:
        quote.status = status
    if 'admin_comment' in data:
        quote.admin_comment = data['admin_comment']
    if data.get('validity_date'):
        quote.validity_date = data['validity_date']
    quote.save()

    items = data.get('items')
    if items is not None:
        QuoteItem.objects.filter(quote=quote).delete()
        QuoteItem.objects.bulk_create([
            QuoteItem(
                quote=quote,
                description=item['description'],
                quantity=item['quantity'],
                unit_price=item['unit_price'],
            )
            for item in items
        ])

    if status == Quote.STATUS_SENT:
        notify_on_commit(
            to=quote.user.email,
            subject='Quote Ready for Review',
            template='quoteSent',
            context={
                'first_name': quote.user.first_name,
                'quote_id': str(quote.id),
                'event_type': quote.event_type,
                'event_date': _format_date(quote.event_date),
                'valid_until': _format_date(quote.validity_date),
                'quote_url': f"{settings.FRONTEND_URL}/account/quotes/{quote.id}",
            },
        )

    logger.info(f"Quote {quote.id} updated by staff (status={quote.status})")
    return _quote_queryset().get(pk=quote.pk)


def expire_quotes(today=None) -> int:
    """
    Mark open quotes whose validity date has passed as expired.
    Returns the number of quotes expired.
    """
    today = today or timezone.localdate()
    expired = Quote.objects.filter(
        status__in=Quote.OPEN_STATUSES,
        validity_date__lt=today,
    ).update(status=Quote.STATUS_EXPIRED, updated_at=timezone.now())
    logger.info(f"Expired {expired} quote(s) past their validity date")
    return expired
