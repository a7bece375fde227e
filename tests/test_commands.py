from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.accounts.models import User
from apps.quotes.models import Quote

pytestmark = pytest.mark.django_db


def test_check_low_stock_emails_active_admins(
    staff_user, customer, make_product, mailoutbox, django_capture_on_commit_callbacks
):
    make_product(name='Last Tulips', stock=2)
    make_product(name='Plenty of Roses', stock=50)
    make_product(name='Retired Lilies', stock=0, is_active=False)
    User.objects.create_user(
        email='former@chezflora.com', password='x', first_name='Old', last_name='Staff',
        role=User.ROLE_ADMIN, status='inactive',
    )

    out = StringIO()
    with django_capture_on_commit_callbacks(execute=True):
        call_command('check_low_stock', '--threshold', '5', stdout=out)

    assert '1 product(s)' in out.getvalue()
    assert [message.to for message in mailoutbox] == [[staff_user.email]]
    assert 'Last Tulips' in mailoutbox[0].body
    assert 'Retired Lilies' not in mailoutbox[0].body


def test_check_low_stock_without_hits_sends_nothing(
    staff_user, make_product, mailoutbox, django_capture_on_commit_callbacks
):
    make_product(stock=50)
    with django_capture_on_commit_callbacks(execute=True):
        call_command('check_low_stock', stdout=StringIO())
    assert mailoutbox == []


def test_cleanup_expired_tokens_command(customer):
    User.objects.filter(pk=customer.pk).update(
        reset_token='stale', reset_token_expires=timezone.now() - timedelta(minutes=5)
    )
    out = StringIO()
    call_command('cleanup_expired_tokens', stdout=out)

    customer.refresh_from_db()
    assert customer.reset_token is None
    assert 'Cleared 1' in out.getvalue()


def test_expire_quotes_command(customer):
    Quote.objects.create(
        user=customer, description='Anniversary dinner flowers', event_type='anniversary',
        status=Quote.STATUS_SENT, validity_date=timezone.localdate() - timedelta(days=1),
    )
    out = StringIO()
    call_command('expire_quotes', stdout=out)

    assert Quote.objects.get().status == Quote.STATUS_EXPIRED
    assert 'Expired 1' in out.getvalue()
