from django.core.management.base import BaseCommand

from apps.accounts.services import cleanup_expired_tokens


class Command(BaseCommand):
    help = 'Clear password reset tokens that have expired'

    def handle(self, *args, **options):
        cleaned = cleanup_expired_tokens()
        self.stdout.write(self.style.SUCCESS(f'Cleared {cleaned} expired reset token(s)'))
