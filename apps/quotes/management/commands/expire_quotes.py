from django.core.management.base import BaseCommand

from apps.quotes.services import expire_quotes


class Command(BaseCommand):
    help = 'Expire open quotes whose validity date has passed'

    def handle(self, *args, **options):
        expired = expire_quotes()
        self.stdout.write(self.style.SUCCESS(f'Expired {expired} quote(s)'))
