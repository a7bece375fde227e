from django.conf import settings
from django.core.management.base import BaseCommand

from apps.catalog.services import check_low_stock


class Command(BaseCommand):
    help = 'Email active admins the active products whose stock is running low'

    def add_arguments(self, parser):
        parser.add_argument(
            '--threshold',
            type=int,
            default=settings.LOW_STOCK_THRESHOLD,
            help='Report products with stock strictly below this value',
        )

    def handle(self, *args, **options):
        products = check_low_stock(threshold=options['threshold'])
        self.stdout.write(self.style.SUCCESS(f'{len(products)} product(s) below the threshold'))
