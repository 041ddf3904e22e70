from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from apps.exchange.infrastructure.persistence.models import Currency
from apps.exchange.infrastructure.persistence.unit_of_work import UnitOfWork


class Command(BaseCommand):
    help = 'Add or reactivate every currency listed in the EXCHANGE_RATES setting'

    def add_arguments(self, parser):
        parser.add_argument(
            '--deactivate-missing',
            action='store_true',
            help='Deactivate active currencies that are not in the rate table'
        )

    def handle(self, **options):
        names = list(settings.EXCHANGE_RATES)
        symbols = getattr(settings, 'EXCHANGE_SYMBOLS', {})

        if not names:
            raise CommandError('EXCHANGE_RATES is empty, nothing to seed')

        self.stdout.write(f'Seeding {len(names)} currencies...')

        with UnitOfWork() as uow:
            for name in names:
                uow.currencies.add(Currency(name=name, symbol=symbols.get(name, name)))

            if options['deactivate_missing']:
                for currency in uow.currencies.list_active():
                    if currency.name not in settings.EXCHANGE_RATES:
                        uow.currencies.deactivate(currency.pk)
                        self.stdout.write(f'Deactivating {currency.name}')

            try:
                written = uow.complete()
            except DatabaseError as e:
                raise CommandError(f'Failed: {e}')

        self.stdout.write(self.style.SUCCESS(f'Done, {written} row(s) written'))
