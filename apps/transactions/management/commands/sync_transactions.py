"""
Management command to import a user's restaurant transactions from the bank.

Usage:
    python manage.py sync_transactions --email alice@example.com
    python manage.py sync_transactions --email alice@example.com --start-date 2024-01-01 --end-date 2024-01-31
"""

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.transactions.services import (
    sync_transactions,
    BankAggregatorError,
    BankLinkNotFoundError,
    IngestStatus,
)


def _parse_date(value):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise CommandError(f"Invalid date '{value}', expected YYYY-MM-DD")


class Command(BaseCommand):
    help = "Sync a user's restaurant transactions from their linked bank"

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='User to sync')
        parser.add_argument('--start-date', help='First day to import (YYYY-MM-DD)')
        parser.add_argument('--end-date', help='Last day to import (YYYY-MM-DD)')

    def handle(self, *args, **options):
        try:
            user = User.objects.get(email__iexact=options['email'])
        except User.DoesNotExist:
            raise CommandError(f"User {options['email']} does not exist")

        start_date = _parse_date(options['start_date']) if options.get('start_date') else None
        end_date = _parse_date(options['end_date']) if options.get('end_date') else None

        try:
            result = sync_transactions(user=user, start_date=start_date, end_date=end_date)
        except (BankLinkNotFoundError, BankAggregatorError) as e:
            raise CommandError(str(e))

        self.stdout.write(
            f'Fetched {result.fetched} transaction(s) '
            f'from {result.start_date} to {result.end_date}, '
            f'{result.restaurant_transactions} restaurant-related'
        )

        for outcome in result.report.outcomes:
            if outcome.status == IngestStatus.FAILED:
                self.stdout.write(
                    self.style.WARNING(f'  - {outcome.external_id}: {outcome.reason} {outcome.detail}')
                )

        self.stdout.write(
            self.style.SUCCESS(
                f'{result.report.created} created, {result.report.skipped} skipped, '
                f'{result.report.failed} failed; {len(result.stats)} restaurant(s) visited'
            )
        )
