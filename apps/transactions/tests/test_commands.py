import pytest
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.restaurants.models import UserRestaurantStats
from apps.transactions.models import Transaction


@pytest.mark.django_db
class TestSyncTransactionsCommand:
    """Tests for manage.py sync_transactions."""

    def test_sync(self, user, bank_link):
        out = StringIO()
        call_command('sync_transactions', email=user.email, stdout=out)

        assert '3 created' in out.getvalue()
        assert Transaction.objects.filter(user=user).count() == 3
        assert UserRestaurantStats.objects.filter(user=user).count() == 3

    def test_sync_with_dates(self, user, bank_link):
        out = StringIO()
        call_command(
            'sync_transactions',
            email=user.email,
            start_date='2024-01-01',
            end_date='2024-01-31',
            stdout=out,
        )

        assert 'from 2024-01-01 to 2024-01-31' in out.getvalue()

    def test_bad_date(self, user, bank_link):
        with pytest.raises(CommandError):
            call_command('sync_transactions', email=user.email, start_date='January')

    def test_unknown_user(self, db):
        with pytest.raises(CommandError):
            call_command('sync_transactions', email='nobody@example.com')

    def test_user_without_link(self, user):
        with pytest.raises(CommandError):
            call_command('sync_transactions', email=user.email)
