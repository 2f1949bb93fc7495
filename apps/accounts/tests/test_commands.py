import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command

from apps.accounts.models import User
from apps.restaurants.models import Restaurant, UserRestaurantStats
from apps.transactions.models import Transaction


@pytest.mark.django_db
class TestCreateSampleData:
    """Tests for manage.py create_sample_data."""

    def test_creates_sample_data(self):
        out = StringIO()
        call_command('create_sample_data', stdout=out)

        assert 'Sample data created successfully!' in out.getvalue()
        assert User.objects.filter(email='alice@example.com').exists()
        assert Restaurant.objects.count() == 5
        assert Transaction.objects.count() == 9

        alice_starbucks = UserRestaurantStats.objects.get(
            user__email='alice@example.com',
            restaurant__name='Starbucks',
        )
        assert alice_starbucks.visit_count == 2
        assert alice_starbucks.total_spent == Decimal('31.90')

    def test_running_twice_is_safe(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', stdout=StringIO())

        assert Restaurant.objects.count() == 5
        assert Transaction.objects.count() == 9
        assert UserRestaurantStats.objects.filter(user__email='bob@example.com').count() == 2

    def test_clear(self):
        call_command('create_sample_data', stdout=StringIO())
        Restaurant.objects.create(name='Stale Diner')

        call_command('create_sample_data', clear=True, stdout=StringIO())

        assert not Restaurant.objects.filter(name='Stale Diner').exists()
        assert Restaurant.objects.count() == 5
