import pytest
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.restaurants.models import UserRestaurantStats


@pytest.mark.django_db
class TestRecomputeRestaurantStatsCommand:
    """Tests for manage.py recompute_restaurant_stats."""

    def test_recompute_all(self, user, other_user, starbucks, make_transaction):
        make_transaction(user, '10.00', starbucks)
        make_transaction(other_user, '20.00', starbucks)

        out = StringIO()
        call_command('recompute_restaurant_stats', stdout=out)

        assert '2 user(s)' in out.getvalue()
        assert UserRestaurantStats.objects.count() == 2

    def test_recompute_one_user(self, user, other_user, starbucks, make_transaction):
        make_transaction(user, '10.00', starbucks)
        make_transaction(other_user, '20.00', starbucks)

        out = StringIO()
        call_command('recompute_restaurant_stats', email=user.email, stdout=out)

        assert '1 restaurant(s)' in out.getvalue()
        assert list(UserRestaurantStats.objects.values_list('user_id', flat=True)) == [user.id]

    def test_unknown_user(self, db):
        with pytest.raises(CommandError):
            call_command('recompute_restaurant_stats', email='nobody@example.com')
