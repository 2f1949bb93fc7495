import pytest
from datetime import date
from decimal import Decimal

from apps.accounts.services import (
    log_in,
    get_user_profile,
    update_user_profile,
    LoginFailedError,
    AccountDisabledError,
)


@pytest.mark.django_db
class TestLogIn:
    """Tests for log_in()."""

    def test_valid_credentials_stamp_last_login(self, diner):
        assert diner.last_login is None

        user = log_in(email='ana@example.com', password='Burrito-Night-42')

        assert user == diner
        user.refresh_from_db()
        assert user.last_login is not None

    def test_email_lookup_ignores_case_and_padding(self, diner):
        assert log_in(email='  ANA@Example.com ', password='Burrito-Night-42') == diner

    def test_wrong_password(self, diner):
        with pytest.raises(LoginFailedError):
            log_in(email=diner.email, password='burrito-night-42')

    def test_unknown_email_gives_same_error(self, db):
        with pytest.raises(LoginFailedError):
            log_in(email='nobody@example.com', password='Burrito-Night-42')

    def test_disabled_account_needs_right_password_first(self, disabled_diner):
        with pytest.raises(LoginFailedError):
            log_in(email=disabled_diner.email, password='wrong')
        with pytest.raises(AccountDisabledError):
            log_in(email=disabled_diner.email, password='Burrito-Night-42')


@pytest.mark.django_db
class TestUserProfile:
    """Tests for get_user_profile() and update_user_profile()."""

    def test_new_diner_has_empty_profile(self, diner):
        profile = get_user_profile(user=diner)

        assert profile['bank_link'] is None
        assert profile['transaction_count'] == 0
        assert profile['restaurant_count'] == 0
        assert profile['total_spent'] == Decimal('0.00')

    def test_profile_reflects_activity(self, diner, diner_activity):
        profile = get_user_profile(user=diner)

        assert profile['bank_link'] == diner_activity
        assert profile['transaction_count'] == 3
        assert profile['unmatched_transactions'] == 1
        assert profile['restaurant_count'] == 1
        assert profile['total_visits'] == 2
        assert profile['total_spent'] == Decimal('25.00')
        assert profile['last_visit'] == date(2024, 2, 9)

    def test_update_only_given_fields(self, diner):
        update_user_profile(user=diner, display_name='  Ana B. ')
        diner.refresh_from_db()

        assert diner.display_name == 'Ana B.'
        assert diner.avatar == ''
