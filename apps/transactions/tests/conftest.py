import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.restaurants.models import Restaurant
from apps.transactions.models import BankLink
from apps.transactions.services import BankAggregatorError, MockBankAggregatorClient


class FailingBankAggregatorClient(MockBankAggregatorClient):
    """Client whose data calls always fail, like an unreachable aggregator."""

    def list_transactions(self, access_token, start_date, end_date):
        raise BankAggregatorError("Aggregator unavailable")

    def list_accounts(self, access_token):
        raise BankAggregatorError("Aggregator unavailable")


class StaticBankAggregatorClient(MockBankAggregatorClient):
    """Client returning a fixed list of records."""

    def __init__(self, records):
        self.records = records

    def list_transactions(self, access_token, start_date, end_date):
        return [dict(record) for record in self.records]


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='diner@example.com',
        password='TestPass123!',
        display_name='Diner',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otherdiner@example.com',
        password='OtherPass123!',
        display_name='Other Diner',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def bank_link(user):
    """Linked bank for the test user."""
    return BankLink.objects.create(
        user=user,
        access_token='access-sandbox-test',
        institution_id='ins_1',
        institution_name='Test Bank',
    )


@pytest.fixture
def starbucks(db):
    return Restaurant.objects.create(name='Starbucks', address='123 Main St, San Francisco, CA')


@pytest.fixture
def raw_transaction():
    """Raw aggregator record for a single coffee purchase."""
    return {
        'id': 't1',
        'amount': 25.50,
        'merchant': 'Starbucks',
        'date': '2024-01-15',
        'category': 'Food and Drink',
    }


@pytest.fixture
def failing_client():
    return FailingBankAggregatorClient()


@pytest.fixture
def static_client():
    """Factory for a client serving the given records."""
    def _make(records):
        return StaticBankAggregatorClient(records)
    return _make
