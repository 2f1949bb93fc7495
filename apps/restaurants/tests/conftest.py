import pytest
from datetime import date, timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.restaurants.models import Restaurant
from apps.transactions.models import Transaction


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
def make_restaurant(db):
    """
    Factory creating restaurants with strictly increasing created_at,
    oldest first, so tie-breaks on age are deterministic.
    """
    base = timezone.now() - timedelta(days=30)
    counter = {'n': 0}

    def _make(name, **kwargs):
        restaurant = Restaurant.objects.create(name=name, **kwargs)
        counter['n'] += 1
        created_at = base + timedelta(minutes=counter['n'])
        Restaurant.objects.filter(id=restaurant.id).update(created_at=created_at)
        restaurant.refresh_from_db()
        return restaurant

    return _make


@pytest.fixture
def starbucks(make_restaurant):
    return make_restaurant(
        'Starbucks',
        address='123 Main St, San Francisco, CA',
        latitude=Decimal('37.774900'),
        longitude=Decimal('-122.419400'),
    )


@pytest.fixture
def chipotle(make_restaurant):
    return make_restaurant('Chipotle', address='789 Mission St, San Francisco, CA')


@pytest.fixture
def make_transaction(db):
    """Factory creating stored transactions directly, bypassing ingestion."""
    counter = {'n': 0}

    def _make(user, amount, restaurant=None, on=None, merchant=None):
        counter['n'] += 1
        return Transaction.objects.create(
            user=user,
            external_id=f'txn-{counter["n"]}',
            amount=Decimal(amount),
            merchant=merchant or (restaurant.name if restaurant else 'Unknown'),
            date=on or date(2024, 1, 15),
            category='Food and Drink',
            restaurant=restaurant,
        )

    return _make
