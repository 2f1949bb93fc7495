import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.restaurants.models import Restaurant
from apps.restaurants.services import recompute_user_restaurant_stats
from apps.transactions.models import BankLink, Transaction


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def diner(db):
    """Active diner with a known password and no activity yet."""
    return User.objects.create_user(
        email='ana@example.com',
        password='Burrito-Night-42',
        display_name='Ana',
    )


@pytest.fixture
def disabled_diner(db):
    return User.objects.create_user(
        email='gone@example.com',
        password='Burrito-Night-42',
        is_active=False,
    )


@pytest.fixture
def diner_client(api_client, diner):
    """API client carrying the diner's access token."""
    token = RefreshToken.for_user(diner).access_token
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return api_client


@pytest.fixture
def diner_activity(diner):
    """Linked bank, two Chipotle visits and one unmatched purchase."""
    link = BankLink.objects.create(
        user=diner,
        access_token='access-sandbox-ana',
        institution_name='Chase',
    )
    chipotle = Restaurant.objects.create(name='Chipotle')
    for external_id, amount, day in [('c1', '11.25', 3), ('c2', '13.75', 9)]:
        Transaction.objects.create(
            user=diner, external_id=external_id, amount=Decimal(amount),
            merchant='Chipotle', date=date(2024, 2, day), category='Food and Drink',
            restaurant=chipotle,
        )
    Transaction.objects.create(
        user=diner, external_id='u1', amount=Decimal('4.00'),
        merchant='Food Truck', date=date(2024, 2, 10), category='Food and Drink',
    )
    recompute_user_restaurant_stats(user_id=diner.id)
    return link
