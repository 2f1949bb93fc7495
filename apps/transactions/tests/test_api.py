import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from django.urls import reverse
from rest_framework import status

from apps.transactions.models import Transaction, BankLink
from apps.transactions.services import BankAggregatorError


# =============================================================================
# Transaction List Tests
# =============================================================================

@pytest.mark.django_db
class TestTransactionList:
    """Tests for GET /api/transactions/"""

    @pytest.fixture
    def transactions(self, user, other_user, starbucks):
        own = Transaction.objects.create(
            user=user, external_id='t1', amount=Decimal('25.50'), merchant='Starbucks',
            date=date(2024, 1, 15), category='Food and Drink', restaurant=starbucks,
        )
        unmatched = Transaction.objects.create(
            user=user, external_id='t2', amount=Decimal('9.00'), merchant='Food Truck',
            date=date(2024, 1, 10), category='Food and Drink',
        )
        foreign = Transaction.objects.create(
            user=other_user, external_id='t1', amount=Decimal('3.00'), merchant='Starbucks',
            date=date(2024, 1, 16), category='Food and Drink', restaurant=starbucks,
        )
        return own, unmatched, foreign

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('transactions:transaction-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_lists_only_own_transactions(self, authenticated_client, transactions):
        response = authenticated_client.get(reverse('transactions:transaction-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        first = response.data['results'][0]
        assert first['external_id'] == 't1'
        assert first['amount'] == '25.50'
        assert first['restaurant']['name'] == 'Starbucks'
        assert response.data['results'][1]['restaurant'] is None

    def test_filter_by_restaurant(self, authenticated_client, transactions, starbucks):
        url = reverse('transactions:transaction-list')
        response = authenticated_client.get(url, {'restaurant': str(starbucks.id)})

        assert response.data['count'] == 1

    def test_filter_by_malformed_restaurant(self, authenticated_client, transactions):
        url = reverse('transactions:transaction-list')
        response = authenticated_client.get(url, {'restaurant': 'nope'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 0

    def test_cannot_retrieve_other_users_transaction(self, authenticated_client, transactions):
        foreign = transactions[2]
        url = reverse('transactions:transaction-detail', kwargs={'pk': foreign.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_transactions_are_read_only(self, authenticated_client):
        url = reverse('transactions:transaction-list')
        response = authenticated_client.post(url, {'merchant': 'Starbucks'})

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


# =============================================================================
# Bank Link Tests
# =============================================================================

@pytest.mark.django_db
class TestBankLinkEndpoints:
    """Tests for link-token, exchange-token and accounts."""

    def test_link_token(self, authenticated_client):
        response = authenticated_client.post(reverse('transactions:transaction-link-token'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['link_token']

    def test_exchange_token(self, authenticated_client, user):
        url = reverse('transactions:transaction-exchange-token')
        data = {
            'public_token': 'public-sandbox-123',
            'metadata': {'institution': {'institution_id': 'ins_3', 'name': 'Chase'}},
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['institution_name'] == 'Chase'
        assert 'access_token' not in response.data
        assert BankLink.objects.filter(user=user).count() == 1

    def test_exchange_token_with_string_institution(self, authenticated_client, user):
        url = reverse('transactions:transaction-exchange-token')
        data = {'public_token': 'public-x', 'metadata': {'institution': 'Chase'}}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['institution_name'] == ''
        assert BankLink.objects.filter(user=user).count() == 1

    def test_exchange_token_requires_public_token(self, authenticated_client):
        url = reverse('transactions:transaction-exchange-token')
        response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'public_token' in response.data

    def test_accounts_without_link(self, authenticated_client):
        response = authenticated_client.get(reverse('transactions:transaction-accounts'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_accounts(self, authenticated_client, bank_link):
        response = authenticated_client.get(reverse('transactions:transaction-accounts'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['name'] == 'Checking Account'

    def test_accounts_aggregator_failure(self, authenticated_client, bank_link):
        with patch(
            'apps.transactions.views.list_linked_accounts',
            side_effect=BankAggregatorError('Aggregator unavailable'),
        ):
            response = authenticated_client.get(reverse('transactions:transaction-accounts'))

        assert response.status_code == status.HTTP_502_BAD_GATEWAY


# =============================================================================
# Sync Tests
# =============================================================================

@pytest.mark.django_db
class TestSyncEndpoint:
    """Tests for POST /api/transactions/sync/"""

    def test_sync(self, authenticated_client, user, bank_link):
        url = reverse('transactions:transaction-sync')
        response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['fetched'] == 3
        assert response.data['created'] == 3
        assert response.data['restaurants_visited'] == 3
        assert len(response.data['outcomes']) == 3
        assert Transaction.objects.filter(user=user).count() == 3

    def test_sync_with_dates(self, authenticated_client, bank_link):
        url = reverse('transactions:transaction-sync')
        data = {'start_date': '2024-01-01', 'end_date': '2024-01-31'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['start_date'] == '2024-01-01'
        assert response.data['end_date'] == '2024-01-31'

    def test_sync_rejects_inverted_range(self, authenticated_client, bank_link):
        url = reverse('transactions:transaction-sync')
        data = {'start_date': '2024-02-01', 'end_date': '2024-01-01'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_sync_without_link(self, authenticated_client):
        url = reverse('transactions:transaction-sync')
        response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_sync_aggregator_failure(self, authenticated_client, bank_link):
        with patch(
            'apps.transactions.views.sync_transactions',
            side_effect=BankAggregatorError('Aggregator unavailable'),
        ):
            url = reverse('transactions:transaction-sync')
            response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.data['error'] == 'Aggregator unavailable'
