"""
Bank aggregator client.

The pipeline only depends on the shape of the records these clients return:

    transaction: {'id', 'amount', 'merchant', 'date', 'category', 'restaurant_id'}
    account:     {'id', 'name', 'type', 'subtype', 'balance'}

MockBankAggregatorClient serves fixed sample data for development. A real
client subclasses BankAggregatorClient and is selected with the
BANK_AGGREGATOR_CLIENT setting.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional
import copy
import logging
import time

from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import BankAggregatorError


logger = logging.getLogger(__name__)


class BankAggregatorClient(ABC):
    """Interface of a financial data aggregator."""

    @abstractmethod
    def create_link_token(self, user_id) -> str:
        """Token that starts the bank linking flow for a user."""

    @abstractmethod
    def exchange_public_token(self, public_token: str, metadata: Optional[Dict[str, Any]] = None) -> str:
        """Trade the public token from the link flow for an access token."""

    @abstractmethod
    def list_transactions(self, access_token: str, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        """Raw transaction records in the date range, inclusive."""

    @abstractmethod
    def list_accounts(self, access_token: str) -> List[Dict[str, Any]]:
        """Accounts behind the access token."""


MOCK_TRANSACTIONS = [
    {
        'id': 'txn-1',
        'amount': 25.50,
        'merchant': 'Starbucks',
        'date': '2024-01-15',
        'category': 'Food and Drink',
        'restaurant_id': None,
    },
    {
        'id': 'txn-2',
        'amount': 45.00,
        'merchant': "McDonald's",
        'date': '2024-01-14',
        'category': 'Food and Drink',
        'restaurant_id': None,
    },
    {
        'id': 'txn-3',
        'amount': 12.75,
        'merchant': 'Chipotle',
        'date': '2024-01-13',
        'category': 'Food and Drink',
        'restaurant_id': None,
    },
]

MOCK_ACCOUNTS = [
    {
        'id': 'acc-1',
        'name': 'Checking Account',
        'type': 'depository',
        'subtype': 'checking',
        'balance': 1250.75,
    },
]


class MockBankAggregatorClient(BankAggregatorClient):
    """Development client returning fixed sample data for any date range."""

    def create_link_token(self, user_id) -> str:
        logger.info("Creating link token for user %s", user_id)
        return 'link-sandbox-mock-token-for-development'

    def exchange_public_token(self, public_token: str, metadata: Optional[Dict[str, Any]] = None) -> str:
        if not public_token:
            raise BankAggregatorError("Public token is required")
        logger.info("Exchanging public token for access token")
        return f'access-sandbox-{int(time.time() * 1000)}'

    def list_transactions(self, access_token: str, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        if not access_token:
            raise BankAggregatorError("Access token is required")
        logger.info("Fetching transactions from %s to %s", start_date, end_date)
        return copy.deepcopy(MOCK_TRANSACTIONS)

    def list_accounts(self, access_token: str) -> List[Dict[str, Any]]:
        if not access_token:
            raise BankAggregatorError("Access token is required")
        return copy.deepcopy(MOCK_ACCOUNTS)


def get_bank_client() -> BankAggregatorClient:
    """Instantiate the client class named by settings.BANK_AGGREGATOR_CLIENT."""
    client_class = import_string(settings.BANK_AGGREGATOR_CLIENT)
    return client_class()
