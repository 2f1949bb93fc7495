"""Services for transactions business logic."""

from .exceptions import (
    TransactionsServiceError,
    InvalidTransactionRecordError,
    BankAggregatorError,
    BankLinkNotFoundError,
)
from .normalization import (
    normalize_transaction,
    is_restaurant_transaction,
    filter_restaurant_transactions,
    NormalizedTransaction,
    REQUIRED_FIELDS,
)
from .ingestion import (
    ingest_transaction,
    ingest_transactions,
    IngestOutcome,
    IngestReport,
    IngestStatus,
    IngestReason,
)
from .bank_client import (
    BankAggregatorClient,
    MockBankAggregatorClient,
    get_bank_client,
)
from .sync import (
    create_link_token,
    link_bank_account,
    get_active_bank_link,
    list_linked_accounts,
    sync_transactions,
    SyncResult,
)

__all__ = [
    # Exceptions
    'TransactionsServiceError',
    'InvalidTransactionRecordError',
    'BankAggregatorError',
    'BankLinkNotFoundError',
    # Normalization
    'normalize_transaction',
    'is_restaurant_transaction',
    'filter_restaurant_transactions',
    'NormalizedTransaction',
    'REQUIRED_FIELDS',
    # Ingestion
    'ingest_transaction',
    'ingest_transactions',
    'IngestOutcome',
    'IngestReport',
    'IngestStatus',
    'IngestReason',
    # Bank Aggregator
    'BankAggregatorClient',
    'MockBankAggregatorClient',
    'get_bank_client',
    # Sync
    'create_link_token',
    'link_bank_account',
    'get_active_bank_link',
    'list_linked_accounts',
    'sync_transactions',
    'SyncResult',
]
