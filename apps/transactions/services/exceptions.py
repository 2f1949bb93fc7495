"""Domain-specific exceptions for transactions services."""


class TransactionsServiceError(Exception):
    """Base exception for transactions services."""
    pass


class InvalidTransactionRecordError(TransactionsServiceError):
    """Raised when a raw transaction record is missing or has malformed fields."""

    def __init__(self, message, *, field=None, record=None):
        super().__init__(message)
        self.field = field
        self.record = record


class BankAggregatorError(TransactionsServiceError):
    """Raised when the bank aggregator cannot be reached or rejects a request."""
    pass


class BankLinkNotFoundError(TransactionsServiceError):
    """Raised when the user has not linked a bank account."""
    pass
