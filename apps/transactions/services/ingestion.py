"""Transaction ingestion service: dedupe, persist and link to restaurants."""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional
import logging

from django.db import transaction, DatabaseError, IntegrityError
from django.db.models import TextChoices

from apps.accounts.models import User
from apps.restaurants.services import match_or_create_restaurant, MatchResult
from ..models import Transaction
from .exceptions import InvalidTransactionRecordError
from .normalization import normalize_transaction


logger = logging.getLogger(__name__)


class IngestStatus(TextChoices):
    CREATED = 'created', 'Created'
    SKIPPED = 'skipped', 'Skipped'
    FAILED = 'failed', 'Failed'


class IngestReason(TextChoices):
    DUPLICATE = 'duplicate', 'Already imported'
    INVALID_RECORD = 'invalid_record', 'Invalid record'
    INTEGRITY = 'integrity', 'Integrity constraint violated'
    DATABASE = 'database', 'Database error'


@dataclass
class IngestOutcome:
    """What happened to one record of an ingestion batch."""

    status: str
    external_id: Optional[str] = None
    reason: str = ''
    detail: str = ''
    transaction: Optional[Transaction] = None
    match: Optional[MatchResult] = None


@dataclass
class IngestReport:
    """Per-record outcomes of one ingestion batch."""

    outcomes: List[IngestOutcome] = field(default_factory=list)

    def _count(self, status) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def created(self) -> int:
        return self._count(IngestStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(IngestStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(IngestStatus.FAILED)

    def as_dict(self) -> dict:
        return {
            'created': self.created,
            'skipped': self.skipped,
            'failed': self.failed,
            'outcomes': [
                {
                    'external_id': outcome.external_id,
                    'status': outcome.status,
                    'reason': outcome.reason,
                    'restaurant_id': (
                        str(outcome.match.restaurant_id)
                        if outcome.match and outcome.match.restaurant_id else None
                    ),
                }
                for outcome in self.outcomes
            ],
        }


def _classify_persistence_error(error: DatabaseError) -> str:
    """Map a database error to an ingestion reason."""
    if isinstance(error, IntegrityError):
        message = str(error).lower()
        if 'unique' in message or 'duplicate' in message:
            return IngestReason.DUPLICATE
        return IngestReason.INTEGRITY
    return IngestReason.DATABASE


def ingest_transaction(*, user: User, raw: Mapping[str, Any]) -> IngestOutcome:
    """
    Ingest one raw record for a user.

    This operation:
    1. Normalizes the record (invalid records fail without side effects)
    2. Skips records whose (user, external id) pair is already stored
    3. Inserts the transaction with no restaurant
    4. Resolves the merchant to a restaurant and links it

    Persistence errors are logged and reported in the outcome, never raised.

    Args:
        user: Owner of the transaction
        raw: Raw aggregator record (id, amount, merchant, date, category)

    Returns:
        IngestOutcome describing what happened
    """
    try:
        record = normalize_transaction(raw)
    except InvalidTransactionRecordError as e:
        logger.warning("Rejected transaction record for user %s: %s", user.id, e)
        external_id = raw.get('id') if hasattr(raw, 'get') else None
        return IngestOutcome(
            status=IngestStatus.FAILED,
            external_id=str(external_id) if external_id else None,
            reason=IngestReason.INVALID_RECORD,
            detail=str(e),
        )

    try:
        with transaction.atomic():
            if Transaction.objects.filter(user=user, external_id=record.external_id).exists():
                logger.debug("Transaction %s already exists, skipping", record.external_id)
                return IngestOutcome(
                    status=IngestStatus.SKIPPED,
                    external_id=record.external_id,
                    reason=IngestReason.DUPLICATE,
                )

            stored = Transaction.objects.create(
                user=user,
                external_id=record.external_id,
                amount=record.amount,
                merchant=record.merchant,
                date=record.date,
                category=record.category,
                restaurant=None,
            )
    except DatabaseError as e:
        reason = _classify_persistence_error(e)
        if reason == IngestReason.DUPLICATE:
            # Lost a race with a concurrent import of the same record
            logger.info("Transaction %s inserted concurrently, skipping", record.external_id)
            return IngestOutcome(
                status=IngestStatus.SKIPPED,
                external_id=record.external_id,
                reason=reason,
            )
        logger.error(
            "Error storing transaction %s for user %s (%s): %s",
            record.external_id, user.id, reason, e
        )
        return IngestOutcome(
            status=IngestStatus.FAILED,
            external_id=record.external_id,
            reason=reason,
            detail=str(e),
        )

    match = match_or_create_restaurant(merchant=record.merchant)

    if match.restaurant is not None:
        try:
            with transaction.atomic():
                Transaction.objects.filter(id=stored.id).update(restaurant=match.restaurant)
            stored.restaurant = match.restaurant
        except DatabaseError as e:
            logger.error(
                "Error linking transaction %s to restaurant %s: %s",
                record.external_id, match.restaurant_id, e
            )
    else:
        logger.warning(
            "No restaurant for transaction %s (merchant %r): %s",
            record.external_id, record.merchant, match.reason
        )

    return IngestOutcome(
        status=IngestStatus.CREATED,
        external_id=record.external_id,
        transaction=stored,
        match=match,
    )


def ingest_transactions(*, user: User, records: Iterable[Mapping[str, Any]]) -> IngestReport:
    """
    Ingest a batch of restaurant-like raw records for a user.

    Records are processed one by one, in order. A failing record never
    aborts the batch, so re-running a batch is always safe: records that
    were stored the first time are skipped as duplicates.

    Args:
        user: Owner of the transactions
        records: Raw aggregator records, already filtered to restaurant spending

    Returns:
        IngestReport with one outcome per record

    Example:
        >>> report = ingest_transactions(user=user, records=[{
        ...     'id': 't1', 'amount': 25.50, 'merchant': 'Starbucks',
        ...     'date': '2024-01-15', 'category': 'Food and Drink',
        ... }])
        >>> report.created
        1
    """
    report = IngestReport()

    for raw in records:
        report.outcomes.append(ingest_transaction(user=user, raw=raw))

    logger.info(
        "Ingested transactions for user %s: %d created, %d skipped, %d failed",
        user.id, report.created, report.skipped, report.failed
    )
    return report
