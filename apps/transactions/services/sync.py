"""Bank sync service: link accounts and run the import pipeline."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.restaurants.services import recompute_user_restaurant_stats
from ..models import BankLink
from .bank_client import BankAggregatorClient, get_bank_client
from .exceptions import BankLinkNotFoundError
from .ingestion import IngestReport, ingest_transactions
from .normalization import filter_restaurant_transactions


logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Summary of one bank sync run."""

    start_date: date
    end_date: date
    fetched: int = 0
    restaurant_transactions: int = 0
    report: IngestReport = field(default_factory=IngestReport)
    stats: List[Any] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'fetched': self.fetched,
            'restaurant_transactions': self.restaurant_transactions,
            'restaurants_visited': len(self.stats),
            **self.report.as_dict(),
        }


def create_link_token(*, user: User, client: Optional[BankAggregatorClient] = None) -> str:
    """Ask the aggregator for a token to start the bank linking flow."""
    client = client or get_bank_client()
    return client.create_link_token(user.id)


@transaction.atomic
def link_bank_account(
    *,
    user: User,
    public_token: str,
    metadata: Optional[Dict[str, Any]] = None,
    client: Optional[BankAggregatorClient] = None
) -> BankLink:
    """
    Exchange a public token and store the resulting access token.

    Args:
        user: User linking the bank
        public_token: Token returned by the aggregator's link flow
        metadata: Link metadata; institution name/id are kept when it is a mapping
        client: Aggregator client (defaults to the configured one)

    Returns:
        Created BankLink

    Raises:
        BankAggregatorError: If the exchange fails
    """
    client = client or get_bank_client()
    metadata = metadata or {}

    access_token = client.exchange_public_token(public_token, metadata)
    institution = metadata.get('institution')
    if not isinstance(institution, Mapping):
        institution = {}

    link = BankLink.objects.create(
        user=user,
        access_token=access_token,
        institution_id=str(institution.get('institution_id') or '')[:100],
        institution_name=str(institution.get('name') or '')[:200],
    )

    logger.info("Stored bank link %s for user %s", link.id, user.id)
    return link


def get_active_bank_link(*, user: User) -> BankLink:
    """
    Get the user's most recent bank link.

    Raises:
        BankLinkNotFoundError: If the user never linked a bank
    """
    link = BankLink.objects.filter(user=user).order_by('-created_at').first()
    if link is None:
        raise BankLinkNotFoundError("No bank account linked for this user")
    return link


def list_linked_accounts(*, user: User, client: Optional[BankAggregatorClient] = None) -> List[Dict[str, Any]]:
    """
    List the accounts behind the user's bank link.

    Raises:
        BankLinkNotFoundError: If the user never linked a bank
        BankAggregatorError: If the aggregator call fails
    """
    link = get_active_bank_link(user=user)
    client = client or get_bank_client()
    return client.list_accounts(link.access_token)


def sync_transactions(
    *,
    user: User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    client: Optional[BankAggregatorClient] = None
) -> SyncResult:
    """
    Import the user's restaurant transactions and refresh their visit stats.

    This operation:
    1. Fetches transactions for the date range from the aggregator
    2. Keeps restaurant-like records only
    3. Ingests them (dedupe, persist, match restaurants)
    4. Recomputes the user's restaurant rollups

    Aggregator errors propagate: without source data there is nothing to do.
    Per-record problems are reported in the result instead.

    Args:
        user: User to sync
        start_date: First day (defaults to TRANSACTION_SYNC_DAYS ago)
        end_date: Last day (defaults to today)
        client: Aggregator client (defaults to the configured one)

    Returns:
        SyncResult

    Raises:
        BankLinkNotFoundError: If the user never linked a bank
        BankAggregatorError: If the aggregator call fails
    """
    link = get_active_bank_link(user=user)
    client = client or get_bank_client()

    end_date = end_date or timezone.localdate()
    start_date = start_date or end_date - timedelta(days=settings.TRANSACTION_SYNC_DAYS)

    raw_transactions = client.list_transactions(link.access_token, start_date, end_date)
    restaurant_transactions = filter_restaurant_transactions(raw_transactions)

    logger.info(
        "Fetched %d transactions for user %s, %d look like restaurant spending",
        len(raw_transactions), user.id, len(restaurant_transactions)
    )

    report = ingest_transactions(user=user, records=restaurant_transactions)
    stats = recompute_user_restaurant_stats(user_id=user.id)

    link.last_synced_at = timezone.now()
    link.save(update_fields=['last_synced_at'])

    return SyncResult(
        start_date=start_date,
        end_date=end_date,
        fetched=len(raw_transactions),
        restaurant_transactions=len(restaurant_transactions),
        report=report,
        stats=stats,
    )
