"""Transaction normalization service: validate and shape raw aggregator records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from django.conf import settings

from .exceptions import InvalidTransactionRecordError


REQUIRED_FIELDS = ('id', 'amount', 'merchant', 'date', 'category')

CENT = Decimal('0.01')


@dataclass(frozen=True)
class NormalizedTransaction:
    """Canonical transaction record, ready to persist."""

    external_id: str
    amount: Decimal
    merchant: str
    date: date
    category: str
    restaurant_id: Optional[Any] = field(default=None)


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    # A zero amount counts as missing, like any other falsy value
    return not value


def normalize_transaction(raw: Mapping[str, Any]) -> NormalizedTransaction:
    """
    Validate a raw aggregator record and coerce it to the stored schema.

    Args:
        raw: Mapping with id, amount, merchant, date and category

    Returns:
        NormalizedTransaction with restaurant_id set to None

    Raises:
        InvalidTransactionRecordError: If a field is missing, empty or malformed
    """
    if not isinstance(raw, Mapping):
        raise InvalidTransactionRecordError(
            f"Invalid transaction record: expected a mapping, got {type(raw).__name__}",
            record=raw,
        )

    for name in REQUIRED_FIELDS:
        if _is_missing(raw.get(name)):
            raise InvalidTransactionRecordError(
                f"Invalid transaction record: missing required field '{name}'",
                field=name,
                record=raw,
            )

    try:
        amount = Decimal(str(raw['amount'])).quantize(CENT)
    except (InvalidOperation, ValueError):
        raise InvalidTransactionRecordError(
            f"Invalid transaction record: amount {raw['amount']!r} is not a number",
            field='amount',
            record=raw,
        )
    if not amount.is_finite():
        raise InvalidTransactionRecordError(
            f"Invalid transaction record: amount {raw['amount']!r} is not a number",
            field='amount',
            record=raw,
        )

    date_text = str(raw['date']).strip()
    try:
        parsed_date = datetime.strptime(date_text[:10], '%Y-%m-%d').date()
    except ValueError:
        raise InvalidTransactionRecordError(
            f"Invalid transaction record: date {date_text!r} is not YYYY-MM-DD",
            field='date',
            record=raw,
        )

    return NormalizedTransaction(
        external_id=str(raw['id']).strip(),
        amount=amount,
        merchant=str(raw['merchant']).strip(),
        date=parsed_date,
        category=str(raw['category']).strip(),
    )


def is_restaurant_transaction(raw: Mapping[str, Any]) -> bool:
    """
    Decide whether a raw record is restaurant spending.

    True when the category is one of RESTAURANT_CATEGORIES or the merchant
    text contains one of RESTAURANT_MERCHANT_KEYWORDS (case-insensitive).
    """
    category = str(raw.get('category') or '').strip().lower()
    categories = {c.strip().lower() for c in settings.RESTAURANT_CATEGORIES if c.strip()}
    if category and category in categories:
        return True

    merchant = str(raw.get('merchant') or '').lower()
    keywords = [k.strip().lower() for k in settings.RESTAURANT_MERCHANT_KEYWORDS if k.strip()]
    return any(keyword in merchant for keyword in keywords)


def filter_restaurant_transactions(records):
    """Keep only the restaurant-like records, preserving order."""
    return [raw for raw in records if is_restaurant_transaction(raw)]
