"""Restaurant matching service: resolve merchant text to a restaurant."""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from django.conf import settings
from django.db import transaction, DatabaseError
from django.db.models import TextChoices
from django.db.models.functions import Length
from fuzzywuzzy import fuzz

from ..models import Restaurant, UNKNOWN_ADDRESS, normalize_name


logger = logging.getLogger(__name__)

# Thresholds for fuzzy matching
EXACT_MATCH_THRESHOLD = 100
DEFAULT_FUZZY_MATCH_THRESHOLD = 90


class MatchStatus(TextChoices):
    MATCHED = 'matched', 'Matched existing restaurant'
    CREATED = 'created', 'Created new restaurant'
    FAILED = 'failed', 'Failed'


class MatchType(TextChoices):
    EXACT = 'exact', 'Exact normalized name'
    SUBSTRING = 'substring', 'Merchant contained in name'
    FUZZY = 'fuzzy', 'Fuzzy name similarity'


@dataclass(frozen=True)
class MatchResult:
    """Outcome of resolving one merchant name."""

    status: str
    restaurant: Optional[Restaurant] = None
    match_type: str = ''
    score: int = 0
    reason: str = ''

    @property
    def restaurant_id(self):
        return self.restaurant.id if self.restaurant else None

    @property
    def ok(self) -> bool:
        return self.status != MatchStatus.FAILED


def normalize_text(text: str) -> str:
    """
    Normalize text for comparison.

    Args:
        text: Text to normalize

    Returns:
        Lowercase text with punctuation removed and whitespace collapsed
    """
    return normalize_name(text)


def _fuzzy_threshold() -> int:
    return getattr(settings, 'RESTAURANT_FUZZY_MATCH_THRESHOLD', DEFAULT_FUZZY_MATCH_THRESHOLD)


def _tie_break_key(restaurant: Restaurant):
    return (restaurant.created_at, str(restaurant.id))


def find_restaurant_candidates(
    *,
    merchant: str,
    threshold: Optional[int] = None,
    limit: int = 10
) -> List[Tuple[Restaurant, int, str]]:
    """
    Find restaurants the merchant text plausibly refers to, best first.

    Matching runs in three stages and stops at the first stage with hits:
    1. Exact match on the normalized name (oldest restaurant first)
    2. Restaurants whose normalized name contains the normalized merchant
       (shortest name first, then oldest)
    3. Fuzzy match on restaurants sharing the first character, scored with
       fuzz.ratio (highest score first, then oldest)

    Merchants with nothing left after normalization (emoji or punctuation
    only) fall back to a case-insensitive match on the raw name.

    Args:
        merchant: Merchant text from a bank transaction
        threshold: Minimum fuzzy score (0-100), defaults to settings
        limit: Maximum number of candidates returned

    Returns:
        List of (restaurant, similarity_score, match_type) tuples

    Raises:
        DatabaseError: If the restaurant table cannot be read
    """
    normalized = normalize_text(merchant)
    if not normalized:
        raw_name = merchant.strip()
        if not raw_name:
            return []
        raw_matches = (
            Restaurant.objects
            .filter(name__iexact=raw_name)
            .order_by('created_at', 'id')[:limit]
        )
        return [(r, EXACT_MATCH_THRESHOLD, MatchType.EXACT.value) for r in raw_matches]

    # Step 1: Exact normalized match
    exact_matches = (
        Restaurant.objects
        .filter(name_normalized=normalized)
        .order_by('created_at', 'id')[:limit]
    )
    candidates = [(r, EXACT_MATCH_THRESHOLD, MatchType.EXACT.value) for r in exact_matches]
    if candidates:
        return candidates

    # Step 2: Substring match, deterministic shortest-name-first
    substring_matches = (
        Restaurant.objects
        .filter(name_normalized__contains=normalized)
        .annotate(name_length=Length('name_normalized'))
        .order_by('name_length', 'created_at', 'id')[:limit]
    )
    candidates = [
        (r, fuzz.ratio(normalized, r.name_normalized), MatchType.SUBSTRING.value)
        for r in substring_matches
    ]
    if candidates:
        return candidates

    # Step 3: Fuzzy fallback
    if threshold is None:
        threshold = _fuzzy_threshold()

    for restaurant in Restaurant.objects.filter(name_normalized__startswith=normalized[0]):
        score = fuzz.ratio(normalized, restaurant.name_normalized)
        if score >= threshold:
            candidates.append((restaurant, score, MatchType.FUZZY.value))

    candidates.sort(key=lambda c: (-c[1], _tie_break_key(c[0])))
    return candidates[:limit]


def match_or_create_restaurant(*, merchant: str) -> MatchResult:
    """
    Resolve merchant text to a restaurant, creating one when nothing matches.

    New restaurants take the merchant text verbatim as their name, the
    placeholder address and no coordinates. Persistence errors never
    propagate; they are logged and reported as a failed result so callers
    can tell "creation failed" apart from a successful match.

    Args:
        merchant: Merchant text from a bank transaction

    Returns:
        MatchResult with status matched, created or failed
    """
    if not merchant or not merchant.strip():
        return MatchResult(status=MatchStatus.FAILED, reason='empty_merchant')

    try:
        with transaction.atomic():
            candidates = find_restaurant_candidates(merchant=merchant, limit=1)
    except DatabaseError as e:
        logger.error("Restaurant lookup failed for merchant %r: %s", merchant, e)
        return MatchResult(status=MatchStatus.FAILED, reason='lookup_error')

    if candidates:
        restaurant, score, match_type = candidates[0]
        logger.debug(
            "Merchant %r matched restaurant %s (%s, score=%s)",
            merchant, restaurant.id, match_type, score
        )
        return MatchResult(
            status=MatchStatus.MATCHED,
            restaurant=restaurant,
            match_type=match_type,
            score=score,
        )

    try:
        with transaction.atomic():
            restaurant = Restaurant.objects.create(
                name=merchant,
                address=UNKNOWN_ADDRESS,
            )
    except DatabaseError as e:
        logger.error(
            "Restaurant creation failed for merchant %r, continuing without restaurant: %s",
            merchant, e
        )
        return MatchResult(status=MatchStatus.FAILED, reason='create_error')

    logger.info("Created restaurant %s for merchant %r", restaurant.id, merchant)
    return MatchResult(status=MatchStatus.CREATED, restaurant=restaurant)
