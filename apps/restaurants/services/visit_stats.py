"""Visit statistics service - per-user restaurant rollups."""

from decimal import Decimal
from typing import List
from uuid import UUID
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Max, Sum, QuerySet

from apps.transactions.models import Transaction
from ..models import Restaurant, UserRestaurantStats
from .exceptions import RestaurantNotFoundError, InvalidStatsOrderingError


logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

STATS_ORDERINGS = {
    'visits': ['-visit_count', '-last_visit'],
    'spend': ['-total_spent', '-visit_count'],
    'recent': ['-last_visit', '-visit_count'],
}


@transaction.atomic
def recompute_user_restaurant_stats(*, user_id: UUID) -> List[UserRestaurantStats]:
    """
    Rebuild every visit rollup of one user from their transactions.

    This is a full recompute, not an incremental update, so it can be
    re-run at any time and concurrent runs converge on the same rows.

    This operation:
    1. Loads the user's transactions that have a restaurant
    2. Groups them by restaurant: count, sum of amounts, latest date
    3. Upserts one UserRestaurantStats row per restaurant
    4. Deletes rollups for restaurants the user no longer has transactions at

    Args:
        user_id: UUID of the user

    Returns:
        List of the user's UserRestaurantStats rows after the recompute

    Example:
        >>> stats = recompute_user_restaurant_stats(user_id=user.id)
        >>> stats[0].visit_count
        3
    """
    groups = (
        Transaction.objects
        .filter(user_id=user_id, restaurant__isnull=False)
        .values('restaurant_id')
        .annotate(
            visit_count=Count('id'),
            total_spent=Sum('amount'),
            last_visit=Max('date'),
        )
        .order_by('restaurant_id')
    )

    seen = []
    for group in groups:
        total_spent = Decimal(group['total_spent'] or 0).quantize(CENT)
        UserRestaurantStats.objects.update_or_create(
            user_id=user_id,
            restaurant_id=group['restaurant_id'],
            defaults={
                'visit_count': group['visit_count'],
                'total_spent': total_spent,
                'last_visit': group['last_visit'],
            },
        )
        seen.append(group['restaurant_id'])

    stale, _ = (
        UserRestaurantStats.objects
        .filter(user_id=user_id)
        .exclude(restaurant_id__in=seen)
        .delete()
    )

    logger.info(
        "Recomputed restaurant stats for user %s: %d restaurants, %d stale rollups removed",
        user_id, len(seen), stale
    )

    return list(
        UserRestaurantStats.objects
        .filter(user_id=user_id)
        .select_related('restaurant')
    )


def recompute_all_restaurant_stats() -> int:
    """
    Recompute rollups for every user that has transactions or rollups.

    Returns:
        Number of users recomputed
    """
    user_ids = set(
        Transaction.objects.values_list('user_id', flat=True).distinct()
    ) | set(
        UserRestaurantStats.objects.values_list('user_id', flat=True).distinct()
    )

    for user_id in user_ids:
        recompute_user_restaurant_stats(user_id=user_id)

    return len(user_ids)


def get_user_restaurant_stats(*, user_id: UUID, ordering: str = 'visits') -> QuerySet:
    """
    Get a user's restaurant rollups.

    Args:
        user_id: UUID of the user
        ordering: 'visits' (most visited), 'spend' (most spent) or 'recent'

    Returns:
        QuerySet of UserRestaurantStats with restaurants joined

    Raises:
        InvalidStatsOrderingError: If ordering is unknown
    """
    if ordering not in STATS_ORDERINGS:
        raise InvalidStatsOrderingError(
            f"Unknown ordering '{ordering}', expected one of: {', '.join(STATS_ORDERINGS)}"
        )

    return (
        UserRestaurantStats.objects
        .filter(user_id=user_id)
        .select_related('restaurant')
        .order_by(*STATS_ORDERINGS[ordering])
    )


def get_user_spending_summary(*, user_id: UUID) -> dict:
    """
    Summarize a user's restaurant spending across all rollups.

    Returns:
        Dictionary with:
        - restaurant_count: int - Distinct restaurants visited
        - total_visits: int - Sum of visit counts
        - total_spent: Decimal - Sum of spend
        - last_visit: date or None - Most recent visit anywhere
    """
    totals = UserRestaurantStats.objects.filter(user_id=user_id).aggregate(
        restaurant_count=Count('id'),
        total_visits=Sum('visit_count'),
        total_spent=Sum('total_spent'),
        last_visit=Max('last_visit'),
    )

    return {
        'restaurant_count': totals['restaurant_count'],
        'total_visits': totals['total_visits'] or 0,
        'total_spent': Decimal(totals['total_spent'] or 0).quantize(CENT),
        'last_visit': totals['last_visit'],
    }


def get_restaurant_leaderboard(*, restaurant_id: UUID, limit: int = 10) -> QuerySet:
    """
    Rank diners of one restaurant by how much they spent there.

    Raises:
        RestaurantNotFoundError: If restaurant doesn't exist
    """
    try:
        found = Restaurant.objects.filter(id=restaurant_id).exists()
    except (ValueError, ValidationError):
        found = False
    if not found:
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")

    return (
        UserRestaurantStats.objects
        .filter(restaurant_id=restaurant_id)
        .select_related('user')
        .order_by('-total_spent', '-visit_count')[:max(limit, 0)]
    )
