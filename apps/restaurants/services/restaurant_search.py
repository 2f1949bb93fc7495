"""Restaurant search and lookup service."""

from django.core.exceptions import ValidationError
from django.db.models import Count, Q, QuerySet
from typing import Optional
from uuid import UUID

from ..models import Restaurant
from .exceptions import RestaurantNotFoundError


def search_restaurants(
    *,
    search: Optional[str] = None,
    visited_by: Optional[UUID] = None
) -> QuerySet[Restaurant]:
    """
    Search and filter restaurants.

    Args:
        search: Search term for name and address
        visited_by: Only restaurants this user has a visit rollup for

    Returns:
        QuerySet of Restaurant ordered by name, annotated with diner_count
    """
    queryset = Restaurant.objects.annotate(diner_count=Count('user_stats', distinct=True))

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(address__icontains=search)
        )

    if visited_by:
        queryset = queryset.filter(user_stats__user_id=visited_by)

    return queryset.order_by('name', 'created_at')


def get_restaurant_by_id(*, restaurant_id: UUID) -> Restaurant:
    """
    Get restaurant by ID.

    Raises:
        RestaurantNotFoundError: If restaurant doesn't exist
    """
    try:
        return Restaurant.objects.get(id=restaurant_id)
    except (Restaurant.DoesNotExist, ValidationError):
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")
