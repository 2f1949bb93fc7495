"""Services for restaurants business logic."""

from .exceptions import (
    RestaurantsServiceError,
    RestaurantNotFoundError,
    InvalidStatsOrderingError,
)
from .restaurant_matching import (
    normalize_text,
    find_restaurant_candidates,
    match_or_create_restaurant,
    MatchResult,
    MatchStatus,
    MatchType,
    EXACT_MATCH_THRESHOLD,
    DEFAULT_FUZZY_MATCH_THRESHOLD,
)
from .restaurant_search import (
    search_restaurants,
    get_restaurant_by_id,
)
from .visit_stats import (
    recompute_user_restaurant_stats,
    recompute_all_restaurant_stats,
    get_user_restaurant_stats,
    get_user_spending_summary,
    get_restaurant_leaderboard,
    STATS_ORDERINGS,
)

__all__ = [
    # Exceptions
    'RestaurantsServiceError',
    'RestaurantNotFoundError',
    'InvalidStatsOrderingError',
    # Restaurant Matching
    'normalize_text',
    'find_restaurant_candidates',
    'match_or_create_restaurant',
    'MatchResult',
    'MatchStatus',
    'MatchType',
    'EXACT_MATCH_THRESHOLD',
    'DEFAULT_FUZZY_MATCH_THRESHOLD',
    # Restaurant Search
    'search_restaurants',
    'get_restaurant_by_id',
    # Visit Stats
    'recompute_user_restaurant_stats',
    'recompute_all_restaurant_stats',
    'get_user_restaurant_stats',
    'get_user_spending_summary',
    'get_restaurant_leaderboard',
    'STATS_ORDERINGS',
]
