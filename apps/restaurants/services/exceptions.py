"""Domain-specific exceptions for restaurants services."""


class RestaurantsServiceError(Exception):
    """Base exception for restaurants services."""
    pass


class RestaurantNotFoundError(RestaurantsServiceError):
    """Raised when restaurant does not exist."""
    pass


class InvalidStatsOrderingError(RestaurantsServiceError):
    """Raised when an unknown stats ordering is requested."""
    pass
