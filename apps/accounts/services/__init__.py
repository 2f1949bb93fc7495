"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    LoginFailedError,
    AccountDisabledError,
)
from .login import log_in
from .profile import get_user_profile, update_user_profile

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'LoginFailedError',
    'AccountDisabledError',
    # Login
    'log_in',
    # Profile
    'get_user_profile',
    'update_user_profile',
]
