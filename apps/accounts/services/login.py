"""Password login for diners."""

import logging

from django.contrib.auth.models import update_last_login

from ..models import User
from .exceptions import LoginFailedError, AccountDisabledError


logger = logging.getLogger(__name__)


def log_in(*, email: str, password: str) -> User:
    """
    Check a diner's credentials and stamp their last login.

    Email lookup is case-insensitive. A disabled account is only reported
    as such once the password has been verified.

    Raises:
        LoginFailedError: Unknown email or wrong password
        AccountDisabledError: Valid credentials for a deactivated account
    """
    user = User.objects.filter(email__iexact=email.strip()).first()

    if user is None or not user.check_password(password):
        logger.info("Failed login attempt for %s", email)
        raise LoginFailedError("Invalid email or password")

    if not user.is_active:
        raise AccountDisabledError("This account has been deactivated")

    update_last_login(None, user)
    return user
