"""Errors raised by the accounts services."""


class AccountsServiceError(Exception):
    """Root of every accounts service failure."""


class LoginFailedError(AccountsServiceError):
    """Unknown email or wrong password; deliberately does not say which."""


class AccountDisabledError(AccountsServiceError):
    """The credentials are right but the account has been switched off."""
