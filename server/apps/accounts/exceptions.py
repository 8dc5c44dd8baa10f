"""Exceptions for accounts app."""


class AuthenticationFailedError(Exception):
    """Raised when credentials or tokens are rejected."""


class RegistrationConflictError(Exception):
    """Raised when a username, email or Google account is already taken."""
