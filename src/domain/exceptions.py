"""
Domain exceptions - Semantic error types for account workflows.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each concrete error belongs to exactly one error kind; the API layer
maps kinds to HTTP status codes in a single place.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    default_message = "Account error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# Error kinds


class BadRequestError(AccountError):
    """Request is well-formed but not applicable to the account's state."""


class ConflictError(AccountError):
    """Request collides with existing data."""


class NotFoundError(AccountError):
    """Referenced resource does not exist."""


class UnauthorizedError(AccountError):
    """Caller is not (or cannot be) authenticated."""


class DeliveryError(AccountError):
    """Notification transport did not accept the message."""

    default_message = "Verification email could not be sent"


# Concrete errors


class EmailInUse(ConflictError):
    """An account with this email already exists."""

    default_message = "Email in use"


class VerificationTokenNotFound(NotFoundError):
    """No unverified account holds this verification token."""

    default_message = "User not found"


class AccountNotFound(NotFoundError):
    """Authenticated account no longer exists."""

    default_message = "User not found"


class UnknownAccount(UnauthorizedError):
    """Verification resend requested for an email with no account."""

    default_message = "User not found"


class AlreadyVerified(BadRequestError):
    """Verification resend requested for an already verified account."""

    default_message = "Verification has already been passed"


class EmailNotVerified(UnauthorizedError):
    """Login attempted before the email address was verified."""

    default_message = "Email not verified"


class InvalidCredentials(UnauthorizedError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    default_message = "Email or password is wrong"


class NotAuthorized(UnauthorizedError):
    """Bearer token missing, invalid, expired or no longer active."""

    default_message = "Not authorized"
