"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the account
authentication state machine. It defines its own port interfaces for
infrastructure abstraction, keeping FastAPI and psycopg out of the domain.
"""

from .accounts import AccountService, LoginResult, avatar_url_for
from .exceptions import (
    AccountError,
    AccountNotFound,
    AlreadyVerified,
    BadRequestError,
    ConflictError,
    DeliveryError,
    EmailInUse,
    EmailNotVerified,
    InvalidCredentials,
    NotAuthorized,
    NotFoundError,
    UnauthorizedError,
    UnknownAccount,
    VerificationTokenNotFound,
)
from .ports import (
    Account,
    AccountRepository,
    DeliveryPolicy,
    EmailSender,
    SubscriptionTier,
    TokenIssuer,
    VerificationEmail,
)

__all__ = [
    "Account",
    "AccountError",
    "AccountNotFound",
    "AccountRepository",
    "AccountService",
    "AlreadyVerified",
    "BadRequestError",
    "ConflictError",
    "DeliveryError",
    "DeliveryPolicy",
    "EmailInUse",
    "EmailNotVerified",
    "EmailSender",
    "InvalidCredentials",
    "LoginResult",
    "NotAuthorized",
    "NotFoundError",
    "SubscriptionTier",
    "TokenIssuer",
    "UnauthorizedError",
    "UnknownAccount",
    "VerificationEmail",
    "VerificationTokenNotFound",
    "avatar_url_for",
]
