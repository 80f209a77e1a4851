"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them. Adapters
implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class SubscriptionTier(str, Enum):
    """Fixed set of subscription tiers. New accounts start on STARTER."""

    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"


class DeliveryPolicy(str, Enum):
    """
    What registration does when the verification email cannot be sent.

    - STRICT: propagate the delivery error, keep the persisted account
    - BEST_EFFORT: log the failure and report registration as successful
    - ROLLBACK: delete the just-created account, then propagate the error
    """

    STRICT = "strict"
    BEST_EFFORT = "best_effort"
    ROLLBACK = "rollback"


@dataclass
class Account:
    """
    Persisted user account.

    Verification lifecycle (forward-only):
        unverified (verification_token set) -> verified (verification_token None)

    Session axis (independent of verification):
        logged out (session_token None) <-> logged in (session_token set)
    """

    id: str
    email: str
    password_hash: str
    verification_token: str | None
    avatar_url: str
    subscription: SubscriptionTier = SubscriptionTier.STARTER
    verified: bool = False
    session_token: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class VerificationEmail:
    """Message carrying the verification link to a freshly registered address."""

    to: str
    subject: str
    html: str


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def create(
        self,
        account_id: str,
        email: str,
        password_hash: str,
        avatar_url: str,
        verification_token: str,
    ) -> Account | None:
        """
        Atomically insert a new unverified account.

        Returns:
            The created account, or None if the email is already registered
        """
        ...

    def delete(self, account_id: str) -> None:
        """Remove an account (used only to compensate a failed registration)."""
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Look up an account by normalized email."""
        ...

    def find_by_id(self, account_id: str) -> Account | None:
        """Look up an account by identifier."""
        ...

    def verify(self, verification_token: str) -> bool:
        """
        Mark the account owning this token as verified and clear the token.

        Returns:
            True if an account matched, False otherwise
        """
        ...

    def set_session_token(self, account_id: str, token: str | None) -> None:
        """Store (or clear, with None) the active session token."""
        ...

    def update_subscription(
        self, account_id: str, subscription: SubscriptionTier
    ) -> Account | None:
        """Change the subscription tier, returning the updated account."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, message: VerificationEmail) -> None:
        """
        Deliver a verification message.

        Raises:
            DeliveryError: If the transport does not accept the message
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for signing and verifying session tokens."""

    def issue(self, account: Account) -> str:
        """Sign a token binding the account's id, email and subscription."""
        ...

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry, returning the token claims.

        Raises:
            NotAuthorized: If the token is malformed, tampered with or expired
        """
        ...
