"""
Account domain service - Authentication state machine implementation.

This module contains the core business logic for user accounts:
registration, email verification, login, logout, current-user lookup
and subscription changes.

Account State Machine
=====================

Verification axis (forward-only):
    UNVERIFIED -> VERIFIED   (verification token matched, token cleared)

Session axis (independent):
    LOGGED_OUT -> LOGGED_IN  (login success, session token stored)
    LOGGED_IN  -> LOGGED_OUT (logout, session token cleared)

Verification is a precondition the login transition checks, never
performs. A signed session token is only honoured while it equals the
token currently stored on the account, so logout invalidates it
before it expires.
"""

import hashlib
import logging
import secrets
import uuid
from dataclasses import dataclass

import bcrypt

from .exceptions import (
    AccountNotFound,
    AlreadyVerified,
    DeliveryError,
    EmailInUse,
    EmailNotVerified,
    InvalidCredentials,
    NotAuthorized,
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

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify email"

# Compared against when the email is unknown so that login takes the same
# time whether or not the account exists.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


def avatar_url_for(email: str) -> str:
    """Return the Gravatar URL for an email (pure function, no network call)."""
    digest = hashlib.md5(email.strip().lower().encode()).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s=250&d=retro"


@dataclass
class LoginResult:
    """Signed session token plus the account it was issued for."""

    token: str
    account: Account


@dataclass
class AccountService:
    """
    Domain service for user accounts.

    Orchestrates the credential store, password hashing, token signing
    and verification email delivery.
    """

    repository: AccountRepository
    email_sender: EmailSender
    token_issuer: TokenIssuer
    base_url: str = "http://localhost:8080"
    bcrypt_cost: int = 10
    delivery_policy: DeliveryPolicy = DeliveryPolicy.STRICT

    def register(self, email: str, password: str) -> Account:
        """
        Register a new unverified account and send the verification email.

        Args:
            email: User's email address (will be normalized)
            password: User's password (will be hashed)

        Returns:
            The created account

        Raises:
            EmailInUse: If email is already registered
            DeliveryError: If the email could not be sent (STRICT and ROLLBACK policies)
        """
        normalized_email = self._normalize_email(email)
        verification_token = self._generate_verification_token()

        account = self.repository.create(
            account_id=str(uuid.uuid4()),
            email=normalized_email,
            password_hash=self._hash_password(password),
            avatar_url=avatar_url_for(normalized_email),
            verification_token=verification_token,
        )
        if account is None:
            raise EmailInUse()

        logger.info("Registered account %s", account.id)

        try:
            self._send_verification(normalized_email, verification_token)
        except DeliveryError:
            if self.delivery_policy is DeliveryPolicy.BEST_EFFORT:
                logger.warning(
                    "Verification email for account %s not delivered; registration kept",
                    account.id,
                )
                return account
            if self.delivery_policy is DeliveryPolicy.ROLLBACK:
                logger.warning(
                    "Verification email for account %s not delivered; rolling back",
                    account.id,
                )
                try:
                    self.repository.delete(account.id)
                except Exception:
                    logger.exception("Rollback of account %s failed", account.id)
            raise

        return account

    def verify_email(self, verification_token: str) -> None:
        """
        Consume a verification token, marking its account verified.

        Raises:
            VerificationTokenNotFound: If no account holds the token (includes reuse)
        """
        if not self.repository.verify(verification_token):
            raise VerificationTokenNotFound()
        logger.info("Email verification succeeded")

    def resend_verification(self, email: str) -> None:
        """
        Re-send the stored verification token (it is not regenerated).

        Raises:
            UnknownAccount: If no account exists for the email
            AlreadyVerified: If the account is already verified
        """
        account = self.repository.find_by_email(self._normalize_email(email))
        if account is None:
            raise UnknownAccount()
        if account.verified or account.verification_token is None:
            raise AlreadyVerified()

        self._send_verification(account.email, account.verification_token)

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate credentials and start a session.

        Unknown email and wrong password raise the same InvalidCredentials
        error, and both run one bcrypt comparison.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            EmailNotVerified: Account exists but is not verified yet
        """
        account = self.repository.find_by_email(self._normalize_email(email))

        if account is None:
            bcrypt.checkpw(password.encode(), _DUMMY_BCRYPT_HASH)
            raise InvalidCredentials()

        if not account.verified:
            raise EmailNotVerified()

        if not bcrypt.checkpw(password.encode(), account.password_hash.encode()):
            raise InvalidCredentials()

        token = self.token_issuer.issue(account)
        self.repository.set_session_token(account.id, token)
        account.session_token = token

        logger.info("Account %s logged in", account.id)
        return LoginResult(token=token, account=account)

    def logout(self, account: Account) -> None:
        """Clear the account's active session token."""
        self.repository.set_session_token(account.id, None)
        logger.info("Account %s logged out", account.id)

    def current(self, account: Account) -> Account:
        """
        Re-read the authenticated account.

        Raises:
            AccountNotFound: If the account was removed after authentication
        """
        fresh = self.repository.find_by_id(account.id)
        if fresh is None:
            raise AccountNotFound()
        return fresh

    def update_subscription(self, account: Account, subscription: SubscriptionTier) -> Account:
        """
        Change the account's subscription tier.

        Raises:
            AccountNotFound: If the account was removed after authentication
        """
        updated = self.repository.update_subscription(account.id, SubscriptionTier(subscription))
        if updated is None:
            raise AccountNotFound()
        return updated

    def authenticate(self, token: str) -> Account:
        """
        Resolve a bearer token to its account.

        The token must carry a valid signature, be unexpired, and equal the
        session token currently stored on the account.

        Raises:
            NotAuthorized: On any failure
        """
        claims = self.token_issuer.decode(token)

        account_id = claims.get("id")
        if not account_id:
            raise NotAuthorized()

        account = self.repository.find_by_id(str(account_id))
        if account is None or account.session_token is None:
            raise NotAuthorized()

        if not secrets.compare_digest(account.session_token.encode(), token.encode()):
            raise NotAuthorized()

        return account

    def verification_link(self, verification_token: str) -> str:
        """Build the public link that consumes a verification token."""
        return f"{self.base_url.rstrip('/')}/users/verify/{verification_token}"

    def _send_verification(self, email: str, verification_token: str) -> None:
        link = self.verification_link(verification_token)
        self.email_sender.send(
            VerificationEmail(
                to=email,
                subject=VERIFICATION_SUBJECT,
                html=f'<a target="_blank" href="{link}">Click to verify</a>',
            )
        )

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _generate_verification_token(self) -> str:
        """Generate a URL-safe, cryptographically random verification token."""
        return secrets.token_urlsafe(16)

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()
