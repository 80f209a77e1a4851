"""
Test doubles for the account service ports.

- FakeAccountRepository: in-memory store mimicking the Postgres adapter
- RecordingEmailSender: keeps verification messages instead of sending them
"""

import re
import threading
from dataclasses import replace
from datetime import datetime, timezone

from src.domain.exceptions import DeliveryError
from src.domain.ports import Account, SubscriptionTier, VerificationEmail

TEST_JWT_SECRET = "test-secret-for-signing-session-tokens-0123456789"

_LINK_RE = re.compile(r'href="[^"]*/users/verify/([^"]+)"')


class FakeAccountRepository:
    """In-memory repository mimicking Postgres-backed behaviors."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = threading.Lock()

    def create(
        self,
        account_id: str,
        email: str,
        password_hash: str,
        avatar_url: str,
        verification_token: str,
    ) -> Account | None:
        with self._lock:
            if any(a.email == email for a in self._accounts.values()):
                return None
            now = datetime.now(timezone.utc)
            account = Account(
                id=account_id,
                email=email,
                password_hash=password_hash,
                verification_token=verification_token,
                avatar_url=avatar_url,
                created_at=now,
                updated_at=now,
            )
            self._accounts[account_id] = account
            return replace(account)

    def delete(self, account_id: str) -> None:
        with self._lock:
            self._accounts.pop(account_id, None)

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            for account in self._accounts.values():
                if account.email == email:
                    return replace(account)
            return None

    def find_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            return replace(account) if account else None

    def verify(self, verification_token: str) -> bool:
        with self._lock:
            for account in self._accounts.values():
                if not account.verified and account.verification_token == verification_token:
                    account.verified = True
                    account.verification_token = None
                    account.updated_at = datetime.now(timezone.utc)
                    return True
            return False

    def set_session_token(self, account_id: str, token: str | None) -> None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is not None:
                account.session_token = token
                account.updated_at = datetime.now(timezone.utc)

    def update_subscription(
        self, account_id: str, subscription: SubscriptionTier
    ) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            account.subscription = subscription
            account.updated_at = datetime.now(timezone.utc)
            return replace(account)

    def all(self) -> list[Account]:
        with self._lock:
            return list(self._accounts.values())


class RecordingEmailSender:
    """Email sender that keeps every message instead of delivering it."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[VerificationEmail] = []
        self.fail = fail

    def send(self, message: VerificationEmail) -> None:
        if self.fail:
            raise DeliveryError()
        self.sent.append(message)

    def last_token(self) -> str:
        """Extract the verification token from the most recent message."""
        match = _LINK_RE.search(self.sent[-1].html)
        assert match is not None, "no verification link in message"
        return match.group(1)


def auth_header(token: str) -> dict[str, str]:
    """Create a bearer Authorization header."""
    return {"Authorization": f"Bearer {token}"}
