"""
JWT token issuer adapter - Implements TokenIssuer protocol.

Signs and verifies session tokens with PyJWT. The signing secret is
passed in at construction from process settings, never read from the
environment here.
"""

import time
import uuid
from typing import Any

import jwt

from src.domain.exceptions import NotAuthorized
from src.domain.ports import Account


class JWTTokenIssuer:
    """
    Implements TokenIssuer protocol via HMAC-signed JWTs.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 86400) -> None:
        """
        Initialize issuer with signing configuration.

        Args:
            secret: HMAC signing secret
            algorithm: JWT signing algorithm
            ttl_seconds: Token validity window (default 24 hours)
        """
        self._secret = secret
        self._algorithm = algorithm
        self._ttl_seconds = ttl_seconds

    def issue(self, account: Account) -> str:
        """
        Create a signed JWT binding the account identity.

        Claims: id, email, subscription, iat, exp, and a unique jti so that
        two logins in the same second still yield distinct tokens.
        """
        now = int(time.time())
        payload: dict[str, Any] = {
            "id": account.id,
            "email": account.email,
            "subscription": account.subscription.value,
            "iat": now,
            "exp": now + self._ttl_seconds,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry, returning the token claims.

        Raises:
            NotAuthorized: If the token is malformed, tampered with or expired
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise NotAuthorized() from e
