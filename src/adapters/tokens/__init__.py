"""Token adapters - Session token signing."""

from .jwt_issuer import JWTTokenIssuer

__all__ = ["JWTTokenIssuer"]
