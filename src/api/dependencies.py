"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes, plus the
bearer-token authorization dependency.
"""

from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.sender import SmtpEmailSender
from src.adapters.tokens.jwt_issuer import JWTTokenIssuer
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from src.domain.exceptions import NotAuthorized
from src.domain.ports import Account, AccountRepository, EmailSender, TokenIssuer

# Module-level singleton - ConsoleEmailSender is stateless
_console_email_sender = ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> AccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_email_sender() -> EmailSender:
    """Get the configured email sender (console by default)."""
    settings = get_settings()
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )
    return _console_email_sender


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Get the JWT issuer built once from process settings."""
    settings = get_settings()
    return JWTTokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.jwt_ttl_seconds,
    )


def get_account_service(
    repository: AccountRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the repository, email sender and token issuer.
    """
    settings = get_settings()
    return AccountService(
        repository=repository,
        email_sender=email_sender,
        token_issuer=token_issuer,
        base_url=settings.base_url,
        bcrypt_cost=settings.bcrypt_cost,
        delivery_policy=settings.delivery_policy,
    )


# Bearer security scheme for OpenAPI documentation.
# auto_error=False so a missing header goes through NotAuthorized like any other failure.
http_bearer = HTTPBearer(auto_error=False)


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    service: AccountService = Depends(get_account_service),
) -> Account:
    """
    Resolve the request's bearer token to the authenticated account.

    Rejects with NotAuthorized when the header is missing, the token is
    invalid or expired, or it is not the account's active session token.
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthorized()
    return service.authenticate(credentials.credentials)
