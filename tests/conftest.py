"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory account repository and recording email sender
- Account service wired to the fakes
- Test client for the real application with the service overridden
- PostgreSQL pool and repository (skipped without a database)
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.adapters.tokens.jwt_issuer import JWTTokenIssuer
from src.api.dependencies import get_account_service
from src.api.main import app
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from tests.fakes import TEST_JWT_SECRET, FakeAccountRepository, RecordingEmailSender


@pytest.fixture
def repository() -> FakeAccountRepository:
    """Fresh in-memory repository per test."""
    return FakeAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    """Fresh recording email sender per test."""
    return RecordingEmailSender()


@pytest.fixture
def token_issuer() -> JWTTokenIssuer:
    """JWT issuer with a fixed test secret."""
    return JWTTokenIssuer(secret=TEST_JWT_SECRET)


@pytest.fixture
def service(
    repository: FakeAccountRepository,
    email_sender: RecordingEmailSender,
    token_issuer: JWTTokenIssuer,
) -> AccountService:
    """Account service over the fakes, with the cheapest bcrypt cost."""
    return AccountService(
        repository=repository,
        email_sender=email_sender,
        token_issuer=token_issuer,
        base_url="http://testserver",
        bcrypt_cost=4,
    )


@pytest.fixture
def client(service: AccountService) -> Generator[TestClient, None, None]:
    """
    Test client for the real application with the service swapped for fakes.

    The lifespan is not entered, so no database pool is created.
    """
    app.dependency_overrides[get_account_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """
    Connection pool against the configured PostgreSQL database.

    Tests using it are skipped when no database is reachable.
    Migrations run once per session.
    """
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    try:
        pool.wait(timeout=3.0)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def pg_repository(pg_pool: ConnectionPool) -> Generator[PostgresAccountRepository, None, None]:
    """Postgres repository over an emptied users table."""
    with pg_pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield PostgresAccountRepository(pg_pool)
