"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Atomicity:
----------
Every operation is a single SQL statement, so each one is atomic at the
row level without explicit locking:

1. **create()**: INSERT ... ON CONFLICT (email) DO NOTHING. The UNIQUE
   constraint on email decides concurrent registrations; there is no
   read-then-write window.

2. **verify()**: UPDATE ... WHERE verification_token = %s clears the token
   in the same statement that sets verified, so a token can be consumed
   at most once.
"""

import logging
from pathlib import Path

from psycopg_pool import ConnectionPool

from src.domain.ports import Account, SubscriptionTier

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = """
    id, email, password_hash, verification_token, avatar_url,
    subscription, verified, session_token, created_at, updated_at
"""


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

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

        Args:
            account_id: New account identifier (UUID string)
            email: Normalized email address (lowercase, stripped)
            password_hash: bcrypt-hashed password from domain layer
            avatar_url: Avatar URL derived from the email
            verification_token: One-time email verification token

        Returns:
            The created account, or None if the email is already registered
        """
        sql = f"""
            INSERT INTO users (id, email, password_hash, avatar_url, verification_token)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_ACCOUNT_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (account_id, email, password_hash, avatar_url, verification_token))
            row = cursor.fetchone()
            conn.commit()

        return self._map_row(row) if row is not None else None

    def delete(self, account_id: str) -> None:
        """Remove an account by identifier."""
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM users WHERE id = %s", (account_id,))
            conn.commit()

    def find_by_email(self, email: str) -> Account | None:
        """Look up an account by normalized email."""
        return self._find_one("email = %s", email)

    def find_by_id(self, account_id: str) -> Account | None:
        """Look up an account by identifier."""
        return self._find_one("id = %s", account_id)

    def verify(self, verification_token: str) -> bool:
        """
        Mark the account owning this token as verified and clear the token.

        Returns:
            True if an unverified account held the token, False otherwise
        """
        sql = """
            UPDATE users
            SET verified = TRUE, verification_token = NULL, updated_at = NOW()
            WHERE verification_token = %s AND verified = FALSE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (verification_token,))
            conn.commit()
            return cursor.rowcount == 1

    def set_session_token(self, account_id: str, token: str | None) -> None:
        """Store (or clear, with None) the active session token."""
        sql = """
            UPDATE users
            SET session_token = %s, updated_at = NOW()
            WHERE id = %s
        """

        with self._pool.connection() as conn:
            conn.execute(sql, (token, account_id))
            conn.commit()

    def update_subscription(
        self, account_id: str, subscription: SubscriptionTier
    ) -> Account | None:
        """Change the subscription tier, returning the updated account."""
        sql = f"""
            UPDATE users
            SET subscription = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING {_ACCOUNT_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (subscription.value, account_id))
            row = cursor.fetchone()
            conn.commit()

        return self._map_row(row) if row is not None else None

    def _find_one(self, where: str, value: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM users WHERE {where}"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value,))
            row = cursor.fetchone()

        return self._map_row(row) if row is not None else None

    def _map_row(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain Account dataclass."""
        return Account(
            id=str(row[0]),
            email=row[1],
            password_hash=row[2],
            verification_token=row[3],
            avatar_url=row[4],
            subscription=SubscriptionTier(row[5]),
            verified=row[6],
            session_token=row[7],
            created_at=row[8],
            updated_at=row[9],
        )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
