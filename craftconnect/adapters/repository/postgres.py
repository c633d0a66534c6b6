"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
account repository port using psycopg3 with raw SQL.

Email uniqueness is enforced by a UNIQUE constraint. create_account()
uses INSERT ... ON CONFLICT DO NOTHING so that two concurrent creations
for the same email yield exactly one row; the loser gets EmailTaken.

Every psycopg error is translated into the domain's RepositoryError so
that the transport layer can report it as a retryable dependency failure.
"""

import logging
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from craftconnect.domain.exceptions import EmailTaken, RepositoryError
from craftconnect.domain.models import (
    Account,
    Coordinates,
    NewAccount,
    Role,
    Service,
    ServiceOffer,
)

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = """
    id, name, email, password_hash, phone, role, profile_completed,
    address, longitude, latitude, service_ids
"""


def _as_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _row_to_account(row: dict[str, Any]) -> Account:
    location = None
    if row["longitude"] is not None and row["latitude"] is not None:
        location = Coordinates(longitude=row["longitude"], latitude=row["latitude"])
    return Account(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        profile_completed=row["profile_completed"],
        phone=row["phone"],
        address=row["address"],
        location=location,
        services_offered=[str(service_id) for service_id in row["service_ids"] or []],
    )


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

    def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s"
        row = self._fetch_one(sql, (email,))
        return _row_to_account(row) if row is not None else None

    def find_by_id(self, account_id: str) -> Account | None:
        key = _as_uuid(account_id)
        if key is None:
            return None
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s"
        row = self._fetch_one(sql, (key,))
        return _row_to_account(row) if row is not None else None

    def create_account(self, account: NewAccount) -> Account:
        """
        Insert a new account.

        Uses INSERT ... ON CONFLICT (email) DO NOTHING RETURNING; no row
        back means the email is already taken.

        Raises:
            EmailTaken: If an account with this email already exists
            RepositoryError: On database failure
        """
        sql = f"""
            INSERT INTO accounts (name, email, password_hash, phone, role, profile_completed)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_ACCOUNT_COLUMNS}
        """
        params = (
            account.name,
            account.email,
            account.password_hash,
            account.phone,
            account.role.value,
            account.profile_completed,
        )
        row = self._fetch_one(sql, params)
        if row is None:
            raise EmailTaken(account.email)
        return _row_to_account(row)

    def create_service(self, professional_id: str, offer: ServiceOffer) -> Service:
        sql = """
            INSERT INTO services (professional_id, name, type, rate, description)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id, professional_id, name, type, rate, description
        """
        key = _as_uuid(professional_id)
        if key is None:
            raise RepositoryError(f"Invalid account id: {professional_id}")
        row = self._fetch_one(sql, (key, offer.name, offer.type, offer.rate, offer.description))
        if row is None:
            raise RepositoryError("Service insert returned no row")
        return Service(
            id=str(row["id"]),
            name=row["name"],
            type=row["type"],
            rate=row["rate"],
            description=row["description"],
            professional_id=str(row["professional_id"]),
        )

    def delete_services(self, service_ids: Sequence[str]) -> None:
        keys = [key for key in (_as_uuid(s) for s in service_ids) if key is not None]
        if not keys:
            return
        self._execute("DELETE FROM services WHERE id = ANY(%s)", (keys,))

    def complete_profile(
        self,
        account_id: str,
        address: str,
        location: Coordinates,
        service_ids: Sequence[str],
    ) -> Account | None:
        key = _as_uuid(account_id)
        if key is None:
            return None
        sql = f"""
            UPDATE accounts
            SET address = %s,
                longitude = %s,
                latitude = %s,
                service_ids = %s,
                profile_completed = TRUE,
                updated_at = NOW()
            WHERE id = %s
            RETURNING {_ACCOUNT_COLUMNS}
        """
        params = (
            address,
            location.longitude,
            location.latitude,
            [uuid.UUID(s) for s in service_ids],
            key,
        )
        row = self._fetch_one(sql, params)
        return _row_to_account(row) if row is not None else None

    def ping(self) -> None:
        self._execute("SELECT 1", ())

    def _fetch_one(self, sql: str, params: Sequence[Any]) -> dict[str, Any] | None:
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
                return row
        except psycopg.Error as exc:
            logger.warning("Database error: %s", exc)
            raise RepositoryError(str(exc)) from exc

    def _execute(self, sql: str, params: Sequence[Any]) -> None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                conn.commit()
        except psycopg.Error as exc:
            logger.warning("Database error: %s", exc)
            raise RepositoryError(str(exc)) from exc


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: craftconnect/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
