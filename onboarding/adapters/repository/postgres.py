"""
PostgreSQL repository adapters - Implement the AccountRepository and
CompanyRepository protocols.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Duplicate emails are rejected by the UNIQUE constraint on accounts.email
via INSERT ... ON CONFLICT DO NOTHING; the service-level existence check
is only an optimisation. external_id is written once at insert and never
updated.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from onboarding.domain.models import (
    Account,
    CompanyProfile,
    Gender,
    PasswordChangeResult,
    SignupType,
)
from onboarding.domain.passwords import PasswordHasher

logger = logging.getLogger(__name__)

ACCOUNT_COLUMNS = (
    "id, email, full_name, gender, mobile_no, signup_type, "
    "is_email_verified, is_mobile_verified, external_id, created_at"
)

# Columns callers may pass to update_profile(); anything else is rejected.
PROFILE_COLUMNS = frozenset({"full_name", "gender"})

COMPANY_COLUMNS = frozenset(
    {
        "company_name",
        "address",
        "city",
        "state",
        "country",
        "postal_code",
        "website",
        "industry",
        "founded_date",
        "description",
        "social_links",
        "logo_url",
        "banner_url",
    }
)


def _to_account(row: dict[str, Any]) -> Account:
    return Account(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        gender=Gender(row["gender"]) if row["gender"] else None,
        mobile_no=row["mobile_no"],
        signup_type=SignupType(row["signup_type"]),
        is_email_verified=row["is_email_verified"],
        is_mobile_verified=row["is_mobile_verified"],
        external_id=row["external_id"],
        created_at=row["created_at"],
    )


def _to_company(row: dict[str, Any]) -> CompanyProfile:
    return CompanyProfile(**row)


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries; dynamic column names go through
    psycopg.sql.Identifier after whitelisting.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def _fetch_account(self, query: str, params: tuple) -> Account | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, params)
            row = cursor.fetchone()
            conn.commit()
        return _to_account(row) if row is not None else None

    def find_by_id(self, account_id: int) -> Account | None:
        return self._fetch_account(
            f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE id = %s", (account_id,)
        )

    def find_by_email(self, email: str) -> Account | None:
        return self._fetch_account(
            f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE email = %s", (email,)
        )

    def find_credentials(self, email: str) -> tuple[Account, str] | None:
        query = f"SELECT {ACCOUNT_COLUMNS}, password_hash FROM accounts WHERE email = %s"
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (email,))
            row = cursor.fetchone()
            conn.commit()
        if row is None:
            return None
        return _to_account(row), row["password_hash"]

    def create_account(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        gender: str | None,
        mobile_no: str,
        signup_type: SignupType,
        external_id: str | None,
    ) -> Account | None:
        """
        Insert a new account.

        Returns:
            The created account, or None when the email is already taken
            (ON CONFLICT DO NOTHING yields no row)
        """
        query = f"""
            INSERT INTO accounts
                (email, password_hash, full_name, gender, mobile_no, signup_type, external_id)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {ACCOUNT_COLUMNS}
        """
        return self._fetch_account(
            query,
            (
                email,
                password_hash,
                full_name,
                gender,
                mobile_no,
                SignupType(signup_type).value,
                external_id,
            ),
        )

    def mark_email_verified(self, account_id: int) -> Account | None:
        return self._fetch_account(
            "UPDATE accounts SET is_email_verified = TRUE WHERE id = %s "
            f"RETURNING {ACCOUNT_COLUMNS}",
            (account_id,),
        )

    def mark_mobile_verified(self, account_id: int) -> Account | None:
        return self._fetch_account(
            "UPDATE accounts SET is_mobile_verified = TRUE WHERE id = %s "
            f"RETURNING {ACCOUNT_COLUMNS}",
            (account_id,),
        )

    def update_profile(self, account_id: int, fields: dict[str, Any]) -> Account | None:
        unknown = set(fields) - PROFILE_COLUMNS
        if unknown or not fields:
            raise ValueError(f"Cannot update account columns: {sorted(unknown) or 'none given'}")

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in fields
        )
        query = sql.SQL("UPDATE accounts SET {} WHERE id = %s RETURNING {}").format(
            assignments, sql.SQL(ACCOUNT_COLUMNS)
        )
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (*fields.values(), account_id))
            row = cursor.fetchone()
            conn.commit()
        return _to_account(row) if row is not None else None

    def update_phone(self, account_id: int, mobile_no: str) -> Account | None:
        return self._fetch_account(
            f"""
            UPDATE accounts SET mobile_no = %s, is_mobile_verified = FALSE
            WHERE id = %s
            RETURNING {ACCOUNT_COLUMNS}
            """,
            (mobile_no, account_id),
        )

    def change_password(
        self,
        account_id: int,
        current_password: str,
        new_password: str,
        hasher: PasswordHasher,
    ) -> PasswordChangeResult:
        """
        Read, verify and replace the password hash on one checked-out connection.

        Two autocommit-style statements, not a transaction: concurrent
        changes for the same account are not serialized here.
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT password_hash FROM accounts WHERE id = %s", (account_id,))
            row = cursor.fetchone()
            conn.commit()
            if row is None:
                return PasswordChangeResult.NOT_FOUND

            if not hasher.verify(current_password, row[0]):
                return PasswordChangeResult.WRONG_PASSWORD

            cursor.execute(
                "UPDATE accounts SET password_hash = %s WHERE id = %s",
                (hasher.hash(new_password), account_id),
            )
            conn.commit()
            return PasswordChangeResult.SUCCESS

    def delete_account(self, account_id: int) -> bool:
        """Remove an account. Used by test harnesses only."""
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM accounts WHERE id = %s", (account_id,))
            conn.commit()
            return cursor.rowcount == 1


class PostgresCompanyRepository:
    """Implements CompanyRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_owner(self, owner_id: int) -> CompanyProfile | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute("SELECT * FROM company_profiles WHERE owner_id = %s", (owner_id,))
            row = cursor.fetchone()
            conn.commit()
        return _to_company(row) if row is not None else None

    def create(self, owner_id: int, fields: dict[str, Any]) -> CompanyProfile | None:
        """Returns None when the owner already has a profile (UNIQUE owner_id)."""
        values = self._adapt(fields)
        columns = [sql.Identifier("owner_id")] + [sql.Identifier(c) for c in values]
        query = sql.SQL(
            "INSERT INTO company_profiles ({}) VALUES ({}) "
            "ON CONFLICT (owner_id) DO NOTHING RETURNING *"
        ).format(
            sql.SQL(", ").join(columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (owner_id, *values.values()))
            row = cursor.fetchone()
            conn.commit()
        return _to_company(row) if row is not None else None

    def update(self, owner_id: int, fields: dict[str, Any]) -> CompanyProfile | None:
        values = self._adapt(fields)
        if not values:
            raise ValueError("No company columns to update")
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in values
        )
        query = sql.SQL(
            "UPDATE company_profiles SET {}, updated_at = NOW() WHERE owner_id = %s RETURNING *"
        ).format(assignments)
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (*values.values(), owner_id))
            row = cursor.fetchone()
            conn.commit()
        return _to_company(row) if row is not None else None

    def _adapt(self, fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - COMPANY_COLUMNS
        if unknown:
            raise ValueError(f"Cannot write company columns: {sorted(unknown)}")
        values = dict(fields)
        if values.get("social_links") is not None:
            values["social_links"] = Jsonb(values["social_links"])
        return values


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).
    """
    # Structure: onboarding/adapters/repository/postgres.py -> migrations/
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
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
