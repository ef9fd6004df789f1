"""
Shared fixtures for PostgreSQL-backed tests.

Tests that request `pool` are skipped when the configured database is
unreachable; migrations run once per session.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from onboarding.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresCompanyRepository,
    run_migrations,
)
from onboarding.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Connection pool against DATABASE_URL, migrated."""
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    try:
        pool.wait(timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> ConnectionPool:
    with pool.connection() as conn:
        conn.execute("TRUNCATE company_profiles, accounts RESTART IDENTITY CASCADE")
        conn.commit()
    return pool


@pytest.fixture
def account_repository(clean_database: ConnectionPool) -> PostgresAccountRepository:
    return PostgresAccountRepository(clean_database)


@pytest.fixture
def company_repository(clean_database: ConnectionPool) -> PostgresCompanyRepository:
    return PostgresCompanyRepository(clean_database)
