"""Repository adapters - Database implementations."""

from .postgres import PostgresAccountRepository, PostgresCompanyRepository, run_migrations

__all__ = ["PostgresAccountRepository", "PostgresCompanyRepository", "run_migrations"]
