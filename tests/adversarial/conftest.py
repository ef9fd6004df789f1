"""
Shared fixtures for adversarial tests.

Reuses the PostgreSQL fixtures of the integration suite.
"""

from tests.integration.conftest import (  # noqa: F401
    account_repository,
    clean_database,
    pool,
)
