"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from onboarding.config.settings import DEFAULT_JWT_SECRET, Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.jwt_expires_days == 90
    assert settings.otp_ttl_seconds == 600
    assert settings.bcrypt_cost >= 10


def test_environment_variables_override(monkeypatch) -> None:
    monkeypatch.setenv("OTP_STORE", "redis")
    monkeypatch.setenv("ENVIRONMENT", "test")

    settings = Settings(_env_file=None)

    assert settings.otp_store == "redis"
    assert settings.is_production is False


def test_production_requires_secret() -> None:
    with pytest.raises(ValidationError, match="JWT_SECRET"):
        Settings(_env_file=None, environment="production", jwt_secret=DEFAULT_JWT_SECRET)


def test_production_with_secret() -> None:
    settings = Settings(_env_file=None, environment="production", jwt_secret="s" * 48)

    assert settings.is_production
