"""
Integration tests for the PostgreSQL repository adapters.

Requires a running PostgreSQL reachable at DATABASE_URL.
"""

from datetime import date

import pytest

from onboarding.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresCompanyRepository,
)
from onboarding.domain.models import Gender, PasswordChangeResult, SignupType
from onboarding.domain.passwords import PasswordHasher

pytestmark = pytest.mark.integration

HASHER = PasswordHasher(rounds=4)


def create(repository: PostgresAccountRepository, email: str = "user@example.com"):
    return repository.create_account(
        email=email,
        password_hash=HASHER.hash("TestPass123!"),
        full_name="Test User",
        gender="f",
        mobile_no="+447400123456",
        signup_type=SignupType.EMAIL,
        external_id=f"uid-{email}",
    )


class TestPostgresAccountRepository:
    def test_create_and_find(self, account_repository: PostgresAccountRepository) -> None:
        account = create(account_repository)

        assert account is not None
        assert account.gender == Gender.FEMALE
        assert account.is_email_verified is False
        assert account_repository.find_by_id(account.id) == account
        assert account_repository.find_by_email("user@example.com") == account

    def test_duplicate_email_returns_none(
        self, account_repository: PostgresAccountRepository
    ) -> None:
        create(account_repository)

        assert create(account_repository) is None

    def test_credentials(self, account_repository: PostgresAccountRepository) -> None:
        create(account_repository)

        account, password_hash = account_repository.find_credentials("user@example.com")

        assert HASHER.verify("TestPass123!", password_hash)
        assert account_repository.find_credentials("nobody@example.com") is None

    def test_verification_flags(self, account_repository: PostgresAccountRepository) -> None:
        account = create(account_repository)

        assert account_repository.mark_email_verified(account.id).is_email_verified
        assert account_repository.mark_mobile_verified(account.id).is_mobile_verified
        assert account_repository.mark_email_verified(999_999) is None

    def test_update_phone_resets_verification(
        self, account_repository: PostgresAccountRepository
    ) -> None:
        account = create(account_repository)
        account_repository.mark_mobile_verified(account.id)

        updated = account_repository.update_phone(account.id, "+12015550123")

        assert updated.mobile_no == "+12015550123"
        assert updated.is_mobile_verified is False

    def test_update_profile_whitelist(
        self, account_repository: PostgresAccountRepository
    ) -> None:
        account = create(account_repository)

        updated = account_repository.update_profile(account.id, {"full_name": "Renamed"})

        assert updated.full_name == "Renamed"
        with pytest.raises(ValueError):
            account_repository.update_profile(account.id, {"email": "evil@example.com"})

    def test_change_password(self, account_repository: PostgresAccountRepository) -> None:
        account = create(account_repository)

        wrong = account_repository.change_password(account.id, "Nope123!", "NewPass456$", HASHER)
        changed = account_repository.change_password(
            account.id, "TestPass123!", "NewPass456$", HASHER
        )
        missing = account_repository.change_password(999_999, "a", "b", HASHER)

        assert wrong == PasswordChangeResult.WRONG_PASSWORD
        assert changed == PasswordChangeResult.SUCCESS
        assert missing == PasswordChangeResult.NOT_FOUND
        _, password_hash = account_repository.find_credentials("user@example.com")
        assert HASHER.verify("NewPass456$", password_hash)


class TestPostgresCompanyRepository:
    FIELDS = {
        "company_name": "Acme Ltd",
        "address": "1 High Street",
        "city": "London",
        "state": "Greater London",
        "country": "United Kingdom",
        "postal_code": "EC1A 1BB",
        "industry": "Manufacturing",
        "founded_date": date(2001, 5, 4),
        "social_links": {"linkedin": "https://linkedin.com/company/acme"},
    }

    def test_create_once_per_owner(
        self,
        account_repository: PostgresAccountRepository,
        company_repository: PostgresCompanyRepository,
    ) -> None:
        owner = create(account_repository)

        company = company_repository.create(owner.id, self.FIELDS)

        assert company.social_links == {"linkedin": "https://linkedin.com/company/acme"}
        assert company.founded_date == date(2001, 5, 4)
        assert company_repository.create(owner.id, self.FIELDS) is None
        assert company_repository.find_by_owner(owner.id) == company

    def test_update(
        self,
        account_repository: PostgresAccountRepository,
        company_repository: PostgresCompanyRepository,
    ) -> None:
        owner = create(account_repository)
        company_repository.create(owner.id, self.FIELDS)

        updated = company_repository.update(owner.id, {"city": "Leeds"})

        assert updated.city == "Leeds"
        assert updated.updated_at >= updated.created_at
        assert company_repository.update(999_999, {"city": "York"}) is None
