"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository fakes that mirror the PostgreSQL adapters
- A controllable clock for OTP and token expiry
- Domain services wired to the fakes
"""

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any
from unittest.mock import Mock

import pytest

from onboarding.adapters.identity.local import LocalIdentityProvider
from onboarding.adapters.otp.memory import InMemoryOtpLedger
from onboarding.domain.accounts import AccountService
from onboarding.domain.companies import CompanyService
from onboarding.domain.models import (
    Account,
    CompanyProfile,
    Gender,
    PasswordChangeResult,
    SignupType,
)
from onboarding.domain.passwords import PasswordHasher
from onboarding.domain.registration import RegistrationService
from onboarding.domain.sessions import SessionIssuer

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256-signing"
STRONG_PASSWORD = "TestPass123!"
VALID_PHONE = "+447400123456"


class FakeClock:
    """Mutable clock; call it to read, advance() to move forward."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class InMemoryAccountRepository:
    """AccountRepository fake with the same contract as the PostgreSQL adapter."""

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self.hashes: dict[int, str] = {}
        self._ids = count(1)

    def find_by_id(self, account_id: int) -> Account | None:
        return self.accounts.get(account_id)

    def find_by_email(self, email: str) -> Account | None:
        return next((a for a in self.accounts.values() if a.email == email), None)

    def find_credentials(self, email: str) -> tuple[Account, str] | None:
        account = self.find_by_email(email)
        if account is None:
            return None
        return account, self.hashes[account.id]

    def create_account(self, *, email, password_hash, full_name, gender, mobile_no,
                       signup_type, external_id) -> Account | None:
        if self.find_by_email(email) is not None:
            return None
        account = Account(
            id=next(self._ids),
            email=email,
            full_name=full_name,
            gender=Gender(gender) if gender else None,
            mobile_no=mobile_no,
            signup_type=SignupType(signup_type),
            is_email_verified=False,
            is_mobile_verified=False,
            external_id=external_id,
            created_at=datetime.now(UTC),
        )
        self.accounts[account.id] = account
        self.hashes[account.id] = password_hash
        return account

    def _update(self, account_id: int, **changes: Any) -> Account | None:
        account = self.accounts.get(account_id)
        if account is None:
            return None
        self.accounts[account_id] = replace(account, **changes)
        return self.accounts[account_id]

    def mark_email_verified(self, account_id: int) -> Account | None:
        return self._update(account_id, is_email_verified=True)

    def mark_mobile_verified(self, account_id: int) -> Account | None:
        return self._update(account_id, is_mobile_verified=True)

    def update_profile(self, account_id: int, fields: dict[str, Any]) -> Account | None:
        changes = dict(fields)
        if "gender" in changes:
            changes["gender"] = Gender(changes["gender"])
        return self._update(account_id, **changes)

    def update_phone(self, account_id: int, mobile_no: str) -> Account | None:
        return self._update(account_id, mobile_no=mobile_no, is_mobile_verified=False)

    def change_password(self, account_id, current_password, new_password,
                        hasher: PasswordHasher) -> PasswordChangeResult:
        if account_id not in self.hashes:
            return PasswordChangeResult.NOT_FOUND
        if not hasher.verify(current_password, self.hashes[account_id]):
            return PasswordChangeResult.WRONG_PASSWORD
        self.hashes[account_id] = hasher.hash(new_password)
        return PasswordChangeResult.SUCCESS


class InMemoryCompanyRepository:
    def __init__(self) -> None:
        self.companies: dict[int, CompanyProfile] = {}
        self._ids = count(1)

    def find_by_owner(self, owner_id: int) -> CompanyProfile | None:
        return self.companies.get(owner_id)

    def create(self, owner_id: int, fields: dict[str, Any]) -> CompanyProfile | None:
        if owner_id in self.companies:
            return None
        now = datetime.now(UTC)
        company = CompanyProfile(
            id=next(self._ids), owner_id=owner_id, created_at=now, updated_at=now, **fields
        )
        self.companies[owner_id] = company
        return company

    def update(self, owner_id: int, fields: dict[str, Any]) -> CompanyProfile | None:
        company = self.companies.get(owner_id)
        if company is None:
            return None
        self.companies[owner_id] = replace(company, updated_at=datetime.now(UTC), **fields)
        return self.companies[owner_id]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def company_repository() -> InMemoryCompanyRepository:
    return InMemoryCompanyRepository()


@pytest.fixture
def identity_provider() -> LocalIdentityProvider:
    return LocalIdentityProvider(base_url="http://testserver")


@pytest.fixture
def otp_ledger() -> InMemoryOtpLedger:
    return InMemoryOtpLedger()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast; cost >= 10 is tested separately
    return PasswordHasher(rounds=4)


@pytest.fixture
def session_issuer() -> SessionIssuer:
    return SessionIssuer(secret=TEST_SECRET)


@pytest.fixture
def email_sender() -> Mock:
    return Mock()


@pytest.fixture
def sms_sender() -> Mock:
    return Mock()


@pytest.fixture
def registration_service(
    repository, identity_provider, otp_ledger, email_sender, sms_sender,
    session_issuer, hasher, clock,
) -> RegistrationService:
    return RegistrationService(
        repository=repository,
        identity_provider=identity_provider,
        otp_ledger=otp_ledger,
        email_sender=email_sender,
        sms_sender=sms_sender,
        session_issuer=session_issuer,
        hasher=hasher,
        public_base_url="http://testserver",
        clock=clock,
    )


@pytest.fixture
def account_service(
    repository, identity_provider, otp_ledger, session_issuer, hasher
) -> AccountService:
    return AccountService(
        repository=repository,
        identity_provider=identity_provider,
        otp_ledger=otp_ledger,
        session_issuer=session_issuer,
        hasher=hasher,
    )


@pytest.fixture
def company_service(company_repository) -> CompanyService:
    return CompanyService(repository=company_repository)


@pytest.fixture
def registered(registration_service) -> Account:
    """An account registered through the full workflow."""
    outcome = registration_service.register(
        email="user@example.com",
        password=STRONG_PASSWORD,
        full_name="Test User",
        gender=Gender.FEMALE,
        mobile_no=VALID_PHONE,
    )
    return outcome.account
