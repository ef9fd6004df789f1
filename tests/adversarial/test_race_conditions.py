"""
Adversarial tests for concurrent registration of the same email.

The UNIQUE constraint with ON CONFLICT DO NOTHING is the only guard that
holds across requests; these tests race it directly.
"""

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest
from psycopg_pool import ConnectionPool

from onboarding.adapters.identity.local import LocalIdentityProvider
from onboarding.adapters.otp.memory import InMemoryOtpLedger
from onboarding.adapters.repository.postgres import PostgresAccountRepository
from onboarding.domain.exceptions import ConflictError, UpstreamError
from onboarding.domain.models import SignupType
from onboarding.domain.passwords import PasswordHasher
from onboarding.domain.registration import RegistrationService
from onboarding.domain.sessions import SessionIssuer
from tests.conftest import STRONG_PASSWORD, TEST_SECRET, VALID_PHONE

pytestmark = pytest.mark.adversarial

NUM_ATTACKERS = 5


class _NullSender:
    def send_verification_link(self, email: str, link: str) -> None:
        pass

    def send_otp(self, phone_number: str, code: str) -> None:
        pass


class _PermissiveIdentityProvider(LocalIdentityProvider):
    """Lets every racer past the provider so the database is the only guard."""

    def create_user(self, email, password, display_name, phone_number) -> str:
        return uuid.uuid4().hex


def test_concurrent_inserts_exactly_one_succeeds(
    account_repository: PostgresAccountRepository, pool: ConnectionPool
) -> None:
    results = []
    lock = threading.Lock()

    def attack() -> None:
        account = PostgresAccountRepository(pool).create_account(
            email="attack@example.com",
            password_hash="$2b$10$attackhash",
            full_name="Attacker",
            gender=None,
            mobile_no=VALID_PHONE,
            signup_type=SignupType.EMAIL,
            external_id=None,
        )
        with lock:
            results.append(account)

    with ThreadPoolExecutor(max_workers=NUM_ATTACKERS) as executor:
        for future in [executor.submit(attack) for _ in range(NUM_ATTACKERS)]:
            future.result()

    assert sum(1 for r in results if r is not None) == 1
    with pool.connection() as conn:
        count = conn.execute(
            "SELECT COUNT(*) FROM accounts WHERE email = %s", ("attack@example.com",)
        ).fetchone()[0]
    assert count == 1


def test_concurrent_registrations_exactly_one_account(
    account_repository: PostgresAccountRepository, pool: ConnectionPool
) -> None:
    sender = _NullSender()
    service = RegistrationService(
        repository=account_repository,
        identity_provider=_PermissiveIdentityProvider(),
        otp_ledger=InMemoryOtpLedger(),
        email_sender=sender,
        sms_sender=sender,
        session_issuer=SessionIssuer(secret=TEST_SECRET),
        hasher=PasswordHasher(rounds=4),
    )
    outcomes = []
    lock = threading.Lock()

    def attack() -> None:
        try:
            service.register(
                email="attack@example.com",
                password=STRONG_PASSWORD,
                full_name="Attacker",
                gender=None,
                mobile_no=VALID_PHONE,
            )
            outcome = "created"
        except ConflictError:
            outcome = "conflict"
        except UpstreamError:
            outcome = "upstream"
        with lock:
            outcomes.append(outcome)

    with ThreadPoolExecutor(max_workers=NUM_ATTACKERS) as executor:
        for future in [executor.submit(attack) for _ in range(NUM_ATTACKERS)]:
            future.result()

    assert outcomes.count("created") == 1
    assert outcomes.count("conflict") == NUM_ATTACKERS - 1
