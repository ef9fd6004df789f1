"""
Registration domain service - multi-factor onboarding workflow.

This module sequences account creation against the local credential store
and the external identity provider, plus the two verification factors.

Registration
============
    validate (name + password policy + phone, all violations at once)
    -> duplicate-email pre-check (optimisation only; the unique constraint
       on accounts.email is the real enforcement)
    -> create external identity (failure aborts, nothing written locally)
    -> insert local account with a bcrypt fallback hash
    -> best-effort: email verification links (failures become warnings)

Mobile OTP lifecycle
====================
    send:   generate 6-digit code, overwrite the ledger entry for the account
    verify: format check -> lookup (NotFound) -> expiry (Expired, entry purged)
            -> compare (Mismatch, entry kept) -> consume entry, flip flag

Expiry is detected lazily at verify time; there is no background sweep.
"""

import logging
import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from urllib.parse import urlencode

from .exceptions import (
    AuthError,
    ConflictError,
    ExpiredError,
    MismatchError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from .models import (
    Account,
    Gender,
    OtpDispatch,
    OtpEntry,
    RegistrationOutcome,
    SignupType,
)
from .passwords import PasswordHasher, password_violations
from .phones import normalize_phone
from .ports import AccountRepository, EmailSender, IdentityProvider, OtpLedger, SmsSender
from .sessions import SessionIssuer, utcnow

logger = logging.getLogger(__name__)

OTP_PATTERN = re.compile(r"[0-9]{6}")


@dataclass
class RegistrationService:
    """
    Domain service for registration and verification.

    Orchestrates the credential store, identity provider, OTP ledger and
    delivery adapters. Holds no state of its own.
    """

    repository: AccountRepository
    identity_provider: IdentityProvider
    otp_ledger: OtpLedger
    email_sender: EmailSender
    sms_sender: SmsSender
    session_issuer: SessionIssuer
    hasher: PasswordHasher = field(default_factory=PasswordHasher)
    otp_ttl: timedelta = timedelta(minutes=10)
    public_base_url: str = "http://localhost:8000"
    clock: Callable[[], datetime] = field(default=utcnow)

    def register(
        self,
        email: str,
        password: str,
        full_name: str,
        gender: Gender | None,
        mobile_no: str,
        signup_type: SignupType = SignupType.EMAIL,
    ) -> RegistrationOutcome:
        """
        Register a new account locally and with the identity provider.

        Returns:
            RegistrationOutcome with the created account and the warnings
            raised by best-effort steps

        Raises:
            ValidationError: Blank name, weak password and/or invalid phone, all rules listed
            ConflictError: Email already registered
            UpstreamError: Identity provider refused the account
        """
        normalized_email = self._normalize_email(email)

        errors = []
        if not full_name or not full_name.strip():
            errors.append("Full name is required")
        errors.extend(password_violations(password))
        formatted_phone = None
        try:
            formatted_phone = normalize_phone(mobile_no)
        except ValidationError as exc:
            errors.extend(exc.errors)
        if errors:
            raise ValidationError("Registration data is invalid", errors)

        if self.repository.find_by_email(normalized_email) is not None:
            raise ConflictError("User with this email already exists")

        try:
            external_id = self.identity_provider.create_user(
                normalized_email, password, full_name, formatted_phone
            )
        except UpstreamError as exc:
            logger.error("Identity provider registration failed for %s: %s", normalized_email, exc)
            raise

        account = self.repository.create_account(
            email=normalized_email,
            password_hash=self.hasher.hash(password),
            full_name=full_name,
            gender=gender.value if gender else None,
            mobile_no=formatted_phone,
            signup_type=signup_type,
            external_id=external_id,
        )
        if account is None:
            # Lost a race with a concurrent registration; the remote identity stays orphaned.
            logger.warning(
                "Duplicate email %s hit the unique constraint; external identity %s orphaned",
                normalized_email,
                external_id,
            )
            raise ConflictError("User with this email already exists")

        logger.info("Registered account %s (%s)", account.id, account.email)
        warnings = self._send_verification_links(account)
        return RegistrationOutcome(account=account, warnings=warnings)

    def verify_email(self, account_id: int, token: str) -> Account:
        """
        Flip the local email-verified flag.

        The token must be a signed email-verification token issued for
        this account id; a bare identifier is not proof.

        Raises:
            AuthError: Invalid token or token issued for another account
            ExpiredError: Verification link expired
            NotFoundError: Account no longer exists
        """
        token_account_id = self.session_issuer.decode_email_verification(token)
        if token_account_id != account_id:
            raise AuthError("Invalid verification token")

        account = self.repository.find_by_id(account_id)
        if account is None:
            raise NotFoundError("User not found")
        if account.is_email_verified:
            return account

        updated = self.repository.mark_email_verified(account_id)
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("Email verified for account %s", account_id)
        return updated

    def send_otp(self, user_id: int | None = None, email: str | None = None) -> OtpDispatch:
        """
        Issue a mobile OTP for an account, replacing any earlier one.

        Raises:
            ValidationError: Neither identifier given, or no phone on file
            NotFoundError: Unknown account
        """
        if user_id is None and not email:
            raise ValidationError("User ID or email is required", ["User ID or email is required"])

        if user_id is not None:
            account = self.repository.find_by_id(user_id)
        else:
            account = self.repository.find_by_email(self._normalize_email(email))
        if account is None:
            raise NotFoundError("User not found")

        if not account.mobile_no:
            raise ValidationError(
                "Mobile number not found for user", ["Mobile number not found for user"]
            )

        code = self._generate_otp()
        expires_at = self.clock() + self.otp_ttl
        self.otp_ledger.put(account.id, OtpEntry(code=code, expires_at=expires_at))
        self.sms_sender.send_otp(account.mobile_no, code)
        logger.info("OTP issued for account %s (expires %s)", account.id, expires_at.isoformat())

        warnings = []
        custom_token = None
        if account.external_id:
            try:
                custom_token = self.identity_provider.create_custom_token(account.external_id)
            except UpstreamError as exc:
                logger.warning("Failed to generate custom token for %s: %s", account.id, exc)
                warnings.append(f"Custom token unavailable: {exc.message}")

        return OtpDispatch(
            account=account,
            code=code,
            expires_at=expires_at,
            custom_token=custom_token,
            warnings=warnings,
        )

    def verify_mobile(self, account_id: int, otp: str) -> Account:
        """
        Consume the account's OTP and mark the mobile number verified.

        Raises:
            ValidationError: Candidate is not exactly 6 digits
            NotFoundError: No live code for this account
            ExpiredError: Code expired (the stale entry is purged)
            MismatchError: Code differs from the stored one
        """
        if not isinstance(otp, str) or not OTP_PATTERN.fullmatch(otp):
            raise ValidationError(
                "Invalid OTP format. Must be 6 digits.", ["OTP must be exactly 6 digits"]
            )

        entry = self.otp_ledger.get(account_id)
        if entry is None:
            raise NotFoundError("No OTP found. Please request a new OTP.")

        if entry.is_expired(self.clock()):
            self.otp_ledger.delete(account_id)
            raise ExpiredError("OTP has expired. Please request a new OTP.")

        if not secrets.compare_digest(entry.code.encode(), otp.encode()):
            raise MismatchError("Invalid OTP. Please check and try again.")

        self.otp_ledger.delete(account_id)
        account = self.repository.mark_mobile_verified(account_id)
        if account is None:
            raise NotFoundError("User not found")
        logger.info("Mobile number verified for account %s", account_id)
        return account

    def verification_link(self, account: Account) -> str:
        """Build the local callback link that flips the email-verified flag."""
        token = self.session_issuer.issue_email_verification(account)
        query = urlencode({"userId": account.id, "token": token})
        return f"{self.public_base_url.rstrip('/')}/auth/verify-email?{query}"

    def _send_verification_links(self, account: Account) -> list[str]:
        """Best-effort delivery of verification links. Returns warnings."""
        warnings = []

        try:
            provider_link = self.identity_provider.generate_email_verification_link(account.email)
        except UpstreamError as exc:
            logger.warning("Verification link generation failed for %s: %s", account.email, exc)
            warnings.append(f"Provider verification link unavailable: {exc.message}")
        else:
            self.email_sender.send_verification_link(account.email, provider_link)

        self.email_sender.send_verification_link(account.email, self.verification_link(account))
        return warnings

    def _normalize_email(self, email: str) -> str:
        """Applies: strip whitespace + lowercase."""
        return email.strip().lower()

    def _generate_otp(self) -> str:
        """Uniform 6-digit code in 100000-999999 from the secrets module."""
        return str(100000 + secrets.randbelow(900000))
