"""
Account domain service - login, bearer authentication and self-service
profile and credential changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .exceptions import AuthError, NotFoundError, UpstreamError, ValidationError
from .models import Account, Gender, LoginOutcome, PasswordChangeResult
from .passwords import PasswordHasher, password_violations
from .phones import normalize_phone
from .ports import AccountRepository, IdentityProvider, OtpLedger
from .sessions import SessionIssuer

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "gender")


@dataclass
class AccountService:
    """Domain service for authenticated account operations."""

    repository: AccountRepository
    identity_provider: IdentityProvider
    otp_ledger: OtpLedger
    session_issuer: SessionIssuer
    hasher: PasswordHasher = field(default_factory=PasswordHasher)

    def login(self, email: str, password: str) -> LoginOutcome:
        """
        Verify credentials and issue a session token.

        The provider cross-check is advisory: a mismatched or unreachable
        provider is logged and reported as a warning, never a failure.

        Raises:
            AuthError: Unknown email or wrong password (same message for both)
        """
        normalized_email = email.strip().lower()
        found = self.repository.find_credentials(normalized_email)
        if found is None:
            self.hasher.verify_dummy(password)
            raise AuthError("Invalid email or password")

        account, password_hash = found
        if not self.hasher.verify(password, password_hash):
            raise AuthError("Invalid email or password")

        warnings = []
        try:
            remote_uid = self.identity_provider.find_uid_by_email(normalized_email)
        except UpstreamError as exc:
            logger.warning("Identity provider check failed for account %s: %s", account.id, exc)
            warnings.append(f"Identity provider check unavailable: {exc.message}")
        else:
            if remote_uid and remote_uid != account.external_id:
                logger.warning("External identity mismatch for account %s", account.id)
                warnings.append("External identity reference does not match provider record")

        token = self.session_issuer.issue(account)
        logger.info("Login succeeded for account %s", account.id)
        return LoginOutcome(token=token, account=account, warnings=warnings)

    def authenticate(self, token: str) -> Account:
        """
        Resolve a bearer token to its account.

        Raises:
            AuthError: Invalid/expired token or the account no longer exists
        """
        claims = self.session_issuer.decode(token)
        account = self.repository.find_by_id(claims.account_id)
        if account is None:
            raise AuthError("Invalid token")
        return account

    def get_profile(self, account_id: int) -> Account:
        account = self.repository.find_by_id(account_id)
        if account is None:
            raise NotFoundError("User not found")
        return account

    def update_profile(self, account_id: int, updates: dict[str, Any]) -> Account:
        """
        Partial update of display name and gender.

        Unknown keys and None values are dropped before the update.

        Raises:
            ValidationError: Nothing left to update after filtering
        """
        fields = {k: v for k, v in updates.items() if k in PROFILE_FIELDS and v is not None}
        if not fields:
            raise ValidationError("No valid fields to update", ["No valid fields to update"])

        if "gender" in fields:
            try:
                fields["gender"] = Gender(fields["gender"]).value
            except ValueError:
                raise ValidationError(
                    "Gender must be m, f, or o", ["Gender must be m, f, or o"]
                ) from None
        if "full_name" in fields and not str(fields["full_name"]).strip():
            raise ValidationError("Full name is required", ["Full name is required"])

        account = self.repository.update_profile(account_id, fields)
        if account is None:
            raise NotFoundError("User not found")
        return account

    def update_phone(self, account_id: int, mobile_no: str) -> Account:
        """
        Replace the phone number and reset mobile verification.

        Any live OTP for the account was sent to the old number and is dropped.

        Raises:
            ValidationError: Number is missing or invalid
        """
        formatted = normalize_phone(mobile_no)
        account = self.repository.update_phone(account_id, formatted)
        if account is None:
            raise NotFoundError("User not found")
        self.otp_ledger.delete(account_id)
        logger.info("Phone number changed for account %s; mobile verification reset", account_id)
        return account

    def change_password(self, account_id: int, current_password: str, new_password: str) -> None:
        """
        Re-authenticate with the current password and replace it.

        No password-history or reuse check is made.

        Raises:
            ValidationError: New password violates the policy, or the
                current password is wrong
            NotFoundError: Account no longer exists
        """
        if not current_password or not new_password:
            raise ValidationError(
                "Current and new password are required",
                ["Current and new password are required"],
            )

        errors = password_violations(new_password)
        if errors:
            raise ValidationError("New password does not meet requirements", errors)

        result = self.repository.change_password(
            account_id, current_password, new_password, self.hasher
        )
        if result == PasswordChangeResult.NOT_FOUND:
            raise NotFoundError("User not found")
        if result == PasswordChangeResult.WRONG_PASSWORD:
            raise ValidationError(
                "Current password is incorrect", ["Current password is incorrect"]
            )
        logger.info("Password changed for account %s", account_id)
