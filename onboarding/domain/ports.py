"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols structurally.
"""

from typing import Any, Protocol

from .models import Account, CompanyProfile, OtpEntry, PasswordChangeResult, SignupType
from .passwords import PasswordHasher


class AccountRepository(Protocol):
    """Port interface for the credential store."""

    def find_by_id(self, account_id: int) -> Account | None: ...

    def find_by_email(self, email: str) -> Account | None: ...

    def find_credentials(self, email: str) -> tuple[Account, str] | None:
        """Return the account and its password hash, or None."""
        ...

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
            The created account, or None if the email is already taken.
            The storage-level unique constraint is the actual enforcement.
        """
        ...

    def mark_email_verified(self, account_id: int) -> Account | None: ...

    def mark_mobile_verified(self, account_id: int) -> Account | None: ...

    def update_profile(self, account_id: int, fields: dict[str, Any]) -> Account | None:
        """Update whitelisted profile columns. Callers filter the fields."""
        ...

    def update_phone(self, account_id: int, mobile_no: str) -> Account | None:
        """Store a new E.164 number and reset the mobile-verified flag."""
        ...

    def change_password(
        self,
        account_id: int,
        current_password: str,
        new_password: str,
        hasher: PasswordHasher,
    ) -> PasswordChangeResult:
        """
        Read, verify and replace the password hash on one connection.

        Not a transaction: concurrent changes for the same account are only
        serialized by the database's own statement handling.
        """
        ...


class CompanyRepository(Protocol):
    """Port interface for company profile persistence."""

    def find_by_owner(self, owner_id: int) -> CompanyProfile | None: ...

    def create(self, owner_id: int, fields: dict[str, Any]) -> CompanyProfile | None:
        """Returns None if the owner already has a company profile."""
        ...

    def update(self, owner_id: int, fields: dict[str, Any]) -> CompanyProfile | None: ...


class IdentityProvider(Protocol):
    """
    Port interface for the external identity provider.

    Implementations raise UpstreamError on any provider failure,
    passing the provider's message through.
    """

    def create_user(
        self, email: str, password: str, display_name: str, phone_number: str
    ) -> str:
        """Create the remote identity and return its uid."""
        ...

    def find_uid_by_email(self, email: str) -> str | None: ...

    def generate_email_verification_link(self, email: str) -> str: ...

    def create_custom_token(self, uid: str) -> str: ...


class OtpLedger(Protocol):
    """
    Port interface for the one-time code store.

    At most one entry per account: put() overwrites.
    """

    def put(self, account_id: int, entry: OtpEntry) -> None: ...

    def get(self, account_id: int) -> OtpEntry | None: ...

    def delete(self, account_id: int) -> None: ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_link(self, email: str, link: str) -> None: ...


class SmsSender(Protocol):
    """Port interface for SMS delivery."""

    def send_otp(self, phone_number: str, code: str) -> None: ...
