"""
Domain models - Accounts, OTP entries, company profiles and workflow outcomes.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Gender(str, Enum):
    MALE = "m"
    FEMALE = "f"
    OTHER = "o"


class SignupType(str, Enum):
    """Channel the account signed up through."""

    EMAIL = "e"
    SOCIAL = "s"
    GOOGLE = "g"


@dataclass(frozen=True)
class Account:
    """
    Local user record.

    Public fields only - the password hash never leaves the repository
    except through find_credentials().
    """

    id: int
    email: str
    full_name: str
    gender: Gender | None
    mobile_no: str | None
    signup_type: SignupType
    is_email_verified: bool
    is_mobile_verified: bool
    external_id: str | None
    created_at: datetime


@dataclass(frozen=True)
class OtpEntry:
    """One-time mobile code and its absolute expiry."""

    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class SessionClaims:
    account_id: int
    email: str
    external_id: str | None
    expires_at: datetime


@dataclass(frozen=True)
class RegistrationOutcome:
    """Created account plus any best-effort step that failed."""

    account: Account
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LoginOutcome:
    token: str
    account: Account
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OtpDispatch:
    """
    Result of sending a mobile OTP.

    `code` is returned so non-production deployments can echo it;
    the API layer decides whether it is exposed.
    """

    account: Account
    code: str
    expires_at: datetime
    custom_token: str | None = None
    warnings: list[str] = field(default_factory=list)


class PasswordChangeResult(Enum):
    """Result of a password change attempt at the repository level."""

    SUCCESS = "success"
    WRONG_PASSWORD = "wrong_password"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class CompanyProfile:
    id: int
    owner_id: int
    company_name: str
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    industry: str
    website: str | None = None
    founded_date: date | None = None
    description: str | None = None
    social_links: dict[str, str] | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
