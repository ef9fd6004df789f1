"""
Domain layer - Business logic with no web or database framework imports.

This package contains the registration and verification workflow, the
account and company services, and the port interfaces the infrastructure
adapters implement.
"""

from .accounts import AccountService
from .companies import CompanyService
from .exceptions import (
    AuthError,
    ConflictError,
    ExpiredError,
    MismatchError,
    NotFoundError,
    OnboardingError,
    UpstreamError,
    ValidationError,
)
from .models import (
    Account,
    CompanyProfile,
    Gender,
    LoginOutcome,
    OtpDispatch,
    OtpEntry,
    PasswordChangeResult,
    RegistrationOutcome,
    SessionClaims,
    SignupType,
)
from .passwords import PasswordHasher, password_violations
from .phones import normalize_phone
from .ports import (
    AccountRepository,
    CompanyRepository,
    EmailSender,
    IdentityProvider,
    OtpLedger,
    SmsSender,
)
from .registration import RegistrationService
from .sessions import SessionIssuer

__all__ = [
    "Account",
    "AccountRepository",
    "AccountService",
    "AuthError",
    "CompanyProfile",
    "CompanyRepository",
    "CompanyService",
    "ConflictError",
    "EmailSender",
    "ExpiredError",
    "Gender",
    "IdentityProvider",
    "LoginOutcome",
    "MismatchError",
    "NotFoundError",
    "OnboardingError",
    "OtpDispatch",
    "OtpEntry",
    "OtpLedger",
    "PasswordChangeResult",
    "PasswordHasher",
    "RegistrationOutcome",
    "RegistrationService",
    "SessionClaims",
    "SessionIssuer",
    "SignupType",
    "SmsSender",
    "UpstreamError",
    "ValidationError",
    "normalize_phone",
    "password_violations",
]
