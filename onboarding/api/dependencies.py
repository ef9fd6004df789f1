"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
and infrastructure adapters into routes. Long-lived adapters (connection
pool, identity provider, OTP ledger) are created at startup and kept on
app.state.
"""

from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from onboarding.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresCompanyRepository,
)
from onboarding.adapters.sms.console import ConsoleSmsSender
from onboarding.adapters.smtp.console import ConsoleEmailSender
from onboarding.config.settings import Settings, get_settings
from onboarding.domain.accounts import AccountService
from onboarding.domain.companies import CompanyService
from onboarding.domain.exceptions import AuthError
from onboarding.domain.models import Account
from onboarding.domain.passwords import PasswordHasher
from onboarding.domain.ports import IdentityProvider, OtpLedger
from onboarding.domain.registration import RegistrationService
from onboarding.domain.sessions import SessionIssuer

# Module-level singletons - console senders are stateless
_email_sender = ConsoleEmailSender()
_sms_sender = ConsoleSmsSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_account_repository(request: Request) -> PostgresAccountRepository:
    return PostgresAccountRepository(get_pool(request))


def get_company_repository(request: Request) -> PostgresCompanyRepository:
    return PostgresCompanyRepository(get_pool(request))


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_otp_ledger(request: Request) -> OtpLedger:
    return request.app.state.otp_ledger


def build_session_issuer(settings: Settings) -> SessionIssuer:
    return SessionIssuer(
        secret=settings.jwt_secret,
        expires_in=timedelta(days=settings.jwt_expires_days),
        email_verification_ttl=timedelta(seconds=settings.email_verification_ttl_seconds),
    )


def get_registration_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, identity provider, OTP ledger and
    delivery adapters for the domain service.
    """
    return RegistrationService(
        repository=get_account_repository(request),
        identity_provider=get_identity_provider(request),
        otp_ledger=get_otp_ledger(request),
        email_sender=_email_sender,
        sms_sender=_sms_sender,
        session_issuer=build_session_issuer(settings),
        hasher=PasswordHasher(rounds=settings.bcrypt_cost),
        otp_ttl=timedelta(seconds=settings.otp_ttl_seconds),
        public_base_url=settings.public_base_url,
    )


def get_account_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> AccountService:
    return AccountService(
        repository=get_account_repository(request),
        identity_provider=get_identity_provider(request),
        otp_ledger=get_otp_ledger(request),
        session_issuer=build_session_issuer(settings),
        hasher=PasswordHasher(rounds=settings.bcrypt_cost),
    )


def get_company_service(request: Request) -> CompanyService:
    return CompanyService(repository=get_company_repository(request))


# Bearer scheme for OpenAPI documentation; missing headers are handled below
# so every authentication failure is a uniform 401.
http_bearer = HTTPBearer(auto_error=False)


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    service: AccountService = Depends(get_account_service),
) -> Account:
    """
    Resolve the `Authorization: Bearer <token>` header to an account.

    Raises:
        AuthError: Header missing, token invalid or expired, or account gone
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("No token provided")
    return service.authenticate(credentials.credentials)
