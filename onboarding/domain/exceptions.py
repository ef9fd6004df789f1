"""
Domain exceptions - Semantic error types for onboarding.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each kind to an HTTP status code.
"""


class OnboardingError(Exception):
    """Base class for onboarding domain errors."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors) if errors else []


class ValidationError(OnboardingError):
    """Malformed or missing input. Carries every violated rule."""

    pass


class ConflictError(OnboardingError):
    """A unique key (email, company owner) is already taken."""

    pass


class AuthError(OnboardingError):
    """Bad credentials or bad bearer token."""

    pass


class NotFoundError(OnboardingError):
    """Missing account, company profile, or OTP entry."""

    pass


class ExpiredError(OnboardingError):
    """OTP or verification token past its expiry."""

    pass


class MismatchError(OnboardingError):
    """OTP candidate does not equal the stored code."""

    pass


class UpstreamError(OnboardingError):
    """External identity provider failure."""

    pass
