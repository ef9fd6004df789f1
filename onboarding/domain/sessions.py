"""
Session issuer - signed, stateless bearer credentials.

Session tokens are HS256 JWTs carrying the account id, email and
external-identity reference. They are never persisted and expire by
signature validity only; there is no revocation list.

The same issuer signs email-verification tokens. A `purpose` claim keeps
the two kinds from being used in place of each other.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt

from .exceptions import AuthError, ExpiredError
from .models import Account, SessionClaims

ALGORITHM = "HS256"
SESSION_PURPOSE = "session"
EMAIL_VERIFICATION_PURPOSE = "email_verification"


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class SessionIssuer:
    """Issues and decodes session and email-verification tokens."""

    secret: str
    expires_in: timedelta = timedelta(days=90)
    email_verification_ttl: timedelta = timedelta(hours=24)
    clock: Callable[[], datetime] = field(default=utcnow)

    def issue(self, account: Account) -> str:
        """Issue a session token for a successfully authenticated account."""
        now = self.clock()
        payload = {
            "sub": str(account.id),
            "email": account.email,
            "external_id": account.external_id,
            "purpose": SESSION_PURPOSE,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> SessionClaims:
        """
        Decode and validate a session token.

        Raises:
            AuthError: If the token is expired, malformed, badly signed,
                or not a session token
        """
        try:
            data = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expired") from None
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token") from None

        if data.get("purpose") != SESSION_PURPOSE:
            raise AuthError("Invalid token")

        try:
            account_id = int(data["sub"])
        except (TypeError, ValueError):
            raise AuthError("Invalid token") from None

        return SessionClaims(
            account_id=account_id,
            email=data.get("email", ""),
            external_id=data.get("external_id"),
            expires_at=datetime.fromtimestamp(data["exp"], UTC),
        )

    def issue_email_verification(self, account: Account) -> str:
        """Issue a short-lived token proving control of the account's inbox."""
        now = self.clock()
        payload = {
            "sub": str(account.id),
            "email": account.email,
            "purpose": EMAIL_VERIFICATION_PURPOSE,
            "iat": now,
            "exp": now + self.email_verification_ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def decode_email_verification(self, token: str) -> int:
        """
        Decode an email-verification token and return its account id.

        Raises:
            ExpiredError: If the link has expired
            AuthError: If the token is invalid
        """
        try:
            data = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredError("Verification link has expired") from None
        except jwt.InvalidTokenError:
            raise AuthError("Invalid verification token") from None

        if data.get("purpose") != EMAIL_VERIFICATION_PURPOSE:
            raise AuthError("Invalid verification token")

        try:
            return int(data["sub"])
        except (TypeError, ValueError):
            raise AuthError("Invalid verification token") from None
