"""
Local identity provider adapter - Implements IdentityProvider protocol.

Keeps remote identities in process memory. For development and tests,
where no external provider is configured; links and custom tokens are
logged rather than delivered.
"""

import logging
import secrets
import uuid

from onboarding.domain.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class LocalIdentityProvider:
    """
    Implements IdentityProvider protocol in memory.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Rejects a second identity for the same email, as a real provider would.
    """

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        self._base_url = base_url.rstrip("/")
        self._uids_by_email: dict[str, str] = {}

    def create_user(
        self, email: str, password: str, display_name: str, phone_number: str
    ) -> str:
        if email in self._uids_by_email:
            raise UpstreamError(f"Failed to create external identity: {email} already exists")
        uid = uuid.uuid4().hex
        self._uids_by_email[email] = uid
        logger.info("[IDENTITY] Created local identity %s for %s", uid, email)
        return uid

    def find_uid_by_email(self, email: str) -> str | None:
        return self._uids_by_email.get(email)

    def generate_email_verification_link(self, email: str) -> str:
        if email not in self._uids_by_email:
            raise UpstreamError("Failed to generate verification link: unknown email")
        code = secrets.token_urlsafe(24)
        return f"{self._base_url}/__/auth/action?mode=verifyEmail&oobCode={code}"

    def create_custom_token(self, uid: str) -> str:
        if uid not in self._uids_by_email.values():
            raise UpstreamError("Failed to generate custom token: unknown uid")
        return secrets.token_urlsafe(32)
