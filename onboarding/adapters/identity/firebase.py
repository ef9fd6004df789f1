"""
Firebase identity provider adapter - Implements IdentityProvider protocol.

Wraps the firebase-admin Auth API. Every provider failure is re-raised as
UpstreamError with the provider's message passed through.
"""

import logging

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.auth import UserNotFoundError
from firebase_admin.exceptions import FirebaseError

from onboarding.domain.exceptions import UpstreamError

logger = logging.getLogger(__name__)

APP_NAME = "onboarding"
TOKEN_URI = "https://oauth2.googleapis.com/token"


class FirebaseIdentityProvider:
    """
    Implements IdentityProvider protocol via firebase-admin.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    @classmethod
    def from_credentials(
        cls, project_id: str, client_email: str, private_key: str
    ) -> "FirebaseIdentityProvider":
        """
        Initialize (or reuse) the named Firebase app from service-account fields.

        Private keys read from environment variables usually carry escaped
        newlines; they are unescaped here.
        """
        try:
            app = firebase_admin.get_app(APP_NAME)
        except ValueError:
            certificate = credentials.Certificate(
                {
                    "type": "service_account",
                    "project_id": project_id,
                    "client_email": client_email,
                    "private_key": private_key.replace("\\n", "\n"),
                    "token_uri": TOKEN_URI,
                }
            )
            app = firebase_admin.initialize_app(certificate, name=APP_NAME)
            logger.info("Firebase Admin initialized for project %s", project_id)
        return cls(app)

    def create_user(
        self, email: str, password: str, display_name: str, phone_number: str
    ) -> str:
        try:
            record = auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                phone_number=phone_number,
                email_verified=False,
                app=self._app,
            )
        except (FirebaseError, ValueError) as e:
            raise UpstreamError(f"Failed to create Firebase user: {e}") from e
        return record.uid

    def find_uid_by_email(self, email: str) -> str | None:
        try:
            record = auth.get_user_by_email(email, app=self._app)
        except UserNotFoundError:
            return None
        except (FirebaseError, ValueError) as e:
            raise UpstreamError(f"Failed to verify Firebase user: {e}") from e
        return record.uid

    def generate_email_verification_link(self, email: str) -> str:
        try:
            return auth.generate_email_verification_link(email, app=self._app)
        except (FirebaseError, ValueError) as e:
            raise UpstreamError(f"Failed to generate verification link: {e}") from e

    def create_custom_token(self, uid: str) -> str:
        try:
            token = auth.create_custom_token(uid, app=self._app)
        except (FirebaseError, ValueError) as e:
            raise UpstreamError(f"Failed to generate custom token: {e}") from e
        return token.decode() if isinstance(token, bytes) else token
