"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification links for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def send_verification_link(self, email: str, link: str) -> None:
        """
        Log the verification link (simulates email delivery).

        Logged at INFO level so it is visible in container logs.
        """
        logger.info("[VERIFICATION] Email: %s Link: %s", email, link)
