"""
Console SMS sender adapter - Implements SmsSender protocol.

Logs one-time codes instead of sending text messages.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleSmsSender:
    """Implements SmsSender protocol via console logging."""

    def send_otp(self, phone_number: str, code: str) -> None:
        logger.info("[OTP] Phone: %s Code: %s", phone_number, code)
