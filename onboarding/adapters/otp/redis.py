"""
Redis OTP ledger adapter - Implements OtpLedger protocol.

Shares OTP entries between service instances. Keys expire after the code's
remaining validity plus a grace period, so a verify shortly after expiry
still sees the entry and reports it as expired rather than missing.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime

import redis

from onboarding.domain.models import OtpEntry
from onboarding.domain.sessions import utcnow

logger = logging.getLogger(__name__)

KEY_PREFIX = "otp:"
GRACE_SECONDS = 300


class RedisOtpLedger:
    """
    Implements OtpLedger protocol on a Redis client.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        client: redis.Redis,
        grace_seconds: int = GRACE_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client = client
        self._grace_seconds = grace_seconds
        self._clock = clock

    @classmethod
    def from_url(cls, url: str) -> "RedisOtpLedger":
        logger.debug("New Redis connection at %s", url)
        return cls(redis.Redis.from_url(url))

    def put(self, account_id: int, entry: OtpEntry) -> None:
        remaining = int((entry.expires_at - self._clock()).total_seconds())
        payload = json.dumps({"code": entry.code, "expires_at": entry.expires_at.isoformat()})
        self._client.set(self._key(account_id), payload, ex=max(remaining, 1) + self._grace_seconds)

    def get(self, account_id: int) -> OtpEntry | None:
        raw = self._client.get(self._key(account_id))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            expires_at = datetime.fromisoformat(data["expires_at"])
            return OtpEntry(code=data["code"], expires_at=expires_at)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding corrupted OTP entry for account %s: %s", account_id, e)
            self.delete(account_id)
            return None

    def delete(self, account_id: int) -> None:
        self._client.delete(self._key(account_id))

    def _key(self, account_id: int) -> str:
        return f"{KEY_PREFIX}{account_id}"
