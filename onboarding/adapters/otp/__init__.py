"""OTP ledger adapters."""

from .memory import InMemoryOtpLedger
from .redis import RedisOtpLedger

__all__ = ["InMemoryOtpLedger", "RedisOtpLedger"]
