"""
Password policy and bcrypt hashing.

Timing-channel hardening is bcrypt's job: checkpw() is constant-structure,
and login runs a comparison against a dummy hash when no account exists.
"""

import re
from dataclasses import dataclass

import bcrypt

MIN_LENGTH = 8
MAX_BYTES = 72  # bcrypt ignores (or rejects) anything past 72 bytes
SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'

_SPECIAL_RE = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")

# Hash of a throwaway value, compared against when the email is unknown.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


def password_violations(password: str) -> list[str]:
    """Return every password-strength rule the candidate violates."""
    errors = []
    if len(password) < MIN_LENGTH:
        errors.append(f"Password must be at least {MIN_LENGTH} characters")
    if len(password.encode()) > MAX_BYTES:
        errors.append(f"Password must be at most {MAX_BYTES} bytes")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL_RE.search(password):
        errors.append("Password must contain at least one special character")
    return errors


@dataclass(frozen=True)
class PasswordHasher:
    """bcrypt wrapper with a configurable work factor (>= 10)."""

    rounds: int = 10

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            # Malformed stored hash or over-long candidate
            return False

    def verify_dummy(self, password: str) -> bool:
        """Burn one bcrypt comparison; always False."""
        try:
            bcrypt.checkpw(password.encode(), _DUMMY_BCRYPT_HASH)
        except ValueError:
            pass
        return False
