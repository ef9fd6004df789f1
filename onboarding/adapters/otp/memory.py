"""
In-memory OTP ledger adapter - Implements OtpLedger protocol.

Process-local: entries are not shared between worker processes or
service instances, so a send and its verify must reach the same process.
Relies on the single event-loop thread for ordering; no lock is taken.
"""

from onboarding.domain.models import OtpEntry


class InMemoryOtpLedger:
    """
    Implements OtpLedger protocol with a plain dict keyed by account id.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Expired entries stay until the next verify finds and deletes them.
    """

    def __init__(self) -> None:
        self._entries: dict[int, OtpEntry] = {}

    def put(self, account_id: int, entry: OtpEntry) -> None:
        self._entries[account_id] = entry

    def get(self, account_id: int) -> OtpEntry | None:
        return self._entries.get(account_id)

    def delete(self, account_id: int) -> None:
        self._entries.pop(account_id, None)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
