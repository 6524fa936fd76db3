"""Clock Sources — the single time reading a ledger operation is given.

Invariants:
    - now() returns integer seconds since the epoch
    - Read once per request by the API layer, never inside the ledger
"""

import time


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Manually advanced clock for tests and replays."""

    def __init__(self, now: int = 0):
        self._now = now

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> None:
        self._now += seconds

    def set(self, now: int) -> None:
        self._now = now
