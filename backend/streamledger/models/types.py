"""Column Types — lossless storage for 128-bit balances.

Invariants:
    - Values round-trip as Python int with no precision loss on any backend

Design Decisions:
    - Decimal text over NUMERIC: SQLite coerces NUMERIC through float, which
      corrupts balances above 2**53
"""

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class AmountType(TypeDecorator):
    """Unsigned integer amount stored as base-10 text."""
    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)
