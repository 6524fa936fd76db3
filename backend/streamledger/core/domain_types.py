"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - StreamId is a positive integer assigned by the ledger, never reused
    - AccountId is an opaque, externally verified identity string
    - Amount is an integer count of the smallest currency unit, 0..MAX_AMOUNT
    - Timestamp is an integer count of seconds since the epoch

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

StreamId = NewType("StreamId", int)
AccountId = NewType("AccountId", str)


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)          # 0..MAX_AMOUNT
Timestamp = NewType("Timestamp", int)    # seconds since epoch

# Native currency balances are unsigned 128-bit on the host chain.
MAX_AMOUNT: int = 2**128 - 1
# Timestamps and stream ids are stored in signed BIGINT columns.
MAX_TIMESTAMP: int = 2**63 - 1
MAX_STREAM_ID: int = 2**63 - 1

FIRST_STREAM_ID: int = 1


# ─── Enums ───────────────────────────────────────────────────────

class StreamStatus(str, Enum):
    """Stream lifecycle — Active until every unit is withdrawn, then Drained."""
    ACTIVE = "active"
    DRAINED = "drained"


class AccountRole(str, Enum):
    """Which side of a stream an account is on, for listings."""
    PAYER = "payer"
    RECIPIENT = "recipient"


class TransferDirection(str, Enum):
    """Custody movement direction recorded by the book-entry adapter."""
    DEPOSIT = "deposit"
    PAYOUT = "payout"
