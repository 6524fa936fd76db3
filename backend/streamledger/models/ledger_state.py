"""Ledger State ORM — single-row table holding the owner and the id counter.

Invariants:
    - Exactly one row, id = 1, created on first use
    - next_stream_id starts at 1 and only increases
    - owner is written once and never updated
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from streamledger.db.base import Base

LEDGER_STATE_ROW_ID = 1


class LedgerState(Base):
    __tablename__ = "ledger_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    next_stream_id: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=1,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
