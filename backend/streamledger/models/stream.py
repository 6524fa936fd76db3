"""Stream ORM — persists one row per stream, keyed by the ledger-assigned id.

Invariants:
    - id comes from ledger_state.next_stream_id (no autoincrement)
    - payer, recipient, original_balance, start_date, end_date written once
    - current_balance only updated by withdrawals

Design Decisions:
    - Indexes on payer and recipient: listing streams per account
    - updated_at bumped on every withdrawal for auditing
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from streamledger.db.base import Base
from streamledger.models.types import AmountType


class StreamRecord(Base):
    """Stored form of core.stream.Stream."""
    __tablename__ = "streams"

    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False,
    )
    payer: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    recipient: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True,
    )
    original_balance: Mapped[int] = mapped_column(AmountType, nullable=False)
    current_balance: Mapped[int] = mapped_column(AmountType, nullable=False)
    start_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
