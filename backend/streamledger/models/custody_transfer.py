"""Custody Transfer ORM — audit trail written by the book-entry custody adapter.

Invariants:
    - Append-only; one deposit row per created stream, one payout row per
      committed withdrawal
    - Written in the same session as the stream update, so it commits or
      rolls back with it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from streamledger.db.base import Base
from streamledger.models.types import AmountType


class CustodyTransferRecord(Base):
    __tablename__ = "custody_transfers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    stream_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("streams.id"), nullable=False, index=True,
    )
    direction: Mapped[str] = mapped_column(String(10), nullable=False)
    account: Mapped[str] = mapped_column(String(128), nullable=False)
    amount: Mapped[int] = mapped_column(AmountType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
