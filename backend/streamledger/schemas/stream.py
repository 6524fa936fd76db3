"""Stream Schemas — Pydantic models for the stream endpoints.

Invariants:
    - Amounts are JSON integers in 0..MAX_AMOUNT (zero reaches the ledger,
      which rejects it with ZERO_OR_MISSING_FUNDS / INSUFFICIENT_AVAILABLE_BALANCE)
    - Dates and durations are integer seconds in 0..MAX_TIMESTAMP
    - recipient is stripped and non-empty

Design Decisions:
    - strict int for amounts: "1.5" or 1.5 never silently truncates to 1
    - from_domain() constructors keep route handlers free of field mapping
"""

from pydantic import BaseModel, Field, StrictInt, field_validator

from streamledger.core.domain_types import (
    MAX_AMOUNT, MAX_TIMESTAMP, StreamStatus,
)
from streamledger.core.stream import Stream
from streamledger.core.vesting import VestingSnapshot


def _check_max_amount(v: int | None) -> int | None:
    # Field(le=...) is avoided: the bound exceeds 64 bits.
    if v is not None and v > MAX_AMOUNT:
        raise ValueError(f"amount exceeds {MAX_AMOUNT}")
    return v


class StreamCreate(BaseModel):
    """create_stream input — the attached value travels as funded_amount."""
    recipient: str = Field(min_length=1, max_length=128)
    funded_amount: StrictInt | None = Field(None, ge=0)
    end_date: StrictInt | None = Field(None, ge=0, le=MAX_TIMESTAMP)
    duration: StrictInt | None = Field(None, ge=0, le=MAX_TIMESTAMP)

    @field_validator("funded_amount")
    @classmethod
    def check_amount_range(cls, v: int | None) -> int | None:
        return _check_max_amount(v)

    @field_validator("recipient")
    @classmethod
    def strip_recipient(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("recipient cannot be empty or whitespace")
        return v


class StreamCreated(BaseModel):
    stream_id: int


class WithdrawRequest(BaseModel):
    """recipient_withdraw input — omit withdrawal_amount to take everything unlocked."""
    withdrawal_amount: StrictInt | None = Field(None, ge=0)

    @field_validator("withdrawal_amount")
    @classmethod
    def check_amount_range(cls, v: int | None) -> int | None:
        return _check_max_amount(v)


class WithdrawResponse(BaseModel):
    stream_id: int
    amount_withdrawn: int
    current_balance: int


class StreamResponse(BaseModel):
    """Stored stream record, exactly as the ledger holds it."""
    stream_id: int
    payer: str
    recipient: str
    original_balance: int
    current_balance: int
    start_date: int
    end_date: int
    status: StreamStatus

    @classmethod
    def from_domain(cls, stream_id: int, stream: Stream) -> "StreamResponse":
        return cls(
            stream_id=stream_id,
            payer=stream.payer,
            recipient=stream.recipient,
            original_balance=stream.original_balance,
            current_balance=stream.current_balance,
            start_date=stream.start_date,
            end_date=stream.end_date,
            status=stream.status,
        )


class StreamBalanceResponse(BaseModel):
    """Vesting breakdown of a stream at as_of."""
    stream_id: int
    as_of: int
    vested: int
    withdrawn: int
    withdrawable: int
    unvested: int

    @classmethod
    def from_snapshot(
        cls, stream_id: int, snapshot: VestingSnapshot,
    ) -> "StreamBalanceResponse":
        return cls(
            stream_id=stream_id,
            as_of=snapshot.as_of,
            vested=snapshot.vested,
            withdrawn=snapshot.withdrawn,
            withdrawable=snapshot.withdrawable,
            unvested=snapshot.unvested,
        )


class StreamListResponse(BaseModel):
    streams: list[StreamResponse]


class LedgerInfoResponse(BaseModel):
    owner: str
    next_stream_id: int
