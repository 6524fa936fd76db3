"""Stream Routes — HTTP surface of create_stream, recipient_withdraw and lookups.

Invariants:
    - Mutating routes run under ledger_lock: one ledger operation at a time
    - Mutating routes read the clock after taking ledger_lock, so successive
      mutations see non-decreasing times
    - Ledger errors propagate to the global StreamLedgerError handler
    - Reads are open to any identified caller

Design Decisions:
    - funded_amount in the body stands for the value attached to the call;
      the host has already moved it into custody
    - Withdraw response re-reads the stream so current_balance is the committed value
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from streamledger.api.dependencies import (
    get_caller,
    get_clock,
    get_request_context,
    get_stream_ledger,
    ledger_lock,
)
from streamledger.core.domain_types import AccountId, AccountRole, StreamId
from streamledger.schemas.stream import (
    StreamBalanceResponse,
    StreamCreate,
    StreamCreated,
    StreamListResponse,
    StreamResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from streamledger.services.stream_ledger import RequestContext, StreamLedger

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/streams", tags=["streams"])


@router.post(
    "", response_model=StreamCreated, status_code=status.HTTP_201_CREATED,
)
async def create_stream(
    body: StreamCreate,
    caller: AccountId = Depends(get_caller),
    clock=Depends(get_clock),
    ledger: StreamLedger = Depends(get_stream_ledger),
):
    """Open a stream from the caller to body.recipient."""
    async with ledger_lock:
        ctx = RequestContext(caller=caller, now=clock.now())
        stream_id = await ledger.create_stream(
            ctx,
            recipient=AccountId(body.recipient),
            funded_amount=body.funded_amount,
            end_date=body.end_date,
            duration=body.duration,
        )
    return StreamCreated(stream_id=stream_id)


@router.post("/{stream_id}/withdraw", response_model=WithdrawResponse)
async def recipient_withdraw(
    stream_id: int,
    body: WithdrawRequest | None = None,
    caller: AccountId = Depends(get_caller),
    clock=Depends(get_clock),
    ledger: StreamLedger = Depends(get_stream_ledger),
):
    """Withdraw unlocked value; an empty body withdraws everything available."""
    requested = body.withdrawal_amount if body else None
    async with ledger_lock:
        ctx = RequestContext(caller=caller, now=clock.now())
        amount = await ledger.recipient_withdraw(
            ctx, StreamId(stream_id), requested,
        )
        stream = await ledger.get_stream_by_id(StreamId(stream_id))
    return WithdrawResponse(
        stream_id=stream_id,
        amount_withdrawn=amount,
        current_balance=stream.current_balance,
    )


@router.get("", response_model=StreamListResponse)
async def list_my_streams(
    role: AccountRole | None = Query(None),
    caller: AccountId = Depends(get_caller),
    ledger: StreamLedger = Depends(get_stream_ledger),
):
    """Streams the caller pays into or receives from."""
    streams = await ledger.list_streams_for(caller, role)
    return StreamListResponse(streams=[
        StreamResponse.from_domain(sid, s) for sid, s in streams
    ])


@router.get("/{stream_id}", response_model=StreamResponse)
async def get_stream_by_id(
    stream_id: int,
    _caller: AccountId = Depends(get_caller),
    ledger: StreamLedger = Depends(get_stream_ledger),
):
    stream = await ledger.get_stream_by_id(StreamId(stream_id))
    return StreamResponse.from_domain(stream_id, stream)


@router.get("/{stream_id}/balance", response_model=StreamBalanceResponse)
async def get_stream_balance(
    stream_id: int,
    ctx: RequestContext = Depends(get_request_context),
    ledger: StreamLedger = Depends(get_stream_ledger),
):
    """Vested / withdrawn / withdrawable amounts as of now."""
    snapshot = await ledger.get_vesting_snapshot(StreamId(stream_id), ctx.now)
    return StreamBalanceResponse.from_snapshot(stream_id, snapshot)
