"""Ledger Route — read-only view of ledger-wide state.

Invariants:
    - owner is reported, never modified (no administrative operations exist)
"""

from fastapi import APIRouter, Depends

from streamledger.api.dependencies import get_stream_ledger
from streamledger.schemas.stream import LedgerInfoResponse
from streamledger.services.stream_ledger import StreamLedger

router = APIRouter(prefix="/api/v1/ledger", tags=["ledger"])


@router.get("", response_model=LedgerInfoResponse)
async def get_ledger_info(ledger: StreamLedger = Depends(get_stream_ledger)):
    return LedgerInfoResponse(
        owner=await ledger.get_owner(),
        next_stream_id=await ledger.get_next_stream_id(),
    )
