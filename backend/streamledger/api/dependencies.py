"""API Dependencies — build the per-request ledger, caller identity and clock.

Invariants:
    - The caller is the X-Account-Id header, set by the authenticating gateway
      in front of this service; a request without it is rejected
    - The clock is read exactly once per request, into RequestContext.now;
      mutating routes read it themselves once they hold ledger_lock
    - One StreamLedger per request, sharing the request's AsyncSession with
      its repository and (book-entry) custody
    - ledger_lock serializes every mutating ledger call in this process

Design Decisions:
    - Module-level lock and HTTP client: deliberate exception to no-global-state
      (single-process uvicorn; multi-process deployments rely on row locks)
    - Clock as a dependency: tests override get_clock with a FixedClock
"""

import asyncio

import httpx
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from streamledger.config import Settings, get_settings
from streamledger.core.domain_types import AccountId
from streamledger.core.errors import UnauthorizedError
from streamledger.core.repository_protocols import CustodyTransfer
from streamledger.infrastructure.clock import SystemClock
from streamledger.infrastructure.custody import BookEntryCustody, HttpCustodyClient
from streamledger.infrastructure.database import get_db
from streamledger.infrastructure.stream_repository import SqlStreamRepository
from streamledger.services.stream_ledger import RequestContext, StreamLedger

ledger_lock = asyncio.Lock()

_system_clock = SystemClock()
_custody_http_client: httpx.AsyncClient | None = None


def init_custody_client(settings: Settings) -> None:
    global _custody_http_client
    if settings.custody_mode == "http":
        _custody_http_client = httpx.AsyncClient(
            timeout=settings.custody_timeout_seconds,
        )


async def close_custody_client() -> None:
    global _custody_http_client
    if _custody_http_client is not None:
        await _custody_http_client.aclose()
        _custody_http_client = None


def get_clock():
    return _system_clock


def get_caller(
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
) -> AccountId:
    if not x_account_id or not x_account_id.strip():
        raise UnauthorizedError("Missing caller identity (X-Account-Id header).")
    return AccountId(x_account_id.strip())


def get_request_context(
    caller: AccountId = Depends(get_caller),
    clock=Depends(get_clock),
) -> RequestContext:
    return RequestContext(caller=caller, now=clock.now())


def get_custody(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CustodyTransfer:
    if settings.custody_mode == "http":
        if _custody_http_client is None:
            raise RuntimeError("Custody HTTP client not initialized")
        return HttpCustodyClient(_custody_http_client, settings.custody_url)
    return BookEntryCustody(db)


def get_stream_ledger(
    db: AsyncSession = Depends(get_db),
    custody: CustodyTransfer = Depends(get_custody),
    settings: Settings = Depends(get_settings),
) -> StreamLedger:
    return StreamLedger(
        SqlStreamRepository(db, AccountId(settings.ledger_owner)),
        custody,
        minimum_duration=settings.stream_minimum_duration,
    )
