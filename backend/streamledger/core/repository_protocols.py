"""Boundary Protocols — contracts between the ledger core and its host.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - A repository is a unit of work: writes are invisible until commit(),
      and rollback() discards everything staged since the last commit

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never are — the shell orchestrates the async calls
      around the pure logic
    - CustodyTransfer.transfer raises TransferFailedError: the ledger maps it to
      a rollback of the staged balance decrement
    - transfer() carries an idempotency key that is identical for every retry
      of the same withdrawal, so custody can deduplicate a payout whose
      outcome the ledger never learned (timeouts)
"""

from typing import Protocol

from streamledger.core.domain_types import AccountId, AccountRole, StreamId
from streamledger.core.stream import Stream


class StreamRepository(Protocol):
    """Contract for stream persistence — implemented by shell."""
    async def get_owner(self) -> AccountId: ...
    async def allocate_stream_id(self) -> StreamId: ...
    async def peek_next_stream_id(self) -> StreamId: ...
    async def insert(self, stream_id: StreamId, stream: Stream) -> None: ...
    async def get(
        self, stream_id: StreamId, for_update: bool = False,
    ) -> Stream | None: ...
    async def update(self, stream_id: StreamId, stream: Stream) -> None: ...
    async def list_by_account(
        self, account: AccountId, role: AccountRole | None = None,
    ) -> list[tuple[StreamId, Stream]]: ...
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class CustodyTransfer(Protocol):
    """Contract for value custody — implemented by shell."""
    async def record_deposit(
        self, stream_id: StreamId, payer: AccountId, amount: int,
    ) -> None: ...
    async def transfer(
        self,
        stream_id: StreamId,
        recipient: AccountId,
        amount: int,
        idempotency_key: str,
    ) -> None: ...
