"""In-Memory Stream Repository — StreamRepository backed by dicts.

Invariants:
    - Same unit-of-work contract as SqlStreamRepository: staged writes are
      visible to the same repository, applied on commit(), dropped on rollback()
    - Committed streams are never removed

Design Decisions:
    - Used by ledger tests and local experiments; no locking because the
      ledger runs one operation at a time
"""

from streamledger.core.domain_types import (
    FIRST_STREAM_ID, AccountId, AccountRole, StreamId,
)
from streamledger.core.stream import Stream


class InMemoryStreamRepository:

    def __init__(self, owner: AccountId, next_stream_id: int = FIRST_STREAM_ID):
        self.owner = owner
        self._streams: dict[StreamId, Stream] = {}
        self._next_stream_id = next_stream_id
        self._staged: dict[StreamId, Stream] = {}
        self._staged_next_id: int | None = None
        self.commits = 0
        self.rollbacks = 0

    async def get_owner(self) -> AccountId:
        return self.owner

    async def allocate_stream_id(self) -> StreamId:
        current = self._staged_next_id or self._next_stream_id
        self._staged_next_id = current + 1
        return StreamId(current)

    async def peek_next_stream_id(self) -> StreamId:
        return StreamId(self._staged_next_id or self._next_stream_id)

    async def insert(self, stream_id: StreamId, stream: Stream) -> None:
        if stream_id in self._streams or stream_id in self._staged:
            raise KeyError(f"stream {stream_id} already exists")
        self._staged[stream_id] = stream

    async def get(
        self, stream_id: StreamId, for_update: bool = False,
    ) -> Stream | None:
        if stream_id in self._staged:
            return self._staged[stream_id]
        return self._streams.get(stream_id)

    async def update(self, stream_id: StreamId, stream: Stream) -> None:
        if await self.get(stream_id) is None:
            raise LookupError(f"stream {stream_id} does not exist")
        self._staged[stream_id] = stream

    async def list_by_account(
        self, account: AccountId, role: AccountRole | None = None,
    ) -> list[tuple[StreamId, Stream]]:
        merged = {**self._streams, **self._staged}
        return [
            (sid, s) for sid, s in sorted(merged.items())
            if (role != AccountRole.RECIPIENT and s.payer == account)
            or (role != AccountRole.PAYER and s.recipient == account)
        ]

    async def commit(self) -> None:
        self._streams.update(self._staged)
        if self._staged_next_id is not None:
            self._next_stream_id = self._staged_next_id
        self._staged.clear()
        self._staged_next_id = None
        self.commits += 1

    async def rollback(self) -> None:
        self._staged.clear()
        self._staged_next_id = None
        self.rollbacks += 1
