"""SQL Stream Repository — StreamRepository over a SQLAlchemy AsyncSession.

Invariants:
    - One repository per AsyncSession; commit()/rollback() end its unit of work
    - Id allocation and stream insert share the transaction: a rolled-back
      create leaves next_stream_id untouched
    - get(for_update=True) takes a row lock on backends that support it
    - Ids outside FIRST_STREAM_ID..MAX_STREAM_ID are never stored, so get()
      answers None for them without querying
    - Maps StreamRecord <-> core Stream; ORM objects never leave this module

Design Decisions:
    - ledger_state row created lazily with the configured owner: a fresh
      database needs no seeding step
    - flush() after every write: integrity errors surface inside the ledger
      call that caused them, not at commit
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamledger.core.domain_types import (
    FIRST_STREAM_ID, MAX_STREAM_ID, AccountId, AccountRole, StreamId,
)
from streamledger.core.stream import Stream
from streamledger.models.ledger_state import LEDGER_STATE_ROW_ID, LedgerState
from streamledger.models.stream import StreamRecord

logger = logging.getLogger(__name__)


def _to_domain(record: StreamRecord) -> Stream:
    return Stream(
        payer=AccountId(record.payer),
        recipient=AccountId(record.recipient),
        original_balance=record.original_balance,
        current_balance=record.current_balance,
        start_date=record.start_date,
        end_date=record.end_date,
    )


class SqlStreamRepository:
    """Persists streams and the id counter in the ledger database."""

    def __init__(self, db: AsyncSession, owner: AccountId):
        self.db = db
        self.owner = owner

    async def _state(self, for_update: bool = False) -> LedgerState:
        query = select(LedgerState).where(LedgerState.id == LEDGER_STATE_ROW_ID)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        state = result.scalar_one_or_none()
        if state is None:
            state = LedgerState(
                id=LEDGER_STATE_ROW_ID,
                owner=self.owner,
                next_stream_id=FIRST_STREAM_ID,
            )
            self.db.add(state)
            await self.db.flush()
            logger.info(f"Ledger state initialized for owner {self.owner}")
        return state

    async def get_owner(self) -> AccountId:
        state = await self._state()
        return AccountId(state.owner)

    async def allocate_stream_id(self) -> StreamId:
        state = await self._state(for_update=True)
        stream_id = state.next_stream_id
        state.next_stream_id = stream_id + 1
        await self.db.flush()
        return StreamId(stream_id)

    async def peek_next_stream_id(self) -> StreamId:
        state = await self._state()
        return StreamId(state.next_stream_id)

    async def insert(self, stream_id: StreamId, stream: Stream) -> None:
        self.db.add(StreamRecord(
            id=stream_id,
            payer=stream.payer,
            recipient=stream.recipient,
            original_balance=stream.original_balance,
            current_balance=stream.current_balance,
            start_date=stream.start_date,
            end_date=stream.end_date,
        ))
        await self.db.flush()

    async def get(
        self, stream_id: StreamId, for_update: bool = False,
    ) -> Stream | None:
        if not FIRST_STREAM_ID <= stream_id <= MAX_STREAM_ID:
            return None
        query = select(StreamRecord).where(StreamRecord.id == stream_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        record = result.scalar_one_or_none()
        return _to_domain(record) if record else None

    async def update(self, stream_id: StreamId, stream: Stream) -> None:
        record = await self.db.get(StreamRecord, stream_id)
        if record is None:
            raise LookupError(f"stream {stream_id} vanished mid-operation")
        record.current_balance = stream.current_balance
        await self.db.flush()

    async def list_by_account(
        self, account: AccountId, role: AccountRole | None = None,
    ) -> list[tuple[StreamId, Stream]]:
        query = select(StreamRecord).order_by(StreamRecord.id)
        if role == AccountRole.PAYER:
            query = query.where(StreamRecord.payer == account)
        elif role == AccountRole.RECIPIENT:
            query = query.where(StreamRecord.recipient == account)
        else:
            query = query.where(or_(
                StreamRecord.payer == account, StreamRecord.recipient == account,
            ))
        result = await self.db.execute(query)
        return [
            (StreamId(r.id), _to_domain(r)) for r in result.scalars().all()
        ]

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
