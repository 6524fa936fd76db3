"""Stream Ledger — creation, withdrawal and lookup of payment streams.

Invariants:
    - Every operation sees one `now` (RequestContext.now), read once by the caller
    - Validation happens before any repository write; a rejected call leaves no trace
    - A withdrawal commits only after custody confirmed the transfer; a
      TransferFailedError rolls the staged balance decrement back
    - Retries of a rolled-back withdrawal reach custody with the same
      idempotency key as the failed attempt
    - Stream ids come from the repository counter and are never reused
    - Streams are never deleted; a drained stream stays readable

Design Decisions:
    - Imperative shell around core/vesting.py and core/enforce_stream.py: the
      pure rules decide, this class sequences IO around them
    - Repository and custody injected at construction: the same ledger runs on
      SQLAlchemy in production and on InMemoryStreamRepository in tests
    - Reads are unrestricted (any caller may read any stream), matching the
      observed contract surface
"""

import logging
from dataclasses import dataclass

from streamledger.core.domain_types import AccountId, AccountRole, StreamId
from streamledger.core.enforce_stream import (
    check_creation_parameters,
    check_withdraw_permission,
    resolve_end_date,
    resolve_withdrawal_amount,
)
from streamledger.core.errors import (
    StreamLedgerError,
    StreamNotFoundError,
    TransferFailedError,
)
from streamledger.core.repository_protocols import CustodyTransfer, StreamRepository
from streamledger.core.stream import Stream, payout_idempotency_key
from streamledger.core.vesting import (
    VestingSnapshot,
    vesting_snapshot,
    withdrawable_amount,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Caller identity and clock reading for a single ledger operation."""
    caller: AccountId
    now: int


class StreamLedger:
    """Owns all streams and enforces creation/withdrawal rules."""

    def __init__(
        self,
        repository: StreamRepository,
        custody: CustodyTransfer,
        minimum_duration: int = 0,
    ):
        self.repository = repository
        self.custody = custody
        self.minimum_duration = minimum_duration

    async def create_stream(
        self,
        ctx: RequestContext,
        recipient: AccountId,
        funded_amount: int | None,
        end_date: int | None = None,
        duration: int | None = None,
    ) -> StreamId:
        """Open a stream from ctx.caller to recipient starting at ctx.now."""
        start_date = ctx.now
        _raise_if(
            check_creation_parameters(ctx.caller, recipient, funded_amount), ctx,
        )
        resolved_end, error = resolve_end_date(
            start_date, end_date, duration, self.minimum_duration,
        )
        _raise_if(error, ctx)

        stream = Stream.open(
            ctx.caller, recipient, funded_amount, start_date, resolved_end,
        )
        try:
            stream_id = await self.repository.allocate_stream_id()
            await self.repository.insert(stream_id, stream)
            await self.custody.record_deposit(stream_id, ctx.caller, funded_amount)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            f"Stream {stream_id} created",
            extra={
                "stream_id": stream_id, "caller": ctx.caller,
                "recipient": recipient, "amount": funded_amount,
            },
        )
        return stream_id

    async def recipient_withdraw(
        self,
        ctx: RequestContext,
        stream_id: StreamId,
        withdrawal_amount: int | None = None,
    ) -> int:
        """Withdraw unlocked value; returns the amount actually withdrawn."""
        stream = await self.repository.get(stream_id, for_update=True)
        if stream is None:
            await self.repository.rollback()
            _raise_if(StreamNotFoundError(stream_id), ctx)

        try:
            _raise_if(check_withdraw_permission(stream, ctx.caller), ctx, stream_id)
            available = withdrawable_amount(stream, ctx.now)
            amount, error = resolve_withdrawal_amount(withdrawal_amount, available)
            _raise_if(error, ctx, stream_id)
        except StreamLedgerError:
            await self.repository.rollback()
            raise

        if amount == 0:
            await self.repository.rollback()
            logger.info(
                f"Stream {stream_id}: nothing unlocked, no-op withdrawal",
                extra={"stream_id": stream_id, "caller": ctx.caller},
            )
            return 0

        try:
            await self.repository.update(stream_id, stream.with_withdrawal(amount))
            await self.custody.transfer(
                stream_id, stream.recipient, amount,
                payout_idempotency_key(stream_id, stream),
            )
            await self.repository.commit()
        except TransferFailedError as e:
            await self.repository.rollback()
            e.context.stream_id = stream_id
            e.context.caller = ctx.caller
            logger.error(
                f"Stream {stream_id}: withdrawal rolled back: {e.message}",
                extra={"stream_id": stream_id, "error_code": e.code},
            )
            raise
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            f"Stream {stream_id}: withdrew {amount}",
            extra={"stream_id": stream_id, "caller": ctx.caller, "amount": amount},
        )
        return amount

    async def get_stream_by_id(self, stream_id: StreamId) -> Stream:
        stream = await self.repository.get(stream_id)
        if stream is None:
            raise StreamNotFoundError(stream_id)
        return stream

    async def get_vesting_snapshot(
        self, stream_id: StreamId, now: int,
    ) -> VestingSnapshot:
        """Vested / withdrawn / withdrawable breakdown at `now`."""
        stream = await self.get_stream_by_id(stream_id)
        return vesting_snapshot(stream, now)

    async def list_streams_for(
        self, account: AccountId, role: AccountRole | None = None,
    ) -> list[tuple[StreamId, Stream]]:
        return await self.repository.list_by_account(account, role)

    async def get_owner(self) -> AccountId:
        return await self.repository.get_owner()

    async def get_next_stream_id(self) -> StreamId:
        return await self.repository.peek_next_stream_id()


def _raise_if(
    error: StreamLedgerError | None,
    ctx: RequestContext,
    stream_id: StreamId | None = None,
) -> None:
    """Raise a validator's error after stamping request context on it."""
    if error is None:
        return
    error.context.caller = ctx.caller
    if stream_id is not None:
        error.context.stream_id = stream_id
    logger.warning(
        f"Ledger call rejected: {error.message}",
        extra={
            "error_code": error.code, "caller": ctx.caller,
            "stream_id": error.context.stream_id,
        },
    )
    raise error
