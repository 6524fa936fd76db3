"""Stream Ledger — tests for create_stream, recipient_withdraw and lookups.

Invariants:
    - Runs on InMemoryStreamRepository + FakeCustody (no database, no HTTP)
    - Every failing call leaves committed state untouched

Tests cover:
    - creation with end_date or duration, id allocation from 1, never reused
    - creation failures: time parameters, funds, self-stream
    - full-duration round trip (1000 over 0..1000, withdraw at 500 and 1000)
    - explicit, over-sized, zero and unauthorized withdrawals
    - no-op withdrawal when nothing is unlocked
    - transfer failure rolls the balance decrement back
    - get_stream_by_id snapshot and not-found
"""

import pytest

from streamledger.core.domain_types import AccountId, AccountRole, StreamId, StreamStatus
from streamledger.core.errors import (
    InsufficientAvailableBalanceError,
    InvalidTimeParametersError,
    SelfStreamError,
    StreamNotFoundError,
    TransferFailedError,
    UnauthorizedError,
    ZeroOrMissingFundsError,
)
from streamledger.core.stream import Stream
from streamledger.infrastructure.memory_stream_repository import InMemoryStreamRepository
from streamledger.services.stream_ledger import RequestContext, StreamLedger

from tests.services.fake_custody import FakeCustody

ALICE = AccountId("alice")
BOB = AccountId("bob")
CHARLIE = AccountId("charlie")


@pytest.fixture
def repository():
    return InMemoryStreamRepository(owner=AccountId("admin"))


@pytest.fixture
def custody():
    return FakeCustody()


@pytest.fixture
def ledger(repository, custody):
    return StreamLedger(repository, custody)


def _as(caller, now):
    return RequestContext(caller=caller, now=now)


async def _open(ledger, funds=1000, start=0, end=1000) -> StreamId:
    return await ledger.create_stream(
        _as(ALICE, start), BOB, funds, end_date=end,
    )


# ─── create_stream ───────────────────────────────────────────────

async def test_create_stream_with_end_date(ledger, custody):
    stream_id = await ledger.create_stream(
        _as(ALICE, 100), BOB, 500, end_date=1_910_126_705,
    )
    assert stream_id == 1
    stream = await ledger.get_stream_by_id(stream_id)
    assert stream == Stream(ALICE, BOB, 500, 500, 100, 1_910_126_705)
    assert custody.deposits == [(1, ALICE, 500)]


async def test_create_stream_with_duration(ledger):
    stream_id = await ledger.create_stream(
        _as(ALICE, 100), BOB, 500, duration=10_000,
    )
    stream = await ledger.get_stream_by_id(stream_id)
    assert stream.start_date == 100
    assert stream.end_date == 10_100


async def test_stream_ids_increase_monotonically(ledger):
    ids = [await _open(ledger) for _ in range(3)]
    assert ids == [1, 2, 3]
    assert await ledger.get_next_stream_id() == 4


async def test_failed_creation_does_not_consume_an_id(ledger, repository):
    await _open(ledger)
    with pytest.raises(ZeroOrMissingFundsError):
        await ledger.create_stream(_as(ALICE, 0), BOB, 0, duration=10)
    assert await _open(ledger) == 2


async def test_create_without_funds_fails(ledger):
    with pytest.raises(ZeroOrMissingFundsError):
        await ledger.create_stream(_as(ALICE, 0), BOB, None, duration=10)


async def test_create_with_neither_date_fails(ledger, repository):
    with pytest.raises(InvalidTimeParametersError):
        await ledger.create_stream(_as(ALICE, 0), BOB, 10)
    assert await repository.list_by_account(ALICE) == []


async def test_create_with_both_dates_fails(ledger):
    with pytest.raises(InvalidTimeParametersError):
        await ledger.create_stream(
            _as(ALICE, 0), BOB, 10, end_date=100, duration=100,
        )


async def test_create_with_past_end_date_fails(ledger):
    with pytest.raises(InvalidTimeParametersError):
        await ledger.create_stream(_as(ALICE, 500), BOB, 10, end_date=100)


async def test_create_to_self_fails(ledger):
    with pytest.raises(SelfStreamError) as exc:
        await ledger.create_stream(_as(BOB, 0), BOB, 10, duration=100)
    assert exc.value.context.caller == BOB


async def test_minimum_duration_applies(repository, custody):
    ledger = StreamLedger(repository, custody, minimum_duration=300)
    with pytest.raises(InvalidTimeParametersError):
        await ledger.create_stream(_as(ALICE, 0), BOB, 10, duration=100)
    assert await ledger.create_stream(_as(ALICE, 0), BOB, 10, duration=300) == 1


# ─── recipient_withdraw ──────────────────────────────────────────

async def test_full_duration_round_trip(ledger, custody):
    stream_id = await _open(ledger, funds=1000, start=0, end=1000)

    snapshot = await ledger.get_vesting_snapshot(stream_id, 500)
    assert snapshot.vested == 500

    assert await ledger.recipient_withdraw(_as(BOB, 500), stream_id) == 500
    assert (await ledger.get_stream_by_id(stream_id)).current_balance == 500

    assert await ledger.recipient_withdraw(_as(BOB, 1000), stream_id) == 500
    stream = await ledger.get_stream_by_id(stream_id)
    assert stream.current_balance == 0
    assert stream.status == StreamStatus.DRAINED
    assert custody.payouts == [(1, BOB, 500), (1, BOB, 500)]


async def test_withdraw_specific_amount(ledger):
    stream_id = await _open(ledger, funds=3_000_000_000, end=300)
    amount = await ledger.recipient_withdraw(
        _as(BOB, 50_000), stream_id, 1_500_000_000,
    )
    assert amount == 1_500_000_000
    stream = await ledger.get_stream_by_id(stream_id)
    assert stream.current_balance == 1_500_000_000


async def test_withdraw_more_than_available_fails_without_mutation(ledger, custody):
    stream_id = await _open(ledger, funds=1000, end=1000)
    for _ in range(2):
        with pytest.raises(InsufficientAvailableBalanceError):
            await ledger.recipient_withdraw(_as(BOB, 250), stream_id, 251)
    assert (await ledger.get_stream_by_id(stream_id)).current_balance == 1000
    assert custody.payouts == []


async def test_withdraw_zero_amount_fails(ledger):
    stream_id = await _open(ledger)
    with pytest.raises(InsufficientAvailableBalanceError):
        await ledger.recipient_withdraw(_as(BOB, 500), stream_id, 0)


async def test_withdraw_by_stranger_is_unauthorized(ledger):
    stream_id = await _open(ledger)
    with pytest.raises(UnauthorizedError):
        await ledger.recipient_withdraw(_as(CHARLIE, 1000), stream_id)
    assert (await ledger.get_stream_by_id(stream_id)).current_balance == 1000


async def test_payer_cannot_withdraw(ledger):
    stream_id = await _open(ledger)
    with pytest.raises(UnauthorizedError):
        await ledger.recipient_withdraw(_as(ALICE, 1000), stream_id)


async def test_withdraw_from_unknown_stream(ledger):
    with pytest.raises(StreamNotFoundError):
        await ledger.recipient_withdraw(_as(BOB, 0), StreamId(999))


async def test_withdraw_all_with_nothing_unlocked_is_noop(ledger, custody):
    stream_id = await _open(ledger, start=0, end=1000)
    assert await ledger.recipient_withdraw(_as(BOB, 0), stream_id) == 0
    assert (await ledger.get_stream_by_id(stream_id)).current_balance == 1000
    assert custody.payouts == []


async def test_withdraw_all_after_drain_is_noop(ledger):
    stream_id = await _open(ledger)
    await ledger.recipient_withdraw(_as(BOB, 2000), stream_id)
    assert await ledger.recipient_withdraw(_as(BOB, 3000), stream_id) == 0


async def test_explicit_amount_with_nothing_unlocked_fails(ledger):
    stream_id = await _open(ledger)
    with pytest.raises(InsufficientAvailableBalanceError):
        await ledger.recipient_withdraw(_as(BOB, 0), stream_id, 100)


async def test_transfer_failure_rolls_back_balance(ledger, custody, repository):
    stream_id = await _open(ledger)
    custody.fail_next = True
    with pytest.raises(TransferFailedError) as exc:
        await ledger.recipient_withdraw(_as(BOB, 600), stream_id)
    assert exc.value.context.stream_id == stream_id
    assert (await ledger.get_stream_by_id(stream_id)).current_balance == 1000
    assert custody.payouts == []

    # the ledger keeps serving after the failed call
    assert await ledger.recipient_withdraw(_as(BOB, 600), stream_id) == 600
    assert custody.keys == [f"{stream_id}:0", f"{stream_id}:0"]


async def test_balance_invariant_across_many_withdrawals(ledger):
    stream_id = await _open(ledger, funds=997, end=1000)
    total = 0
    for now in range(0, 1100, 37):
        total += await ledger.recipient_withdraw(_as(BOB, now), stream_id)
        stream = await ledger.get_stream_by_id(stream_id)
        assert 0 <= stream.current_balance <= stream.original_balance
        assert stream.withdrawn == total
    assert total == 997


# ─── reads ───────────────────────────────────────────────────────

async def test_get_stream_by_id_returns_stored_fields(ledger):
    stream_id = await _open(ledger, funds=3_000_000_000, start=0, end=300)
    stream = await ledger.get_stream_by_id(stream_id)
    assert stream.payer == ALICE
    assert stream.recipient == BOB
    assert stream.original_balance == 3_000_000_000
    assert stream.current_balance == 3_000_000_000
    assert stream.start_date == 0
    assert stream.end_date == 300


async def test_get_unknown_stream_fails(ledger):
    with pytest.raises(StreamNotFoundError):
        await ledger.get_stream_by_id(StreamId(1))


async def test_list_streams_by_role(ledger):
    await _open(ledger)
    await ledger.create_stream(_as(BOB, 0), CHARLIE, 5, duration=10)
    assert [sid for sid, _ in await ledger.list_streams_for(BOB)] == [1, 2]
    payer_side = await ledger.list_streams_for(BOB, AccountRole.PAYER)
    assert [sid for sid, _ in payer_side] == [2]
    recipient_side = await ledger.list_streams_for(BOB, AccountRole.RECIPIENT)
    assert [sid for sid, _ in recipient_side] == [1]


async def test_owner_is_reported(ledger):
    assert await ledger.get_owner() == "admin"
