"""Vesting Calculator — how much of a stream has unlocked at a given instant.

Invariants:
    - vested_amount is 0 while now <= start_date
    - vested_amount is original_balance once now >= end_date
    - In between it grows linearly and is truncated toward zero, so the ledger
      never reports more value than has strictly elapsed
    - vested_amount is monotonically non-decreasing in `now`
    - withdrawable_amount is never negative
    - Every function is pure: `now` is always supplied by the caller

Design Decisions:
    - Multiply before dividing on Python ints: arbitrary precision, so the
      128-bit balance times a 64-bit elapsed time cannot overflow
    - A negative withdrawable result is clamped to 0 rather than raised; it is
      unreachable while the Stream invariants hold
"""

from dataclasses import dataclass

from streamledger.core.stream import Stream


@dataclass(frozen=True)
class VestingSnapshot:
    """Point-in-time view of a stream's balances."""
    as_of: int
    vested: int
    withdrawn: int
    withdrawable: int
    unvested: int


def vested_amount(stream: Stream, now: int) -> int:
    """Cumulative amount unlocked by `now`, withdrawn or not."""
    if now <= stream.start_date:
        return 0
    if now >= stream.end_date:
        return stream.original_balance
    elapsed = now - stream.start_date
    return stream.original_balance * elapsed // stream.total_duration


def withdrawable_amount(stream: Stream, now: int) -> int:
    """Vested minus already withdrawn, floored at zero."""
    return max(0, vested_amount(stream, now) - stream.withdrawn)


def unvested_amount(stream: Stream, now: int) -> int:
    return stream.original_balance - vested_amount(stream, now)


def vesting_snapshot(stream: Stream, now: int) -> VestingSnapshot:
    vested = vested_amount(stream, now)
    return VestingSnapshot(
        as_of=now,
        vested=vested,
        withdrawn=stream.withdrawn,
        withdrawable=max(0, vested - stream.withdrawn),
        unvested=stream.original_balance - vested,
    )
