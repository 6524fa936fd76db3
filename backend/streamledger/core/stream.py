"""Stream — immutable value object for one payer-to-recipient commitment.

Invariants:
    - 0 <= current_balance <= original_balance at all times
    - original_balance > 0 and end_date > start_date (checked before construction)
    - payer, recipient, original_balance, start_date, end_date never change
    - current_balance only decreases, and only through with_withdrawal()

Design Decisions:
    - Frozen dataclass: a withdrawal produces a new value, so a rolled-back
      unit of work never leaves a half-mutated stream in memory
    - Balance bounds enforced in __post_init__: a corrupt record fails loudly
      at load time instead of producing negative availability later
"""

from dataclasses import dataclass, replace

from streamledger.core.domain_types import AccountId, StreamStatus


@dataclass(frozen=True)
class Stream:
    """A time-vested, one-directional value commitment."""

    payer: AccountId
    recipient: AccountId
    original_balance: int
    current_balance: int
    start_date: int
    end_date: int

    def __post_init__(self) -> None:
        if not 0 <= self.current_balance <= self.original_balance:
            raise ValueError(
                f"current_balance {self.current_balance} outside "
                f"0..{self.original_balance}",
            )

    @classmethod
    def open(
        cls,
        payer: AccountId,
        recipient: AccountId,
        funded_amount: int,
        start_date: int,
        end_date: int,
    ) -> "Stream":
        """New stream with nothing withdrawn yet."""
        return cls(
            payer=payer,
            recipient=recipient,
            original_balance=funded_amount,
            current_balance=funded_amount,
            start_date=start_date,
            end_date=end_date,
        )

    @property
    def withdrawn(self) -> int:
        return self.original_balance - self.current_balance

    @property
    def total_duration(self) -> int:
        return self.end_date - self.start_date

    @property
    def status(self) -> StreamStatus:
        if self.current_balance == 0:
            return StreamStatus.DRAINED
        return StreamStatus.ACTIVE

    def with_withdrawal(self, amount: int) -> "Stream":
        """Return the stream after `amount` has left it.

        Callers must have resolved `amount` against the withdrawable
        balance; this only guards the balance floor.
        """
        if amount < 0 or amount > self.current_balance:
            raise ValueError(
                f"withdrawal {amount} exceeds current balance {self.current_balance}",
            )
        return replace(self, current_balance=self.current_balance - amount)


def payout_idempotency_key(stream_id: int, stream: Stream) -> str:
    """Key for the payout that would move value out of `stream` next.

    Built from the amount already withdrawn: a rolled-back withdrawal leaves
    it unchanged, so a retry reuses the key, while every committed
    withdrawal moves it forward.
    """
    return f"{stream_id}:{stream.withdrawn}"
