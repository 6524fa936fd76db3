"""Fake Custody — records deposits/payouts and fails on demand.

Invariants:
    - payouts only lists transfers that did not fail
    - keys lists the idempotency key of every transfer attempt, failed or not
    - fail_next makes exactly the next transfer() raise TransferFailedError
"""

from streamledger.core.errors import TransferFailedError


class FakeCustody:

    def __init__(self):
        self.deposits: list[tuple[int, str, int]] = []
        self.payouts: list[tuple[int, str, int]] = []
        self.keys: list[str] = []
        self.fail_next = False

    async def record_deposit(self, stream_id, payer, amount) -> None:
        self.deposits.append((stream_id, payer, amount))

    async def transfer(self, stream_id, recipient, amount, idempotency_key) -> None:
        self.keys.append(idempotency_key)
        if self.fail_next:
            self.fail_next = False
            raise TransferFailedError("simulated custody outage")
        self.payouts.append((stream_id, recipient, amount))
