"""Custody Adapters — move value out of the ledger's custody on withdrawal.

Invariants:
    - transfer() either completes or raises TransferFailedError; never partial
    - BookEntryCustody writes into the ledger's own session, so a payout row
      exists only if the withdrawal commits
    - HttpCustodyClient makes exactly one attempt per call (no internal retries)
    - Every HTTP payout carries an Idempotency-Key header; a timed-out payout
      may have happened, and custody deduplicates the retry by that key

Design Decisions:
    - Deposits are settled by the host before the ledger runs: the HTTP adapter
      only logs them, the book-entry adapter records them for auditing
    - httpx.AsyncClient injected: shared connection pool in production,
      MockTransport in tests
"""

import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from streamledger.core.domain_types import AccountId, StreamId, TransferDirection
from streamledger.core.errors import TransferFailedError
from streamledger.models.custody_transfer import CustodyTransferRecord

logger = logging.getLogger(__name__)


class BookEntryCustody:
    """Records custody movements as rows next to the streams they belong to."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_deposit(
        self, stream_id: StreamId, payer: AccountId, amount: int,
    ) -> None:
        await self._record(stream_id, TransferDirection.DEPOSIT, payer, amount)

    async def transfer(
        self,
        stream_id: StreamId,
        recipient: AccountId,
        amount: int,
        idempotency_key: str,
    ) -> None:
        # Written in the ledger transaction; a rolled-back payout leaves no row
        # to deduplicate, so the key is not stored.
        await self._record(stream_id, TransferDirection.PAYOUT, recipient, amount)

    async def _record(
        self,
        stream_id: StreamId,
        direction: TransferDirection,
        account: AccountId,
        amount: int,
    ) -> None:
        self.db.add(CustodyTransferRecord(
            stream_id=stream_id,
            direction=direction.value,
            account=account,
            amount=amount,
        ))
        await self.db.flush()


class HttpCustodyClient:
    """Requests payouts from an external custody service."""

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self.client = client
        self.base_url = base_url.rstrip("/")

    async def record_deposit(
        self, stream_id: StreamId, payer: AccountId, amount: int,
    ) -> None:
        logger.debug(
            f"Deposit for stream {stream_id} settled by host",
            extra={"stream_id": stream_id, "caller": payer, "amount": amount},
        )

    async def transfer(
        self,
        stream_id: StreamId,
        recipient: AccountId,
        amount: int,
        idempotency_key: str,
    ) -> None:
        try:
            response = await self.client.post(
                f"{self.base_url}/transfers",
                headers={"Idempotency-Key": idempotency_key},
                json={
                    "stream_id": stream_id,
                    "recipient": recipient,
                    "amount": amount,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransferFailedError(
                f"custody responded {e.response.status_code}",
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(
                f"Custody payout for stream {stream_id} timed out; outcome unknown",
                extra={"stream_id": stream_id, "recipient": recipient,
                       "amount": amount},
            )
            raise TransferFailedError(
                f"custody timed out ({type(e).__name__})",
            ) from e
        except httpx.HTTPError as e:
            raise TransferFailedError(
                f"custody unreachable ({type(e).__name__})",
            ) from e
