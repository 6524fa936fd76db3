"""Stream Enforcement — pure validation of creation and withdrawal requests.

Invariants:
    - Every check is PURE: returns the error to raise (or None), never raises itself
    - The shell raises the returned error before touching the repository
    - A stream to oneself is rejected before the funds are looked at
    - Exactly one of end_date / duration must be given
    - A resolved end date never exceeds max_end_date (the BIGINT column range)

Design Decisions:
    - Resolvers return (value, error) pairs: the resolved end date or withdrawal
      amount comes out of the same rule that validates it
    - minimum_duration defaults to 0 (disabled); deployments may require a floor
"""

from streamledger.core.domain_types import MAX_TIMESTAMP, AccountId
from streamledger.core.errors import (
    InsufficientAvailableBalanceError,
    InvalidTimeParametersError,
    SelfStreamError,
    UnauthorizedError,
    ZeroOrMissingFundsError,
)
from streamledger.core.stream import Stream


def check_creation_parameters(
    payer: AccountId, recipient: AccountId, funded_amount: int | None,
) -> SelfStreamError | ZeroOrMissingFundsError | None:
    """Payer and recipient differ, and the stream carries value."""
    if payer == recipient:
        return SelfStreamError()
    if not funded_amount or funded_amount <= 0:
        return ZeroOrMissingFundsError()
    return None


def resolve_end_date(
    start_date: int,
    end_date: int | None,
    duration: int | None,
    minimum_duration: int = 0,
    max_end_date: int = MAX_TIMESTAMP,
) -> tuple[int | None, InvalidTimeParametersError | None]:
    """Compute the stream end from exactly one of end_date / duration."""
    if end_date is None and duration is None:
        return None, InvalidTimeParametersError(
            "Either end_date or duration must be provided.",
        )
    if end_date is not None and duration is not None:
        return None, InvalidTimeParametersError(
            "Provide end_date or duration, not both.",
        )

    resolved = end_date if end_date is not None else start_date + duration
    if resolved <= start_date:
        return None, InvalidTimeParametersError(
            f"end_date ({resolved}) must be later than the start date "
            f"({start_date}).",
        )
    if resolved > max_end_date:
        return None, InvalidTimeParametersError(
            f"end_date ({resolved}) is past the latest storable time "
            f"({max_end_date}).",
        )
    if resolved - start_date < minimum_duration:
        return None, InvalidTimeParametersError(
            f"Stream duration must be at least {minimum_duration} seconds.",
        )
    return resolved, None


def check_withdraw_permission(
    stream: Stream, caller: AccountId,
) -> UnauthorizedError | None:
    if caller != stream.recipient:
        return UnauthorizedError()
    return None


def resolve_withdrawal_amount(
    requested: int | None, available: int,
) -> tuple[int | None, InsufficientAvailableBalanceError | None]:
    """Unspecified means everything unlocked (possibly 0)."""
    if requested is None:
        return available, None
    if requested <= 0 or requested > available:
        return None, InsufficientAvailableBalanceError(requested, available)
    return requested, None
