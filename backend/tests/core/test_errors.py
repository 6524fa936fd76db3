"""Error Hierarchy — tests for codes, statuses and the REST envelope."""

from streamledger.core.errors import (
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    InsufficientAvailableBalanceError,
    InvalidTimeParametersError,
    SelfStreamError,
    StreamLedgerError,
    StreamNotFoundError,
    TransferFailedError,
    UnauthorizedError,
    ZeroOrMissingFundsError,
)


def test_every_ledger_error_has_distinct_code():
    errors = [
        InvalidTimeParametersError("x"),
        ZeroOrMissingFundsError(),
        SelfStreamError(),
        StreamNotFoundError(1),
        UnauthorizedError(),
        InsufficientAvailableBalanceError(2, 1),
        TransferFailedError("x"),
        DatabaseError("x", "commit"),
    ]
    assert all(isinstance(e, StreamLedgerError) for e in errors)
    assert len({e.code for e in errors}) == len(errors)


def test_http_statuses():
    assert StreamNotFoundError(1).http_status == 404
    assert UnauthorizedError().http_status == 403
    assert InsufficientAvailableBalanceError(2, 1).http_status == 400
    assert TransferFailedError("down").http_status == 502
    assert DatabaseError("x", "commit").http_status == 503


def test_not_found_carries_stream_id():
    error = StreamNotFoundError(42)
    assert error.stream_id == 42
    assert error.context.stream_id == 42
    assert error.category == ErrorCategory.RESOURCE_NOT_FOUND


def test_to_response_envelope():
    error = SelfStreamError()
    body = error.to_response()["error"]
    assert body["code"] == "SELF_STREAM"
    assert body["category"] == "business_rule"
    assert body["severity"] == "error"
    assert "timestamp" in body


def test_user_message_overrides_message():
    ctx = ErrorContext(user_message="Try again later.")
    error = TransferFailedError("socket reset", context=ctx)
    assert error.to_response()["error"]["message"] == "Try again later."
