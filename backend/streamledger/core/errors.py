"""Error Hierarchy — typed, categorized exceptions for every ledger failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are scoped to the rejected call; the ledger keeps serving
    - Infrastructure errors (500-level) never carry partial ledger mutations
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with StreamLedgerError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Validators in core/enforce_stream.py return these objects; the shell raises them
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stream_id: int | None = None
    caller: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class StreamLedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "stream_id": self.context.stream_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidTimeParametersError(StreamLedgerError):
    """end_date/duration missing, both given, or not after start_date."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_TIME_PARAMETERS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class ZeroOrMissingFundsError(StreamLedgerError):
    """Stream creation attached no value."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "A stream must be funded with an amount greater than zero.",
            "ZERO_OR_MISSING_FUNDS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class SelfStreamError(StreamLedgerError):
    """Payer tried to open a stream to itself."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "The recipient of a stream cannot be its payer.",
            "SELF_STREAM", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class StreamNotFoundError(StreamLedgerError):
    """Requested stream identifier was never allocated."""
    def __init__(self, stream_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.stream_id = stream_id
        super().__init__(
            f"Stream '{stream_id}' not found",
            "STREAM_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.stream_id = stream_id


class UnauthorizedError(StreamLedgerError):
    """Caller is not allowed to act on the stream."""
    def __init__(
        self,
        message: str = "Only the stream recipient can withdraw.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class InsufficientAvailableBalanceError(StreamLedgerError):
    """Requested withdrawal is zero or exceeds vested-minus-withdrawn."""
    def __init__(
        self, requested: int, available: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Requested withdrawal of {requested} is not within the "
            f"available balance ({available}).",
            "INSUFFICIENT_AVAILABLE_BALANCE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.requested = requested
        self.available = available


# ─── Infrastructure Errors (500-level) ──────────────────────────

class TransferFailedError(StreamLedgerError):
    """Custody refused or failed the outbound transfer; ledger unchanged."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Custody transfer failed: {message}",
            "TRANSFER_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )


class DatabaseError(StreamLedgerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
