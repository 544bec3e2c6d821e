"""Error Hierarchy — typed, categorized exceptions for caller contract violations.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation failures and access-control rejections are NEVER raised —
      they end up in a document's error bag or are skipped silently
    - to_response() produces the REST envelope used by api/error_handlers.py
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with MarshalError base: one handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection: str | None = None
    document_id: str | None = None
    row_index: int | None = None
    debug_info: dict[str, Any] | None = None


class MarshalError(Exception):
    """Base exception for all docmarshal errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "collection": self.context.collection,
                    "document_id": self.context.document_id,
                    "row_index": self.context.row_index,
                },
            }
        }


# ─── Contract Violations (400-level) ────────────────────────────

class InvalidArgumentError(MarshalError):
    """A call received an argument of the wrong shape."""
    def __init__(self, message: str, argument: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.argument = argument


class InvalidRowError(MarshalError):
    """An input row is not a mapping (or the row list is not a list)."""
    def __init__(
        self, got: object, index: int | None = None, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.row_index = index
        where = f" at index {index}" if index is not None else ""
        super().__init__(
            f"Input row{where} must be a mapping, got {type(got).__name__}",
            "INVALID_ROW", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.index = index


class InvalidOptionsError(MarshalError):
    """Marshalling options are malformed."""
    def __init__(
        self, message: str, details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_OPTIONS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details or []


class DocumentNotFoundError(MarshalError):
    """Requested document does not exist in the store."""
    def __init__(
        self, collection: str, document_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.collection = collection
        ctx.document_id = document_id
        super().__init__(
            f"Document '{document_id}' not found in '{collection}'",
            "DOCUMENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Configuration Errors (500-level) ───────────────────────────

class UnknownRulesetError(MarshalError):
    """A named validation ruleset was never registered."""
    def __init__(self, name: str, collection: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.collection = collection
        super().__init__(
            f"No validation ruleset named '{name}' on '{collection}'",
            "UNKNOWN_RULESET", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.name = name


class StoreNotConfiguredError(MarshalError):
    """A lookup was attempted on a collection without a document store."""
    def __init__(self, collection: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.collection = collection
        super().__init__(
            f"Collection '{collection}' has no document store",
            "STORE_NOT_CONFIGURED", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
