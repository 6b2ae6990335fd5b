"""Error Hierarchy — typed, categorized exceptions for every capture failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - HTTP status is derived from the category via STATUS_BY_CATEGORY (single lookup table)
    - 500-level errors never expose their message to the client (public_messages is generic)
    - messages holds the full client-facing list (schema/validation errors accumulate)

Design Decisions:
    - Single hierarchy with CaptureError base: recovery gate and FastAPI handlers catch all
    - Persistence failures are raised as PersistenceError and travel up by ordinary
      exception propagation to the recovery gate (no sentinel return values)
"""

from enum import Enum


INTERNAL_SERVER_ERROR = "Internal Server Error"
BAD_REQUEST = "Bad request"
UNAUTHORIZED = "Unauthorized"
METHOD_NOT_ALLOWED = "Method not allowed"


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories; each gate owns exactly one."""
    TRANSPORT = "transport"
    AUTH = "auth"
    SCHEMA = "schema"
    VALIDATION = "validation"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"


STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.TRANSPORT: 400,
    ErrorCategory.AUTH: 401,
    ErrorCategory.SCHEMA: 400,
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.PERSISTENCE: 500,
    ErrorCategory.INTERNAL: 500,
}


class CaptureError(Exception):
    """Base exception for all capture pipeline errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        messages: list[str] | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.messages = messages if messages is not None else [message]
        self.http_status = http_status or STATUS_BY_CATEGORY[category]

    @property
    def public_messages(self) -> list[str]:
        """Messages safe to return to the client."""
        if self.http_status >= 500:
            return [INTERNAL_SERVER_ERROR]
        return list(self.messages)

    def to_response(self) -> dict:
        """Convert to the standard error envelope."""
        return {"status": self.http_status, "messages": self.public_messages}


# ─── Request Errors (400-level) ─────────────────────────────────

class MethodNotAllowedError(CaptureError):
    """Request used a method other than POST."""
    def __init__(self, method: str):
        super().__init__(
            METHOD_NOT_ALLOWED, "METHOD_NOT_ALLOWED", ErrorCategory.TRANSPORT,
            ErrorSeverity.WARNING, http_status=405,
        )
        self.method = method


class EmptyBodyError(CaptureError):
    """Request carried no body."""
    def __init__(self):
        super().__init__(
            BAD_REQUEST, "EMPTY_BODY", ErrorCategory.TRANSPORT,
            ErrorSeverity.WARNING,
        )


class MalformedBodyError(CaptureError):
    """Request body is not a JSON document."""
    def __init__(self, detail: str):
        super().__init__(
            f"Malformed JSON body: {detail}", "MALFORMED_BODY",
            ErrorCategory.TRANSPORT, ErrorSeverity.WARNING,
        )


class AuthError(CaptureError):
    """Missing, malformed or mismatched Basic credentials.

    The reason is kept for logs only; the client always sees "Unauthorized".
    """
    def __init__(self, reason: str):
        super().__init__(
            UNAUTHORIZED, "UNAUTHORIZED", ErrorCategory.AUTH,
            ErrorSeverity.WARNING,
        )
        self.reason = reason


class SchemaViolationError(CaptureError):
    """Body does not match the entry JSON Schema."""
    def __init__(self, violations: list[str]):
        super().__init__(
            f"{len(violations)} schema violation(s)", "SCHEMA_VIOLATION",
            ErrorCategory.SCHEMA, ErrorSeverity.WARNING, messages=violations,
        )


class EntryDecodeError(CaptureError):
    """Body could not be decoded into an Entry (type mismatch, bad enum)."""
    def __init__(self, messages: list[str]):
        super().__init__(
            "; ".join(messages), "ENTRY_DECODE_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, messages=messages,
        )


class EntryValidationError(CaptureError):
    """Entry failed semantic validation."""
    def __init__(self, messages: list[str]):
        super().__init__(
            f"{len(messages)} validation error(s)", "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, messages=messages,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(CaptureError):
    """Entry store unreachable or write failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Store {operation} failed: {message}", "PERSISTENCE_ERROR",
            ErrorCategory.PERSISTENCE, ErrorSeverity.CRITICAL,
        )
        self.operation = operation
