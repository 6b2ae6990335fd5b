"""Request Gates — the ordered middleware chain in front of the capture handler.

Invariants:
    - Chain order is fixed: recovery -> method -> auth -> validation -> handler
    - A gate either calls the next handler or returns a response; never both
    - with_recovery is the only gate that turns an arbitrary exception into a response
    - Each other gate responds only to its own error class
    - The body is read once (Starlette caches it) and shared by schema check and decode
    - The decoded Entry reaches the handler as a typed parameter, not via request.state

Design Decisions:
    - Gates are plain higher-order functions over async (Request) -> Response callables
      rather than app-wide Starlette middleware: the chain belongs to one route only
    - Recovery maps categories to status through STATUS_BY_CATEGORY, so a new error
      class needs no change here
"""

import logging
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

from capture.core.auth import BasicCredentials, parse_basic_authorization
from capture.core.entry import Entry, new_entry
from capture.core.entry_schema import schema_violations
from capture.core.errors import (
    STATUS_BY_CATEGORY,
    AuthError,
    CaptureError,
    EmptyBodyError,
    EntryDecodeError,
    EntryValidationError,
    ErrorCategory,
    MalformedBodyError,
    MethodNotAllowedError,
    SchemaViolationError,
    INTERNAL_SERVER_ERROR,
)
from capture.api.responses import error_response, error_response_from

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Response]]
EntryHandler = Callable[[Request, Entry], Awaitable[Response]]
Gate = Callable[[Handler], Handler]


def chain(handler: Handler, *gates: Gate) -> Handler:
    """Wrap handler in gates; the first gate listed is the outermost."""
    for gate in reversed(gates):
        handler = gate(handler)
    return handler


def _log_extra(request: Request, **fields) -> dict:
    return {"path": request.url.path, "method": request.method, **fields}


# ─── Recovery ────────────────────────────────────────────────────

def classify_fault(exc: Exception) -> tuple[ErrorCategory, str]:
    """Classify an escaped exception as (category, description for logs)."""
    if isinstance(exc, CaptureError):
        return exc.category, exc.message
    if exc.args and isinstance(exc.args[0], str):
        return ErrorCategory.INTERNAL, exc.args[0]
    if str(exc):
        return ErrorCategory.INTERNAL, str(exc)
    return ErrorCategory.INTERNAL, f"Unknown error ({type(exc).__name__})"


def with_recovery(next_handler: Handler) -> Handler:
    async def handler(request: Request) -> Response:
        try:
            return await next_handler(request)
        except Exception as exc:
            category, detail = classify_fault(exc)
            if isinstance(exc, CaptureError):
                status_code, code = exc.http_status, exc.code
            else:
                status_code, code = STATUS_BY_CATEGORY[category], "INTERNAL_ERROR"
            logger.error(
                f"Recovered from {category.value} fault: {detail}",
                exc_info=exc,
                extra=_log_extra(request, error_code=code, status_code=status_code),
            )
            if status_code >= 500:
                return error_response([INTERNAL_SERVER_ERROR], status_code)
            return error_response_from(exc)
    return handler


# ─── Method ──────────────────────────────────────────────────────

def with_post(next_handler: Handler) -> Handler:
    async def handler(request: Request) -> Response:
        if request.method != "POST":
            exc = MethodNotAllowedError(request.method)
            logger.info(
                f"Rejected {request.method}",
                extra=_log_extra(request, error_code=exc.code),
            )
            return error_response_from(exc)
        return await next_handler(request)
    return handler


# ─── Auth ────────────────────────────────────────────────────────

def with_basic_auth(credentials: BasicCredentials) -> Gate:
    def gate(next_handler: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            try:
                user, password = parse_basic_authorization(
                    request.headers.get("authorization"),
                )
                credentials.check(user, password)
            except AuthError as exc:
                logger.warning(
                    f"Unauthorized: {exc.reason}",
                    extra=_log_extra(request, error_code=exc.code),
                )
                return error_response_from(exc)
            return await next_handler(request)
        return handler
    return gate


# ─── Validation ──────────────────────────────────────────────────

async def _read_entry(request: Request) -> Entry:
    if request.headers.get("content-length") == "0":
        raise EmptyBodyError()
    body = await request.body()
    if not body:
        raise EmptyBodyError()
    violations = schema_violations(body)
    if violations:
        raise SchemaViolationError(violations)
    entry = new_entry(body)
    valid, messages = entry.valid()
    if not valid:
        raise EntryValidationError(messages)
    return entry


def with_valid_entry(entry_handler: EntryHandler) -> Handler:
    async def handler(request: Request) -> Response:
        try:
            entry = await _read_entry(request)
        except (
            EmptyBodyError, MalformedBodyError, SchemaViolationError,
            EntryDecodeError, EntryValidationError,
        ) as exc:
            logger.info(
                f"Rejected body: {exc.message}",
                extra=_log_extra(request, error_code=exc.code),
            )
            return error_response_from(exc)
        return await entry_handler(request, entry)
    return handler
