"""Error Handlers — global exception handlers for routes outside the capture chain.

Invariants:
    - CaptureError -> its own envelope and status
    - HTTPException (404 for unknown paths, etc.) -> error envelope
    - Exception (catch-all) -> 500 envelope, never leaks internal details

Design Decisions:
    - The capture route has its own recovery gate; these handlers cover health probes
      and router-level failures so every response shares the envelope shape
"""

import logging

from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException

from capture.api.responses import error_response, error_response_from
from capture.core.errors import CaptureError, INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_capture_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_capture_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CaptureError)
    async def capture_error_handler(request: Request, exc: CaptureError):
        logger.error(
            f"CaptureError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return error_response_from(exc)


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response([str(exc.detail)], exc.status_code)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return error_response(
            [INTERNAL_SERVER_ERROR], status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
