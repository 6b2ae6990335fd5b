"""Response Encoder — builds uniform JSON responses from envelopes.

Invariants:
    - Every response is application/json
    - HTTP status code mirrors the envelope's status field
"""

from fastapi import status
from fastapi.responses import JSONResponse

from capture.core.errors import CaptureError
from capture.schemas.envelope import ErrorEnvelope, SuccessEnvelope


def error_response(messages: list[str], status_code: int) -> JSONResponse:
    envelope = ErrorEnvelope(status=status_code, messages=messages)
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


def error_response_from(exc: CaptureError) -> JSONResponse:
    """Render a typed error; 500-level errors get the generic message."""
    return error_response(exc.public_messages, exc.http_status)


def success_response(entry_id: str) -> JSONResponse:
    envelope = SuccessEnvelope(status=status.HTTP_200_OK, entry_id=entry_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK, content=envelope.model_dump(by_alias=True),
    )
