"""Campaign Capture Route — innermost handler plus assembly of the gate chain.

Invariants:
    - store.save is called only with an Entry that passed schema and semantic validation
    - A save failure propagates (PersistenceError) to the recovery gate; no retry here
    - Success response always carries the entry's public id

Design Decisions:
    - The store and credentials are passed in explicitly (no module-level singletons)
    - Registered for every common method: Starlette routes default to GET/HEAD, and
      the method gate, not the router, must answer non-POST with the JSON envelope
"""

import logging

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import Response

from capture.api.gates import (
    Handler, chain, with_basic_auth, with_post, with_recovery, with_valid_entry,
)
from capture.api.responses import success_response
from capture.core.auth import BasicCredentials
from capture.core.entry import Entry
from capture.core.repository_protocols import EntryStore

logger = logging.getLogger(__name__)

ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_capture_handler(store: EntryStore, credentials: BasicCredentials) -> Handler:
    """Assemble recovery -> POST -> auth -> validation -> save."""

    async def capture_entry(request: Request, entry: Entry) -> Response:
        await store.save(entry)
        logger.info(
            "Entry captured",
            extra={"entry_id": entry.public_id, "campaign": entry.campaign_name},
        )
        return success_response(entry.public_id)

    return chain(
        with_valid_entry(capture_entry),
        with_recovery,
        with_post,
        with_basic_auth(credentials),
    )


def register_capture_route(
    app: FastAPI, path: str, store: EntryStore, credentials: BasicCredentials,
) -> None:
    app.add_route(
        f"/{path}",
        build_capture_handler(store, credentials),
        methods=ROUTED_METHODS,
        name="capture_entry",
        include_in_schema=False,
    )
