"""Campaign Capture API — FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Settings and store are passed in; nothing is read from globals at request time
    - A store created here is connected on startup and closed once on shutdown;
      an injected store is owned (and closed) by whoever injected it
    - Global error handlers give non-capture routes the same JSON envelope

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SqlEntryStore is constructed eagerly (engine creation does no IO) so the capture
      route can hold a direct reference; connectivity is checked in the lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from capture import __version__
from capture.api.error_handlers import register_error_handlers
from capture.api.routes.campaign import register_capture_route
from capture.api.routes.health import build_health_router
from capture.config import Settings, get_settings
from capture.core.repository_protocols import EntryStore
from capture.infrastructure.entry_store import SqlEntryStore
from capture.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings, store: EntryStore | None = None) -> FastAPI:
    """Build the application around an explicit settings value and entry store."""
    owned_store: SqlEntryStore | None = None
    if store is None:
        owned_store = SqlEntryStore(
            settings.database_url,
            settings.database_table,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        store = owned_store

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        if owned_store is not None:
            await owned_store.connect()
            await owned_store.create_schema()
        logger.info(f"Campaign capture API listening on /{settings.capture_path}")
        yield
        logger.info("Campaign capture API shutting down")
        if owned_store is not None:
            await owned_store.close()

    app = FastAPI(
        title="Campaign Capture API", version=__version__, lifespan=lifespan,
    )

    register_capture_route(
        app, settings.capture_path, store, settings.credentials,
    )
    app.include_router(build_health_router(store, __version__))
    register_error_handlers(app)
    return app


def app_factory() -> FastAPI:
    """Entry for `uvicorn --factory capture.main:app_factory`."""
    return create_app(get_settings())
