"""SQL Entry Store — async SQLAlchemy implementation of the EntryStore protocol.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy and socket errors are mapped to PersistenceError (core/errors.py)
    - One engine per store; close() disposes it and is called once at shutdown
    - save() opens its own session, so concurrent requests never share one

Design Decisions:
    - connect() pings before the app starts serving: a dead database fails startup
      instead of failing the first request
    - SQLite URLs skip pool sizing arguments (SQLAlchemy rejects them for its
      SQLite pools); tests run against aiosqlite
    - No retries: a failed save is reported, retrying belongs to the caller
    - Fault mapping is an ordered table, most specific class first; the client-facing
      PersistenceError carries the generic summary, the driver text goes to the log
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import insert, text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from capture.core.entry import Entry
from capture.core.errors import PersistenceError
from capture.db.entry_table import build_entry_table

logger = logging.getLogger(__name__)

_FAULTS: tuple[tuple[type[Exception], str], ...] = (
    (IntegrityError, "Integrity constraint violated"),
    (OperationalError, "Connection or operational error"),
    (DBAPIError, "Database driver error"),
    (SQLAlchemyError, "Database operation failed"),
    (OSError, "Database unreachable"),
)


def _summarise(exc: Exception) -> str:
    return next(summary for kind, summary in _FAULTS if isinstance(exc, kind))


class SqlEntryStore:
    """Persists entries into a single configurable table."""

    def __init__(
        self,
        database_url: str,
        table_name: str = "entry",
        pool_size: int = 20,
        max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self.table = build_entry_table(table_name)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except (SQLAlchemyError, OSError) as e:
            summary = _summarise(e)
            logger.error(f"Entry store {operation} failed: {summary}: {e}")
            if session.in_transaction():
                await session.rollback()
            raise PersistenceError(summary, operation) from e
        finally:
            await session.close()

    async def connect(self) -> None:
        """Verify connectivity; raises PersistenceError if the database is down."""
        async with self.session("connect") as db:
            await db.execute(text("SELECT 1"))
        logger.info(f"Entry store connected (table={self.table.name})")

    async def create_schema(self) -> None:
        """Create the entry table if it does not exist."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(self.table.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"DB schema creation failed: {e}")
            raise PersistenceError("Schema creation failed", "create_schema") from e

    async def save(self, entry: Entry) -> None:
        async with self.session("insert") as db:
            await db.execute(
                insert(self.table).values(
                    entry_id=entry.public_id,
                    campaign_name=entry.campaign_name,
                    campaign_version=entry.campaign_version,
                    submit_action=entry.submit_action.value,
                    email_address=entry.entrant.email_address,
                    document=entry.to_document(),
                ),
            )
            await db.commit()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except PersistenceError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Entry store closed")

