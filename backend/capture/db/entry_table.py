"""Entry Table — SQLAlchemy Core definition of the captured-entry table.

Invariants:
    - entry_id (public id) is the primary key; a second save of the same id fails
    - document stores the full camelCase entry as JSON
    - Frequently filtered fields are denormalized into columns

Design Decisions:
    - Core Table over a declarative class: the table name comes from settings
      (CRS_DATABASE_TABLE), which a declarative __tablename__ cannot follow
    - JSON (not JSONB) column: portable between PostgreSQL and SQLite test runs
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, MetaData, String, Table


def build_entry_table(name: str, metadata: MetaData | None = None) -> Table:
    """Build the entry table bound to its own (or the given) MetaData."""
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("entry_id", String(32), primary_key=True),
        Column("campaign_name", String(255), nullable=False, index=True),
        Column("campaign_version", String(64), nullable=False),
        Column("submit_action", String(16), nullable=False, default=""),
        Column("email_address", String(320), nullable=False),
        Column("document", JSON, nullable=False),
        Column(
            "created_at",
            DateTime(timezone=True),
            nullable=False,
            default=lambda: datetime.now(timezone.utc),
        ),
    )
