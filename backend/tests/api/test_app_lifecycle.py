"""Application Lifecycle — an app that owns its SQL store connects, serves and closes it.

Invariants:
    - Without an injected store, create_app builds a SqlEntryStore from settings
    - Lifespan startup creates the table, so the first POST can be saved
    - Lifespan shutdown disposes the store
"""

from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine, text

from capture.config import Settings
from capture.main import create_app


async def test_owned_store_serves_and_persists(tmp_path, valid_body):
    db_file = tmp_path / "app.db"
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{db_file}",
        database_table="entries",
        capture_path="survey",
    )
    app = create_app(settings)

    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as client:
            res = await client.post("/survey", json=valid_body, auth=("user", "pass"))

    assert res.status_code == 200
    entry_id = res.json()["entryId"]

    engine = create_engine(f"sqlite:///{db_file}")
    with engine.connect() as conn:
        rows = conn.execute(text("SELECT entry_id FROM entries")).all()
    engine.dispose()
    assert [r[0] for r in rows] == [entry_id]
