"""Health Probes — liveness always up, readiness follows the entry store.

Invariants:
    - /api/v1/health/ returns 200 with service metadata
    - /api/v1/health/ready returns 503 when the store reports unhealthy
    - Stores without health_check are treated as ready
"""


async def test_liveness_returns_healthy(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert res.json()["service"] == "campaign-capture"


async def test_readiness_ok_when_store_healthy(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"store": "healthy"}}


async def test_readiness_503_when_store_unhealthy(client, recording_store):
    recording_store.healthy = False
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "store_unavailable"


async def test_readiness_ok_for_store_without_health_check(make_client, failing_store):
    async with make_client(failing_store) as client:
        res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
