"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the entry store is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Stores without a health check are reported ready (nothing to probe)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from capture.core.repository_protocols import EntryStore, SupportsHealthCheck

logger = logging.getLogger(__name__)


def build_health_router(store: EntryStore, version: str) -> APIRouter:
    router = APIRouter(prefix="/api/v1/health", tags=["health"])

    @router.get("/", status_code=status.HTTP_200_OK)
    async def health_check():
        """Basic liveness probe. Returns 200 if the process is up."""
        return {
            "status": "healthy",
            "service": "campaign-capture",
            "version": version,
        }

    @router.get("/ready")
    async def readiness_check():
        """Readiness probe — includes entry store connectivity."""
        store_ok = True
        if isinstance(store, SupportsHealthCheck):
            store_ok = await store.health_check()
        if not store_ok:
            logger.warning("Readiness check failed: entry store unavailable")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "not_ready",
                    "reason": "store_unavailable",
                },
            )
        return {"status": "ready", "checks": {"store": "healthy"}}

    return router
