"""Health & Readiness Probes: liveness and per-backend readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if any backend is unreachable or closed

Design Decisions:
    - Separate from POST /probe: /probe is the host's plugin-loaded check and
      must not touch the databases
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.infrastructure.database import PoolRegistry
from app.services.query_executor import health_check

logger = logging.getLogger(__name__)

SERVICE_NAME = "db-bridge"


def build_router(registry: PoolRegistry) -> APIRouter:
    router = APIRouter(prefix="/health", tags=["health"])

    @router.get("/", status_code=status.HTTP_200_OK)
    async def liveness():
        """Basic liveness probe. Returns 200 if the process is up."""
        return {"status": "healthy", "service": SERVICE_NAME}

    @router.get("/ready")
    async def readiness():
        """Readiness probe: borrows one connection from every backend."""
        checks = {}
        for pool in registry:
            ok = not pool.closed and await health_check(pool)
            checks[pool.name] = {
                "status": "healthy" if ok else "unavailable",
                "pool": pool.stats(),
            }
        failing = [n for n, c in checks.items() if c["status"] != "healthy"]
        if failing:
            logger.warning(f"Readiness failed for backends: {failing}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks}

    return router
