"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable (readiness)
    - Readiness does not depend on the remote catalog: an offline cache is ready
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from littlelemon import __version__
from littlelemon.api.dependencies import get_runtime
from littlelemon.infrastructure.runtime import CacheRuntime

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "little-lemon-menu-cache",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(runtime: CacheRuntime = Depends(get_runtime)):
    """Readiness probe: database connectivity plus cache summary."""
    db_ok = await runtime.db.health_check()
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "cache": {
            "item_count": len(runtime.store.snapshot),
            "sync_state": runtime.orchestrator.state.value,
        },
    }
