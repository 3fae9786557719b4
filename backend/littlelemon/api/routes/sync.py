"""Sync Routes: pollable sync status and on-demand re-sync.

Invariants:
    - POST /sync is single-flight: a request during a run joins it
    - A failed sync is reported in the body with 200, never as an HTTP error;
      the cache keeps serving its last good snapshot
"""

import logging

from fastapi import APIRouter, Depends

from littlelemon.api.dependencies import get_runtime
from littlelemon.infrastructure.runtime import CacheRuntime
from littlelemon.schemas.menu import SyncStatusResponse
from littlelemon.services.sync_orchestrator import SyncOrchestrator, SyncOutcome

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sync", tags=["sync"])


def to_status_response(
    outcome: SyncOutcome, orchestrator: SyncOrchestrator,
) -> SyncStatusResponse:
    return SyncStatusResponse(
        state=outcome.state,
        sync_id=outcome.sync_id,
        item_count=outcome.item_count,
        error_code=outcome.failure.code if outcome.failure else None,
        error_message=outcome.failure.message if outcome.failure else None,
        started_at=outcome.started_at,
        finished_at=outcome.finished_at,
        last_success_at=orchestrator.last_success_at,
    )


@router.get("", response_model=SyncStatusResponse)
async def get_sync_status(runtime: CacheRuntime = Depends(get_runtime)):
    orchestrator = runtime.orchestrator
    return to_status_response(orchestrator.status(), orchestrator)


@router.post("", response_model=SyncStatusResponse)
async def run_sync(runtime: CacheRuntime = Depends(get_runtime)):
    """Re-fetch the remote menu now (or join the running sync) and report the outcome."""
    orchestrator = runtime.orchestrator
    outcome = await orchestrator.sync()
    logger.info(
        "On-demand sync finished",
        extra={"sync_id": outcome.sync_id, "state": outcome.state.value},
    )
    return to_status_response(outcome, orchestrator)
