"""Sync Orchestrator: single-flight fetch -> normalize -> replace-all pipeline.

Invariants:
    - At most one sync in flight; a request during a run joins it and gets its outcome
    - Every run starts from IDLE and ends in DONE or FAILED
    - FAILED is entered only from FETCHING, NORMALIZING or PERSISTING
    - A failed run never touches the store (stale-but-available)
    - NetworkFailure, DecodeFailure and PersistenceFailure are caught here, logged,
      and resolved to FAILED; sync() never raises them
    - Only NetworkFailure is retried (exponential backoff, +/-25% jitter)

Design Decisions:
    - asyncio.Task as the single-flight handle: joiners await it through
      asyncio.shield so one caller's cancellation does not cancel the shared run
    - Retry lives here, not in RemoteMenuSource, so the source stays a plain
      one-shot boundary and tests control retry counts through settings
"""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from littlelemon.core.domain_types import ACTIVE_STATES, SyncId, SyncState
from littlelemon.core.errors import (
    DecodeFailure, ErrorCategory, ErrorSeverity,
    MenuCacheError, NetworkFailure,
)
from littlelemon.core.menu_items import FetchResult, normalize_items
from littlelemon.core.repository_protocols import MenuSource, MenuWriter

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SyncOutcome:
    """Result of one sync run (also the pollable status while running)."""
    state: SyncState
    sync_id: SyncId | None = None
    item_count: int | None = None
    failure: MenuCacheError | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.state == SyncState.DONE

    @property
    def running(self) -> bool:
        return self.state in ACTIVE_STATES


class SyncOrchestrator:
    """Coordinates RemoteMenuSource -> image resolution -> MenuStore."""

    def __init__(
        self,
        source: MenuSource,
        store: MenuWriter,
        max_retries: int = 2,
        base_delay_ms: int = 500,
        max_delay_ms: int = 10_000,
    ):
        self._source = source
        self._store = store
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._status = SyncOutcome(state=SyncState.IDLE)
        self._last_success_at: datetime | None = None
        self._inflight: asyncio.Task | None = None

    @property
    def state(self) -> SyncState:
        return self._status.state

    @property
    def last_success_at(self) -> datetime | None:
        return self._last_success_at

    def status(self) -> SyncOutcome:
        """Current state while running, last outcome otherwise."""
        return self._status

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def trigger(self) -> asyncio.Task:
        """Start a sync in the background (or return the running one)."""
        if self.in_flight:
            return self._inflight
        self._inflight = asyncio.create_task(self._run(), name="menu-sync")
        return self._inflight

    async def sync(self) -> SyncOutcome:
        """Run a sync, or join the one already in flight."""
        task = self.trigger()
        return await asyncio.shield(task)

    async def wait(self) -> SyncOutcome | None:
        """Wait for the in-flight sync, if any."""
        if self._inflight is None:
            return None
        return await asyncio.shield(self._inflight)

    async def close(self) -> None:
        """Cancel an in-flight run (shutdown). The store transaction rolls back."""
        if self.in_flight:
            self._inflight.cancel()
            try:
                await self._inflight
            except asyncio.CancelledError:
                logger.info("Menu sync cancelled on shutdown")

    # -- Pipeline --------------------------------------------------------------

    async def _run(self) -> SyncOutcome:
        sync_id = SyncId(uuid.uuid4().hex[:8])
        self._status = SyncOutcome(state=SyncState.IDLE, sync_id=sync_id)
        self._enter(SyncState.FETCHING, started_at=_now())
        try:
            return await self._pipeline(sync_id)
        except asyncio.CancelledError:
            # Nothing was published; the store transaction (if any) rolled back
            self._status = replace(self._status, state=SyncState.IDLE)
            raise
        except Exception as e:
            logger.error(
                f"Unexpected menu sync error: {e}", exc_info=True,
                extra={"sync_id": sync_id},
            )
            return self._fail(MenuCacheError(
                "Unexpected sync error", "INTERNAL_ERROR",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ))

    async def _pipeline(self, sync_id: SyncId) -> SyncOutcome:
        fetched = await self._fetch_with_retry(sync_id)
        if not fetched.ok:
            return self._fail(fetched.failure)

        self._enter(SyncState.NORMALIZING)
        try:
            items = normalize_items(fetched.items)
        except (TypeError, ValueError, AttributeError) as e:
            return self._fail(DecodeFailure(f"normalization failed: {e}"))

        self._enter(SyncState.PERSISTING, item_count=len(items))
        try:
            await self._store.replace_all(items)
        except MenuCacheError as e:
            return self._fail(e)

        self._last_success_at = _now()
        self._enter(SyncState.DONE, finished_at=self._last_success_at)
        logger.info(
            "Menu sync done",
            extra={
                "sync_id": sync_id, "state": SyncState.DONE.value,
                "item_count": len(items),
            },
        )
        return self._status

    async def _fetch_with_retry(self, sync_id: SyncId) -> FetchResult:
        for attempt in range(self.max_retries):
            result = await self._source.fetch()
            if result.ok or not isinstance(result.failure, NetworkFailure):
                return result
            delay = self._backoff(attempt)
            logger.warning(
                f"Menu fetch failed, retry after {delay}ms",
                extra={
                    "sync_id": sync_id, "attempt": attempt + 1,
                    "error_code": result.failure.code,
                },
            )
            await asyncio.sleep(delay / 1000)
        return await self._source.fetch()

    def _enter(self, state: SyncState, **fields) -> None:
        self._status = replace(self._status, state=state, **fields)
        logger.debug(
            f"Menu sync -> {state.value}",
            extra={"sync_id": self._status.sync_id, "state": state.value},
        )

    def _fail(self, failure: MenuCacheError) -> SyncOutcome:
        from_state = self._status.state
        if from_state not in ACTIVE_STATES:
            raise RuntimeError(f"cannot fail from {from_state.value}")
        failure.context.sync_id = self._status.sync_id
        self._status = replace(
            self._status, state=SyncState.FAILED,
            failure=failure, finished_at=_now(),
        )
        logger.error(
            f"Menu sync failed during {from_state.value}: {failure.message}",
            extra={
                "sync_id": self._status.sync_id,
                "state": SyncState.FAILED.value,
                "error_code": failure.code,
            },
        )
        return self._status

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with +/-25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
