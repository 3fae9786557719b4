"""Cache Runtime: process-scoped wiring of database, store, source and orchestrator.

Invariants:
    - Built once per process (FastAPI lifespan) and passed by reference; no global lookup
    - start(): schema (optional) -> load persisted snapshot -> initial sync trigger (optional)
    - close(): cancel in-flight sync -> end subscriptions -> close HTTP client -> dispose engine
    - The orchestrator is the only holder of the store's write side

Design Decisions:
    - from_settings() builds production collaborators; tests construct the runtime
      directly with a MockTransport-backed source and a temp SQLite file
    - The initial sync runs in the background: the cached snapshot is served at once,
      fresh data replaces it when the fetch lands
"""

import logging
from dataclasses import dataclass

from littlelemon.config import Settings
from littlelemon.core.errors import PersistenceFailure
from littlelemon.infrastructure.database import DatabaseSessionManager
from littlelemon.infrastructure.menu_source import RemoteMenuSource
from littlelemon.infrastructure.menu_store import MenuStore
from littlelemon.services.sync_orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class CacheRuntime:
    db: DatabaseSessionManager
    store: MenuStore
    source: RemoteMenuSource
    orchestrator: SyncOrchestrator
    auto_create_schema: bool = True
    sync_on_startup: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheRuntime":
        db = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        store = MenuStore(db)
        source = RemoteMenuSource(
            settings.menu_url,
            timeout_seconds=settings.menu_fetch_timeout_seconds,
        )
        orchestrator = SyncOrchestrator(
            source,
            store,
            max_retries=settings.sync_max_retries,
            base_delay_ms=settings.sync_base_delay_ms,
            max_delay_ms=settings.sync_max_delay_ms,
        )
        return cls(
            db=db,
            store=store,
            source=source,
            orchestrator=orchestrator,
            auto_create_schema=settings.auto_create_schema,
            sync_on_startup=settings.sync_on_startup,
        )

    async def start(self) -> None:
        if self.auto_create_schema:
            await self.db.create_schema()
        try:
            await self.store.load()
        except PersistenceFailure as e:
            # Unreadable cache: start empty, the first sync repopulates it
            logger.error(
                f"Could not load cached menu: {e.message}",
                extra={"error_code": e.code},
            )
        if self.sync_on_startup:
            self.orchestrator.trigger()

    async def close(self) -> None:
        await self.orchestrator.close()
        await self.store.close()
        await self.source.aclose()
        await self.db.dispose()
