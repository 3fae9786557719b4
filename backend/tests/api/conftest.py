"""API test fixtures: FastAPI app with a test CacheRuntime on app.state.

Invariants:
    - The runtime uses the per-test SQLite file and a MockTransport catalog
    - app.state.runtime is restored after every test

Design Decisions:
    - ASGITransport does not run the lifespan, so the fixture starts the runtime itself
      (schema + load only; startup sync disabled)
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from littlelemon.infrastructure.runtime import CacheRuntime
from littlelemon.infrastructure.menu_store import MenuStore
from littlelemon.main import app
from littlelemon.services.sync_orchestrator import SyncOrchestrator


class RemoteCatalog:
    """Switchable stand-in for the remote endpoint."""

    def __init__(self, handler):
        self.handler = handler
        self.offline = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.offline:
            raise httpx.ConnectError("offline", request=request)
        return self.handler(request)


@pytest.fixture
def remote(json_handler):
    return RemoteCatalog(json_handler())


@pytest.fixture
async def runtime(db_manager, make_source, remote):
    source = make_source(remote)
    store = MenuStore(db_manager)
    rt = CacheRuntime(
        db=db_manager,
        store=store,
        source=source,
        orchestrator=SyncOrchestrator(source, store, max_retries=0),
        sync_on_startup=False,
    )
    await rt.start()
    yield rt
    await rt.orchestrator.close()
    await rt.store.close()


@pytest.fixture
async def client(runtime):
    original = getattr(app.state, "runtime", None)
    app.state.runtime = runtime
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.runtime = original
