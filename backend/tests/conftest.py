"""Root conftest: shared test configuration and fixtures.

Invariants:
    - Every test that touches the DB gets a fresh SQLite file under tmp_path
    - The remote catalog is never contacted: sources use httpx.MockTransport
    - Startup sync is disabled by default so tests control when syncs happen

Design Decisions:
    - SQLite file over :memory:: the async engine may open several connections,
      and each :memory: connection would see its own empty database
"""

import os

# Ensure tests never hit the real catalog or leave a DB in the working dir
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_little_lemon.db")
os.environ.setdefault("MENU_URL", "https://menu.test/menu.json")
os.environ.setdefault("SYNC_ON_STARTUP", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402

from littlelemon.infrastructure.database import DatabaseSessionManager  # noqa: E402
from littlelemon.infrastructure.menu_source import RemoteMenuSource  # noqa: E402
from littlelemon.infrastructure.menu_store import MenuStore  # noqa: E402

from tests.fakes import catalog_payload  # noqa: E402


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'menu.db'}",
    )
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
async def store(db_manager):
    menu_store = MenuStore(db_manager)
    yield menu_store
    await menu_store.close()


@pytest.fixture
async def make_source():
    """Build a RemoteMenuSource whose HTTP layer is a MockTransport handler."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler, timeout_seconds: float = 1.0) -> RemoteMenuSource:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return RemoteMenuSource(
            "https://menu.test/menu.json",
            timeout_seconds=timeout_seconds,
            client=client,
        )

    yield _make
    for client in clients:
        await client.aclose()


@pytest.fixture
def json_handler():
    """Handler factory: always answer 200 with the given JSON body."""
    def _handler_for(body=None, status_code: int = 200):
        payload = catalog_payload() if body is None else body

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=payload)
        return handler
    return _handler_for
