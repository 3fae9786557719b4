"""Menu Routes: read-only query interface over the cached snapshot.

Invariants:
    - Routes never write to the store and never wait for a sync
    - GET /menu filters the last published snapshot with apply_filters
    - GET /menu/stream emits one SSE "snapshot" event on connect and one per commit;
      the query engine re-runs on every snapshot
    - Responses are served from cache even when the last sync failed

Design Decisions:
    - SSE over websockets: one-way snapshot push, works through plain HTTP proxies
    - snapshot_events() is a plain async generator so it can be exercised without
      an HTTP client; it owns its subscription from attach to unsubscribe
"""

import asyncio
import json
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from littlelemon.api.dependencies import get_runtime
from littlelemon.core.menu_items import Snapshot
from littlelemon.core.menu_query import (
    apply_filters, category_label, distinct_categories,
)
from littlelemon.infrastructure.menu_store import MenuStore
from littlelemon.infrastructure.runtime import CacheRuntime
from littlelemon.schemas.menu import (
    CategoryResponse, MenuItemResponse, MenuListResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/menu", tags=["menu"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def build_menu_list(
    snapshot: Snapshot, search: str = "", category: str = "",
) -> MenuListResponse:
    items = apply_filters(snapshot, search, category)
    return MenuListResponse(
        items=[MenuItemResponse.from_item(it) for it in items],
        total=len(items),
        search=search,
        category=category,
    )


def _sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


async def snapshot_events(
    store: MenuStore, category: str = "", search: str = "",
) -> AsyncGenerator[str, None]:
    """SSE lines for every snapshot the store commits, until the stream ends.

    The subscription is attached on first iteration, so a response that is never
    started leaves nothing behind.
    """
    if category.strip():
        subscription = store.get_by_category(category)
    else:
        subscription = store.get_all()
    try:
        async for snapshot in subscription:
            view = build_menu_list(snapshot, search, category)
            yield _sse_line({"type": "snapshot", "data": view.model_dump(mode="json")})
    except asyncio.CancelledError:
        logger.info("Client disconnected from menu stream")
        return
    finally:
        subscription.unsubscribe()


@router.get("", response_model=MenuListResponse)
async def list_menu(
    search: str = Query("", max_length=200),
    category: str = Query("", max_length=100),
    runtime: CacheRuntime = Depends(get_runtime),
):
    """Current menu, filtered by search phrase and category (blank = no filter)."""
    return build_menu_list(runtime.store.snapshot, search, category)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(runtime: CacheRuntime = Depends(get_runtime)):
    """Distinct categories present in the cached menu, sorted."""
    return [
        CategoryResponse(value=c, label=category_label(c))
        for c in distinct_categories(runtime.store.snapshot)
    ]


@router.get("/stream")
async def stream_menu(
    search: str = Query("", max_length=200),
    category: str = Query("", max_length=100),
    runtime: CacheRuntime = Depends(get_runtime),
):
    """SSE stream of filtered snapshots."""
    return StreamingResponse(
        snapshot_events(runtime.store, category, search),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
