"""Menu Store: durable menu table with atomic replace-all writes and snapshot subscriptions.

Invariants:
    - replace_all/clear run as ONE transaction: delete, insert, commit; any failure
      rolls back and raises PersistenceFailure with the visible snapshot unchanged
    - A snapshot is published only after its transaction committed
    - Writes are serialized by _write_lock, so publication order == commit order
    - Readers never lock: they read the last published immutable tuple
    - Subscriptions receive the current snapshot immediately, then one per commit;
      they never error, an empty store yields ()

Design Decisions:
    - Core insert with executemany over ORM add_all: no identity-map state to reset
      between syncs, duplicate ids surface as IntegrityError inside the transaction
    - Category streams are projected from the published snapshot with the same
      matcher the query engine uses, so both views agree on case-insensitivity
    - Unbounded per-subscriber queue: catalog snapshots are small and every commit
      must be observable in order
"""

import asyncio
import logging
from typing import Sequence

from sqlalchemy import delete, insert, select

from littlelemon.core.domain_types import MenuItemId
from littlelemon.core.errors import DatabaseError, PersistenceFailure
from littlelemon.core.menu_items import MenuItem, Snapshot
from littlelemon.core.menu_query import matches_category
from littlelemon.infrastructure.database import DatabaseSessionManager
from littlelemon.models.menu_item import MenuItemRow

logger = logging.getLogger(__name__)

_CLOSED = object()


def _to_row(item: MenuItem, position: int) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description,
        "price": item.price_text,
        "image": item.image_ref,
        "category": item.category,
        "position": position,
    }


def _from_row(row: MenuItemRow) -> MenuItem:
    return MenuItem(
        id=MenuItemId(row.id),
        title=row.title,
        description=row.description,
        price_text=row.price,
        image_ref=row.image,
        category=row.category,
    )


def project_category(snapshot: Snapshot, category: str | None) -> Snapshot:
    """Category-filtered view of a snapshot; blank category means everything."""
    if category is None or not category.strip():
        return snapshot
    return tuple(it for it in snapshot if matches_category(it, category))


class Subscription:
    """Handle on a snapshot stream. Async-iterable; call unsubscribe() when done."""

    def __init__(self, store: "MenuStore", category: str | None = None):
        self._store = store
        self.category = category
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def _push(self, snapshot: Snapshot) -> None:
        if not self.closed:
            self._queue.put_nowait(project_category(snapshot, self.category))

    async def next(self) -> Snapshot:
        """Wait for the next snapshot. Raises StopAsyncIteration once unsubscribed."""
        if self.closed and self._queue.empty():
            raise StopAsyncIteration
        value = await self._queue.get()
        if value is _CLOSED:
            raise StopAsyncIteration
        return value

    def pending(self) -> int:
        """Snapshots delivered but not yet consumed."""
        size = self._queue.qsize()
        # the close sentinel is always last in the queue
        return size - 1 if self.closed and size else size

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._store._detach(self)
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Snapshot:
        return await self.next()

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.unsubscribe()


class MenuStore:
    """Sole owner of the menu_items table. Only the sync orchestrator writes."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db
        self._snapshot: Snapshot = ()
        self._subscriptions: list[Subscription] = []
        self._write_lock = asyncio.Lock()

    @property
    def snapshot(self) -> Snapshot:
        """Last published snapshot (store insertion order)."""
        return self._snapshot

    def snapshot_by_category(self, category: str) -> Snapshot:
        return project_category(self._snapshot, category)

    # -- Read side -------------------------------------------------------------

    def get_all(self) -> Subscription:
        """Subscribe to every snapshot, starting with the current one."""
        return self._attach(Subscription(self))

    def get_by_category(self, category: str) -> Subscription:
        """Subscribe to snapshots filtered by case-insensitive category equality."""
        return self._attach(Subscription(self, category))

    async def load(self) -> Snapshot:
        """Publish the persisted table as the current snapshot (offline start)."""
        async with self._write_lock:
            try:
                async with self._db.session() as db:
                    result = await db.execute(
                        select(MenuItemRow).order_by(
                            MenuItemRow.position, MenuItemRow.id,
                        ),
                    )
                    items = tuple(_from_row(r) for r in result.scalars().all())
            except DatabaseError as e:
                raise PersistenceFailure(e.message, "load") from e
            self._publish(items)
        logger.info("Menu cache loaded", extra={"item_count": len(items)})
        return items

    # -- Write side ------------------------------------------------------------

    async def replace_all(self, items: Sequence[MenuItem]) -> None:
        """Atomically replace the whole table with items, in order."""
        items = tuple(items)
        async with self._write_lock:
            try:
                async with self._db.session() as db:
                    async with db.begin():
                        await db.execute(delete(MenuItemRow))
                        if items:
                            await db.execute(
                                insert(MenuItemRow),
                                [_to_row(it, pos) for pos, it in enumerate(items)],
                            )
            except DatabaseError as e:
                raise PersistenceFailure(e.message, "replace_all") from e
            self._publish(items)
        logger.info("Menu cache replaced", extra={"item_count": len(items)})

    async def clear(self) -> None:
        """Atomically empty the table."""
        async with self._write_lock:
            try:
                async with self._db.session() as db:
                    async with db.begin():
                        await db.execute(delete(MenuItemRow))
            except DatabaseError as e:
                raise PersistenceFailure(e.message, "clear") from e
            self._publish(())
        logger.info("Menu cache cleared", extra={"item_count": 0})

    # -- Publication -----------------------------------------------------------

    def _publish(self, items: Snapshot) -> None:
        self._snapshot = items
        for sub in list(self._subscriptions):
            sub._push(items)

    def _attach(self, sub: Subscription) -> Subscription:
        self._subscriptions.append(sub)
        sub._push(self._snapshot)
        return sub

    def _detach(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def close(self) -> None:
        """Unsubscribe everyone so open streams terminate."""
        for sub in list(self._subscriptions):
            sub.unsubscribe()
