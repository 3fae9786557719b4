"""MenuStore: atomic replace-all, persistence across restarts, snapshot subscriptions.

Invariants:
    - Visible content is exactly the last committed write (all-or-nothing)
    - Subscriptions get the current snapshot at once, then one per commit, in order
    - By-category views compare case-insensitively
"""

import asyncio

import pytest

from littlelemon.core.domain_types import MenuItemId
from littlelemon.core.errors import PersistenceFailure
from littlelemon.core.menu_items import MenuItem
from littlelemon.infrastructure.menu_store import MenuStore


def _item(id, title="Pasta", category="mains", image_ref="pasta"):
    return MenuItem(
        id=MenuItemId(id), title=title, description=f"{title} description",
        price_text="10.00", image_ref=image_ref, category=category,
    )


async def _next(subscription, timeout: float = 1.0):
    return await asyncio.wait_for(subscription.next(), timeout)


async def test_empty_store_publishes_empty_snapshot(store):
    sub = store.get_all()
    assert await _next(sub) == ()
    sub.unsubscribe()


async def test_replace_all_publishes_items_in_given_order(store):
    items = [_item(9), _item(2), _item(5)]

    await store.replace_all(items)

    assert [it.id for it in store.snapshot] == [9, 2, 5]


async def test_replace_all_persists_across_store_instances(store, db_manager):
    await store.replace_all([_item(3, "Greek Salad"), _item(1, "Bruschetta")])

    reopened = MenuStore(db_manager)
    loaded = await reopened.load()

    assert [it.id for it in loaded] == [3, 1]
    assert loaded == store.snapshot


async def test_replace_all_replaces_rows_entirely(store, db_manager):
    await store.replace_all([_item(1, "Pasta"), _item(2, "Fish")])
    await store.replace_all([_item(2, "Grilled Fish", category="seafood")])

    loaded = await MenuStore(db_manager).load()

    assert len(loaded) == 1
    assert loaded[0].title == "Grilled Fish"
    assert loaded[0].category == "seafood"


async def test_failed_replace_all_leaves_content_unchanged(store, db_manager):
    await store.replace_all([_item(1), _item(2)])
    before = store.snapshot

    # NOT NULL violation on the last row: the delete has already run when the insert fails
    with pytest.raises(PersistenceFailure) as exc_info:
        await store.replace_all([_item(7), _item(8), _item(9, title=None)])

    assert exc_info.value.operation == "replace_all"
    assert store.snapshot == before
    assert await MenuStore(db_manager).load() == before


async def test_failed_replace_all_publishes_nothing(store):
    await store.replace_all([_item(1)])
    sub = store.get_all()
    await _next(sub)

    with pytest.raises(PersistenceFailure):
        await store.replace_all([_item(4, title=None)])

    assert sub.pending() == 0
    sub.unsubscribe()


async def test_subscription_receives_current_then_each_commit(store):
    await store.replace_all([_item(1)])
    sub = store.get_all()

    await store.replace_all([_item(2), _item(3)])
    await store.clear()

    assert [it.id for it in await _next(sub)] == [1]
    assert [it.id for it in await _next(sub)] == [2, 3]
    assert await _next(sub) == ()
    sub.unsubscribe()


async def test_get_by_category_is_case_insensitive(store):
    await store.replace_all([
        _item(1, "Greek Salad", category="starters"),
        _item(2, "Pasta", category="mains"),
        _item(3, "Bruschetta", category="Starters"),
    ])

    async with store.get_by_category("STARTERS") as sub:
        view = await _next(sub)

    assert [it.id for it in view] == [1, 3]
    assert [it.id for it in store.snapshot_by_category("Mains")] == [2]


async def test_category_subscription_updates_on_commit(store):
    sub = store.get_by_category("desserts")
    assert await _next(sub) == ()

    await store.replace_all([_item(1, category="Desserts"), _item(2)])

    assert [it.id for it in await _next(sub)] == [1]
    sub.unsubscribe()


async def test_clear_empties_table(store, db_manager):
    await store.replace_all([_item(1), _item(2)])

    await store.clear()

    assert store.snapshot == ()
    assert await MenuStore(db_manager).load() == ()


async def test_unsubscribe_ends_iteration_and_detaches(store):
    sub = store.get_all()
    assert store.subscriber_count == 1

    received = []

    async def consume():
        async for snapshot in sub:
            received.append(snapshot)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    sub.unsubscribe()
    await asyncio.wait_for(task, 1.0)

    assert received == [()]
    assert store.subscriber_count == 0

    await store.replace_all([_item(1)])
    assert sub.pending() == 0


async def test_close_terminates_open_subscriptions(store):
    sub = store.get_all()
    await _next(sub)

    await store.close()

    with pytest.raises(StopAsyncIteration):
        await _next(sub)
