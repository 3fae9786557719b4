"""Menu Items: the cached entity and the pure raw-to-domain normalization.

Invariants:
    - MenuItem is frozen; a snapshot is a tuple of MenuItem and never mutated
    - price_text is kept exactly as the source formatted it (never parsed to a number)
    - normalize_items preserves the order delivered by the remote source
    - Ids are unique after normalization: a repeated id replaces the earlier entry
      and takes the later entry's position (last occurrence wins)
    - image_ref is non-empty after normalization (resolver guarantees a fallback)

Design Decisions:
    - FetchResult carries failures as values: the fetch path never raises, callers
      check .ok instead of catching
"""

from dataclasses import dataclass
from typing import Sequence

from littlelemon.core.domain_types import MenuItemId
from littlelemon.core.errors import MenuCacheError
from littlelemon.core.image_resolver import resolve_image_ref
from littlelemon.core.repository_protocols import RawMenuItemLike


@dataclass(frozen=True)
class MenuItem:
    """One row of the cached catalog."""
    id: MenuItemId
    title: str
    description: str
    price_text: str
    image_ref: str
    category: str


Snapshot = tuple[MenuItem, ...]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one remote fetch: items on success, failure otherwise."""
    items: tuple[RawMenuItemLike, ...] = ()
    failure: MenuCacheError | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, items: Sequence[RawMenuItemLike]) -> "FetchResult":
        return cls(items=tuple(items))

    @classmethod
    def failed(cls, failure: MenuCacheError) -> "FetchResult":
        return cls(items=(), failure=failure)


def normalize_item(raw: RawMenuItemLike) -> MenuItem:
    """Map a decoded catalog entry to a MenuItem with a resolved image_ref."""
    return MenuItem(
        id=MenuItemId(raw.id),
        title=raw.title,
        description=raw.description,
        price_text=raw.price,
        image_ref=resolve_image_ref(raw.title, raw.image),
        category=raw.category,
    )


def normalize_items(raw_items: Sequence[RawMenuItemLike]) -> list[MenuItem]:
    """Normalize a whole fetch, order preserved, one row per id."""
    by_id: dict[MenuItemId, MenuItem] = {}
    for raw in raw_items:
        item = normalize_item(raw)
        # replace, not update: the later entry moves to its own position
        by_id.pop(item.id, None)
        by_id[item.id] = item
    return list(by_id.values())
