"""Menu Query: pure search/category projection over a menu snapshot.

Invariants:
    - Output order is the snapshot's order (store insertion order)
    - Blank search phrase / blank category disable their filter (never "match nothing")
    - Search: case-insensitive substring of title OR description
    - Category: case-insensitive equality
    - Both filters compose by intersection

Design Decisions:
    - casefold() over lower(): matches the store's category comparison exactly
    - Phrases are matched as given; whitespace only decides blankness, so
      "salad " does not match "Greek salad"
    - distinct_categories is case-sensitive: "Starters" and "starters" are two labels
"""

from typing import Iterable

from littlelemon.core.menu_items import MenuItem


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def matches_search(item: MenuItem, search_phrase: str) -> bool:
    needle = search_phrase.casefold()
    return needle in item.title.casefold() or needle in item.description.casefold()


def matches_category(item: MenuItem, category: str) -> bool:
    return item.category.casefold() == category.casefold()


def apply_filters(
    snapshot: Iterable[MenuItem],
    search_phrase: str | None = "",
    category: str | None = "",
) -> list[MenuItem]:
    """Filter a snapshot by search phrase and category. Pure, no IO."""
    items = list(snapshot)
    if not _is_blank(search_phrase):
        items = [it for it in items if matches_search(it, search_phrase)]
    if not _is_blank(category):
        items = [it for it in items if matches_category(it, category)]
    return items


def distinct_categories(snapshot: Iterable[MenuItem]) -> list[str]:
    """Distinct category labels present in the snapshot, sorted."""
    return sorted({item.category for item in snapshot})


def category_label(category: str) -> str:
    """Display label for a filter button: first letter upper-cased."""
    label = category.strip()
    return label[:1].upper() + label[1:]
