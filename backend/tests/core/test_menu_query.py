"""Tests for apply_filters / distinct_categories: pure projection over snapshots."""

from littlelemon.core.domain_types import MenuItemId
from littlelemon.core.menu_items import MenuItem
from littlelemon.core.menu_query import (
    apply_filters,
    category_label,
    distinct_categories,
)


def _item(id, title, description="", category="mains"):
    return MenuItem(
        id=MenuItemId(id), title=title, description=description,
        price_text="9.99", image_ref="pasta", category=category,
    )


SNAPSHOT = (
    _item(3, "Greek Salad", "Crispy lettuce, feta", "starters"),
    _item(1, "Pasta", "Penne with a side salad", "Mains"),
    _item(2, "Lemon Dessert", "Ricotta cake", "desserts"),
    _item(5, "Bruschetta", "Grilled bread", "starters"),
)


def test_blank_filters_return_full_snapshot_in_order():
    assert apply_filters(SNAPSHOT, "", "") == list(SNAPSHOT)


def test_whitespace_filters_count_as_blank():
    assert apply_filters(SNAPSHOT, "   ", "\t") == list(SNAPSHOT)


def test_none_filters_count_as_blank():
    assert apply_filters(SNAPSHOT, None, None) == list(SNAPSHOT)


def test_search_matches_title_or_description_case_insensitively():
    result = apply_filters(SNAPSHOT, "salad", "")
    assert [it.id for it in result] == [3, 1]


def test_search_is_substring_not_prefix():
    assert [it.id for it in apply_filters(SNAPSHOT, "RICOTTA", "")] == [2]


def test_search_with_no_match_returns_empty():
    assert apply_filters(SNAPSHOT, "sushi", "") == []


def test_category_equality_is_case_insensitive():
    assert [it.id for it in apply_filters(SNAPSHOT, "", "STARTERS")] == [3, 5]
    assert [it.id for it in apply_filters(SNAPSHOT, "", "mains")] == [1]


def test_category_is_equality_not_substring():
    assert apply_filters(SNAPSHOT, "", "start") == []


def test_search_phrase_is_matched_as_given():
    snapshot = (_item(1, "Greek salad"),)
    assert apply_filters(snapshot, "salad ", "") == []
    assert apply_filters(snapshot, " salad", "") == [snapshot[0]]


def test_category_is_matched_as_given():
    snapshot = (_item(1, "Pasta", category="mains"),)
    assert apply_filters(snapshot, "", "mains ") == []
    assert apply_filters(snapshot, "", "MAINS") == [snapshot[0]]


def test_filters_compose_by_intersection():
    result = apply_filters(SNAPSHOT, "salad", "starters")
    assert [it.id for it in result] == [3]


def test_apply_filters_does_not_mutate_input():
    snapshot = list(SNAPSHOT)
    apply_filters(snapshot, "salad", "starters")
    assert snapshot == list(SNAPSHOT)


def test_distinct_categories_sorted_and_deduped():
    items = SNAPSHOT + (_item(9, "Fish", category="starters"),)
    assert distinct_categories(items) == ["Mains", "desserts", "starters"]


def test_distinct_categories_keep_labels_differing_in_case():
    items = SNAPSHOT + (_item(9, "Fish", category="Starters"),)
    assert distinct_categories(items) == ["Mains", "Starters", "desserts", "starters"]


def test_distinct_categories_empty_snapshot():
    assert distinct_categories(()) == []


def test_category_label_capitalizes_first_letter():
    assert category_label("starters") == "Starters"
    assert category_label("") == ""
