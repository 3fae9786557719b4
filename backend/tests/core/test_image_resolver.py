"""Tests for resolve_image_ref / classify_image_ref: pure, no IO."""

import pytest

from littlelemon.core.domain_types import ImageKind
from littlelemon.core.image_resolver import (
    LOCAL_IMAGE_KEYS,
    PLACEHOLDER_IMAGE_KEY,
    classify_image_ref,
    resolve_image_ref,
)


def test_known_dish_prefers_bundled_asset_over_remote_url():
    ref = resolve_image_ref("Greek salad", "https://cdn.test/greekSalad.jpg")
    assert ref == "greek_salad"


def test_known_dish_with_empty_image_still_gets_local_key():
    assert resolve_image_ref("Greek salad", "") == "greek_salad"


@pytest.mark.parametrize("title", ["  GREEK SALAD ", "greek salad", "Greek Salad"])
def test_title_lookup_is_case_folded_and_trimmed(title):
    assert resolve_image_ref(title, "x") == "greek_salad"


def test_misspelled_lemon_desert_maps_to_lemon_dessert():
    assert resolve_image_ref("Lemon Desert", "") == "lemon_dessert"
    assert resolve_image_ref("Lemon Dessert", "") == "lemon_dessert"


def test_unknown_dish_passes_url_through_unchanged():
    assert resolve_image_ref("Unknown Dish", "https://x/y.jpg") == "https://x/y.jpg"


def test_unknown_dish_without_image_gets_placeholder():
    assert resolve_image_ref("Mystery", "") == PLACEHOLDER_IMAGE_KEY


def test_whitespace_only_image_counts_as_empty():
    assert resolve_image_ref("Mystery", "   ") == PLACEHOLDER_IMAGE_KEY


def test_every_table_entry_resolves_to_non_empty_key():
    for title, key in LOCAL_IMAGE_KEYS.items():
        assert resolve_image_ref(title, "") == key
        assert key


def test_classify_image_ref():
    assert classify_image_ref("https://x/y.jpg") == ImageKind.EXTERNAL
    assert classify_image_ref("http://x/y.jpg") == ImageKind.EXTERNAL
    assert classify_image_ref("pasta") == ImageKind.LOCAL
    assert classify_image_ref(PLACEHOLDER_IMAGE_KEY) == ImageKind.PLACEHOLDER
