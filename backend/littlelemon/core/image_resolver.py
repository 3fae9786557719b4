"""Image Resolver - two-tier image policy: bundled asset, then network URL, then placeholder.

Invariants:
    - Known dish titles (case-folded, trimmed) always map to the bundled asset key,
      the remote URL is discarded
    - Unknown titles pass the remote reference through unchanged
    - Unknown title + blank reference yields PLACEHOLDER_IMAGE_KEY (never empty)

Design Decisions:
    - Static dict over config file: the bundled assets ship with the client,
      so the table changes only when the asset bundle changes
    - Placeholder substitution is logged with the title so a miss stays diagnosable
"""

import logging

from littlelemon.core.domain_types import ImageKind

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_KEY = "hero_image"

LOCAL_IMAGE_KEYS: dict[str, str] = {
    "greek salad": "greek_salad",
    "lemon dessert": "lemon_dessert",
    "lemon desert": "lemon_dessert",  # misspelled in the live catalog
    "grilled fish": "grilled_fish",
    "pasta": "pasta",
    "bruschetta": "bruschetta",
}

_EXTERNAL_PREFIXES = ("http://", "https://")


def _normalize_title(title: str) -> str:
    return title.strip().casefold()


def resolve_image_ref(title: str, raw_image_ref: str) -> str:
    """Resolve a catalog item's image to a local asset key or pass-through URL."""
    local_key = LOCAL_IMAGE_KEYS.get(_normalize_title(title))
    if local_key:
        return local_key
    if raw_image_ref and raw_image_ref.strip():
        return raw_image_ref
    logger.info(
        f"No image for '{title}', using placeholder",
        extra={"image_ref": PLACEHOLDER_IMAGE_KEY},
    )
    return PLACEHOLDER_IMAGE_KEY


def classify_image_ref(image_ref: str) -> ImageKind:
    """Tell the UI whether to load a bundled asset or fetch over the network."""
    if image_ref.startswith(_EXTERNAL_PREFIXES):
        return ImageKind.EXTERNAL
    if image_ref == PLACEHOLDER_IMAGE_KEY:
        return ImageKind.PLACEHOLDER
    return ImageKind.LOCAL
