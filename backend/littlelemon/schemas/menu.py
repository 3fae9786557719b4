"""Menu Schemas: remote catalog decoding and API response models.

Invariants:
    - RemoteMenuPayload requires the "menu" array; every other top-level key is ignored
    - RawMenuItem requires all six catalog fields; unknown per-item keys are ignored
    - price stays a string (no float coercion) so display formatting survives

Design Decisions:
    - extra="ignore" on both models: forward-compatible with catalog additions
    - Response models are flat and use the domain attribute names (price_text, image_ref)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from littlelemon.core.domain_types import ImageKind, SyncState
from littlelemon.core.image_resolver import classify_image_ref
from littlelemon.core.menu_items import MenuItem


# --- Remote catalog -----------------------------------------------------------

class RawMenuItem(BaseModel):
    """One catalog entry as served by the remote endpoint."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    title: str
    description: str
    price: str
    image: str
    category: str


class RemoteMenuPayload(BaseModel):
    """Top-level remote document: {"menu": [...]}."""
    model_config = ConfigDict(extra="ignore")

    menu: list[RawMenuItem]


# --- API responses ------------------------------------------------------------

class MenuItemResponse(BaseModel):
    id: int
    title: str
    description: str
    price_text: str
    image_ref: str
    image_kind: ImageKind
    category: str

    @classmethod
    def from_item(cls, item: MenuItem) -> "MenuItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            description=item.description,
            price_text=item.price_text,
            image_ref=item.image_ref,
            image_kind=classify_image_ref(item.image_ref),
            category=item.category,
        )


class MenuListResponse(BaseModel):
    """Filtered view of the current snapshot."""
    items: list[MenuItemResponse]
    total: int
    search: str = ""
    category: str = ""


class CategoryResponse(BaseModel):
    value: str
    label: str


class SyncStatusResponse(BaseModel):
    """Pollable sync state for the UI collaborator."""
    state: SyncState
    sync_id: str | None = None
    item_count: int | None = None
    error_code: str | None = None
    error_message: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    last_success_at: datetime | None = None
