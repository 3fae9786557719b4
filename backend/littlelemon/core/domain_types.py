"""Domain Types: identity types and enums shared across the menu cache.

Invariants:
    - MenuItemId wraps int: the remote catalog's primary key
    - Every sync state and image kind is an Enum, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

MenuItemId = NewType("MenuItemId", int)
SyncId = NewType("SyncId", str)


# ─── Enums ───────────────────────────────────────────────────────

class SyncState(str, Enum):
    """Sync lifecycle. FAILED is reachable from FETCHING, NORMALIZING, PERSISTING."""
    IDLE = "idle"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class ImageKind(str, Enum):
    """How the UI should load an image_ref."""
    LOCAL = "local"
    EXTERNAL = "external"
    PLACEHOLDER = "placeholder"


# In-flight states; also the only states a run may fail from
ACTIVE_STATES = frozenset({
    SyncState.FETCHING, SyncState.NORMALIZING, SyncState.PERSISTING,
})
