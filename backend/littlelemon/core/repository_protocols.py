"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - The orchestrator depends on these Protocols, not on httpx or SQLAlchemy
    - Implementations provided by the shell (infrastructure/) via constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO;
      the pure functions that consume their results are never async
"""

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from littlelemon.core.menu_items import FetchResult, MenuItem


class RawMenuItemLike(Protocol):
    """Structural contract for a decoded catalog entry (wire field names)."""
    id: int
    title: str
    description: str
    price: str
    image: str
    category: str


class MenuSource(Protocol):
    """Contract for the remote catalog: implemented by RemoteMenuSource."""
    async def fetch(self) -> "FetchResult": ...


class MenuWriter(Protocol):
    """Write side of the menu store: only the sync orchestrator holds one."""
    async def replace_all(self, items: Sequence["MenuItem"]) -> None: ...
    async def clear(self) -> None: ...
