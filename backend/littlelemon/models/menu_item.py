"""Menu Item ORM: the single persisted table of the local catalog cache.

Invariants:
    - id is the remote catalog's integer key (no autoincrement, never generated locally)
    - price is TEXT: the source's display formatting is preserved exactly
    - position records insertion order within the last replace-all write
    - image is never empty (normalized before insert)

Design Decisions:
    - position column: SQLite row order is not guaranteed without ORDER BY, and
      ordering by id would lose the remote source's order
"""

from sqlalchemy import Integer, Text, Index
from sqlalchemy.orm import Mapped, mapped_column

from littlelemon.db.base import Base


class MenuItemRow(Base):
    """One cached menu item."""
    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, default="")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_menu_items_position", "position"),
    )
