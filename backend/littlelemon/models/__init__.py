"""ORM Models: SQLAlchemy declarative models.

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from littlelemon.models.menu_item import MenuItemRow  # noqa: F401
