"""Database Infrastructure: SQLAlchemy declarative Base for the menu table.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)
    - All sessions are async (AsyncSession) on the aiosqlite driver
"""
