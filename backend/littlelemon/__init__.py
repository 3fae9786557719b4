"""Little Lemon menu cache: local-first menu catalog with remote sync."""

__version__ = "1.0.0"
