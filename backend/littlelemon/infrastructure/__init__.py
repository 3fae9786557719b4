"""Infrastructure Layer: external service clients, persistence, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external failures mapped to core/errors.py types at this boundary
"""
