"""Services Layer: orchestration of IO around the pure core.

Invariants:
    - Services are the only callers of MenuStore write operations
"""
