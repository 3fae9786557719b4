"""API Layer: FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes only read the cache, except POST /sync which delegates to the orchestrator
"""
