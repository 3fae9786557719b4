"""Core Layer: pure domain logic, no async, no DB, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the orchestrator does the IO,
      core decides what the IO results mean
"""
