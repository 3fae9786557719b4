"""Pydantic Schemas: wire decoding and API response shapes.

Invariants:
    - Schemas validate at system boundaries (remote payload in, API responses out)
    - Unknown remote fields are ignored (forward-compatible decoding)

Design Decisions:
    - Separate from models: schemas are contracts, models are persistence
"""
