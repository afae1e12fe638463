"""Pydantic Schemas — operation arguments and results at the API boundary.

Invariants:
    - Schemas check argument SHAPE only; field rules live in core/validate_input.py
    - Result schemas never expose password hashes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
