"""Services Layer — credential service, operation handlers and dispatch.

Invariants:
    - Handlers split by concern (max ~4 methods each)
    - Operation dispatch uses explicit dict mapping (no auto-discovery)

Design Decisions:
    - One handler file per concern for locality
"""
