"""Infrastructure Layer — database, entity store, image store and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Store failures mapped to DatabaseError; file failures logged, never raised on delete

Design Decisions:
    - Thin adapters over SQLAlchemy and the filesystem so handlers depend on protocols
"""
