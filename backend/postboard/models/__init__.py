"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User owns Post through Post.creator / User.posts

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from postboard.models.user import User  # noqa: F401
from postboard.models.post import Post  # noqa: F401
