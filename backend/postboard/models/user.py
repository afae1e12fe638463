"""User ORM — registered account that owns posts.

Invariants:
    - id is UUID primary key (client-side default)
    - email is unique and non-nullable (unique index enforces it under races)
    - password_hash is never rendered to callers
    - status defaults to DEFAULT_USER_STATUS on creation
    - posts is the reverse side of Post.creator; it is never written independently

Design Decisions:
    - delete-orphan cascade on posts: pulling a post out of the collection deletes it,
      so the owner's set and the posts table cannot disagree after a flush
    - lazy="selectin" on posts: rendering a user needs post ids without an
      implicit IO round-trip inside async code
"""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from postboard.core.domain_types import DEFAULT_USER_STATUS
from postboard.db.base import Base


class User(Base):
    """User entity — identity, credentials and owned posts."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(500), nullable=False, default=DEFAULT_USER_STATUS,
    )

    # Relationships
    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="creator",
        cascade="all, delete-orphan", lazy="selectin",
    )
