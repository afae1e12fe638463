"""Post ORM — titled content with an image, owned by exactly one user.

Invariants:
    - creator_id is non-nullable and never reassigned after creation
    - created_at set once on insert; updated_at refreshed on every UPDATE
    - image_url is a path produced by the image upload route

Design Decisions:
    - Timestamps are Python-side defaults so values are known right after flush
      (no refresh round-trip before rendering)
    - lazy="selectin" on creator: every rendered post embeds its creator
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from postboard.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """Post entity — belongs to its creator."""
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    creator_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

    # Relationships
    creator: Mapped["User"] = relationship(
        "User", back_populates="posts", lazy="selectin",
    )
