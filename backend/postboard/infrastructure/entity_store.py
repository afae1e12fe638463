"""Entity Store — SQLAlchemy implementation of the user/post store contract.

Invariants:
    - Mutations flush but never commit; the calling handler commits once per operation,
      so a post and its owner's back-reference land in the same transaction
    - Every post returned has its creator loaded (relationship is selectin)
    - Malformed ids resolve to None, never to a driver error
    - save_post refreshes updated_at explicitly (not only via onupdate)

Design Decisions:
    - Sort keys mapped through an explicit dict: no getattr on user-controlled strings
    - delete_post removes the post from its creator's collection as well as deleting
      the row, so in-memory state matches the committed state
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.models.post import Post
from postboard.models.user import User

logger = logging.getLogger(__name__)

_POST_SORT_KEYS = {
    "created_at": Post.created_at,
    "updated_at": Post.updated_at,
    "title": Post.title,
}


def parse_id(raw: object) -> uuid.UUID | None:
    """Coerce an external identifier into the store's native UUID, or None."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


class SqlEntityStore:
    """User/post persistence over one AsyncSession (one request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Users ----------------------------------------------------------------

    async def find_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_user_by_id(self, user_id: str) -> User | None:
        uid = parse_id(user_id)
        if uid is None:
            return None
        return await self.db.get(User, uid)

    async def insert_user(self, email: str, name: str, password_hash: str) -> User:
        user = User(email=email, name=name, password_hash=password_hash, posts=[])
        self.db.add(user)
        await self.db.flush()
        return user

    async def save_user(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user

    # --- Posts ----------------------------------------------------------------

    async def find_post_by_id(self, post_id: str) -> Post | None:
        pid = parse_id(post_id)
        if pid is None:
            return None
        return await self.db.get(Post, pid)

    async def insert_post(
        self, title: str, content: str, image_url: str, creator: User,
    ) -> Post:
        """Insert a post and link it into creator.posts (same flush)."""
        post = Post(title=title, content=content, image_url=image_url)
        creator.posts.append(post)
        self.db.add(post)
        await self.db.flush()
        return post

    async def save_post(self, post: Post) -> Post:
        post.updated_at = datetime.now(timezone.utc)
        self.db.add(post)
        await self.db.flush()
        return post

    async def delete_post(self, post: Post) -> None:
        creator = post.creator
        await self.db.delete(post)
        if creator is not None and post in creator.posts:
            creator.posts.remove(post)
        await self.db.flush()

    async def count_posts(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Post))
        return result.scalar_one()

    async def find_posts_page(
        self, sort_key: str = "created_at", descending: bool = True,
        skip: int = 0, limit: int = 2,
    ) -> list[Post]:
        column = _POST_SORT_KEYS.get(sort_key)
        if column is None:
            raise ValueError(f"Unsupported post sort key: {sort_key}")
        order = column.desc() if descending else column.asc()
        result = await self.db.execute(
            select(Post).order_by(order).offset(skip).limit(limit),
        )
        return list(result.scalars().all())

    # --- Unit of work ---------------------------------------------------------

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
