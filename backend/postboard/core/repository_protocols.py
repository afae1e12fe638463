"""Boundary Protocols — contracts between handlers and the stores they drive.

Invariants:
    - Handlers depend on these Protocols, never on SQLAlchemy or the filesystem directly
    - Identifiers cross the boundary as strings; malformed ids behave as "not found"
    - Store mutations are staged until commit(); one commit per operation

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can hand in fakes without inheritance
    - UserLike / PostLike describe the attributes rendering reads, so handlers are
      typed without importing ORM classes
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID


class UserLike(Protocol):
    """Structural contract for User objects returned by the store."""
    id: UUID
    email: str
    password_hash: str
    name: str
    status: str
    posts: list


class PostLike(Protocol):
    """Structural contract for Post objects returned by the store."""
    id: UUID
    title: str
    content: str
    image_url: str
    creator_id: UUID
    creator: UserLike
    created_at: datetime
    updated_at: datetime


class EntityStore(Protocol):
    """Contract for user/post persistence — implemented by infrastructure."""
    async def find_user_by_email(self, email: str) -> UserLike | None: ...
    async def find_user_by_id(self, user_id: str) -> UserLike | None: ...
    async def insert_user(
        self, email: str, name: str, password_hash: str,
    ) -> UserLike: ...
    async def save_user(self, user: UserLike) -> UserLike: ...
    async def find_post_by_id(self, post_id: str) -> PostLike | None: ...
    async def insert_post(
        self, title: str, content: str, image_url: str, creator: UserLike,
    ) -> PostLike: ...
    async def save_post(self, post: PostLike) -> PostLike: ...
    async def delete_post(self, post: PostLike) -> None: ...
    async def count_posts(self) -> int: ...
    async def find_posts_page(
        self, sort_key: str, descending: bool, skip: int, limit: int,
    ) -> list[PostLike]: ...
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class ImageStore(Protocol):
    """Contract for the binary image store — implemented by infrastructure."""
    async def save(self, data: bytes, original_name: str | None) -> str: ...
    async def delete(self, path: str) -> bool: ...
