"""Operation Schemas — argument and result shapes for every dispatched operation.

Invariants:
    - Argument models check presence and type only; length/format rules are applied by
      core/validate_input.py so that every violation is reported together (422)
    - Unknown argument names are rejected (extra="forbid")
    - Result models expose ids as str and timestamps as ISO-8601 str
    - UserOut never carries the password hash
    - PostOut.creator is a fully rendered UserOut, not a bare id

Design Decisions:
    - from_entity classmethods read the structural UserLike/PostLike contracts,
      so rendering works for ORM rows and test doubles alike
    - UserOut.posts lists post ids: embedding full posts would recurse through creator
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from postboard.core.domain_types import MAX_PAGE
from postboard.core.repository_protocols import PostLike, UserLike


class _Arguments(BaseModel):
    model_config = ConfigDict(extra="forbid")


# --- Request envelope ---------------------------------------------------------

class OperationRequest(BaseModel):
    """Body of POST /api/v1/operations."""
    operation: str
    arguments: dict = {}


# --- Arguments ----------------------------------------------------------------

class UserInputData(_Arguments):
    email: str
    name: str
    password: str


class PostInputData(_Arguments):
    title: str
    content: str
    image_url: str


class PostUpdateData(_Arguments):
    """image_url omitted, null or "undefined" keeps the current image."""
    title: str
    content: str
    image_url: str | None = None


class LoginArgs(_Arguments):
    email: str
    password: str


class CreateUserArgs(_Arguments):
    user_input: UserInputData


class CreatePostArgs(_Arguments):
    post_input: PostInputData


class PostsArgs(_Arguments):
    page: int | None = Field(None, le=MAX_PAGE)


class PostIdArgs(_Arguments):
    id: str


class UpdatePostArgs(_Arguments):
    id: str
    post_input: PostUpdateData


class NoArgs(_Arguments):
    pass


class UpdateStatusArgs(_Arguments):
    status: str


# --- Results ------------------------------------------------------------------

def _iso(value: datetime) -> str:
    # Backends without timezone support hand back naive UTC values
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    status: str
    posts: list[str] = []

    @classmethod
    def from_entity(cls, user: UserLike) -> "UserOut":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            status=user.status,
            posts=[str(p.id) for p in (user.posts or [])],
        )


class PostOut(BaseModel):
    id: str
    title: str
    content: str
    image_url: str
    creator: UserOut
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, post: PostLike) -> "PostOut":
        return cls(
            id=str(post.id),
            title=post.title,
            content=post.content,
            image_url=post.image_url,
            creator=UserOut.from_entity(post.creator),
            created_at=_iso(post.created_at),
            updated_at=_iso(post.updated_at),
        )


class AuthData(BaseModel):
    token: str
    user_id: str


class PostData(BaseModel):
    posts: list[PostOut]
    total_posts: int


class ImageStored(BaseModel):
    message: str
    file_path: str
