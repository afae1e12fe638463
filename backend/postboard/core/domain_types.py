"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, PostId wrap UUIDs — the store's native identifier never leaks past rendering
    - Identity is immutable once resolved from a token
    - All valid operation names encoded as an Enum — no raw string matching in dispatch

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
PostId = NewType("PostId", UUID)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, resolved from a verified bearer token."""
    user_id: str
    email: str | None = None


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_USER_STATUS = "I am new!"
UNCHANGED_IMAGE_SENTINEL = "undefined"
MIN_TEXT_LENGTH = 5
DEFAULT_POSTS_PER_PAGE = 2
# Largest page number a client may ask for (32-bit signed integer argument).
MAX_PAGE = 2**31 - 1
ACCEPTED_IMAGE_TYPES = frozenset({"image/png", "image/jpg", "image/jpeg"})


# ─── Enums ───────────────────────────────────────────────────────

class OperationName(str, Enum):
    """Every operation the dispatcher exposes."""
    LOGIN = "login"
    CREATE_USER = "createUser"
    CREATE_POST = "createPost"
    POSTS = "posts"
    POST = "post"
    UPDATE_POST = "updatePost"
    DELETE_POST = "deletePost"
    USER = "user"
    UPDATE_STATUS = "updateStatus"


PUBLIC_OPERATIONS = frozenset({OperationName.LOGIN, OperationName.CREATE_USER})
