"""Post Mutation Handlers — createPost, updatePost, deletePost (3 methods).

Invariants:
    - Stage order: load target (404) -> ownership (403) -> validate input (422) -> mutate
    - createPost inserts the post AND links it into the creator's post set in one commit
    - updatePost always replaces title/content; image_url only when a real value is sent
      (None or the "undefined" sentinel keep the current image)
    - deletePost requests image deletion first (best-effort), then deletes the post and
      pulls it from the creator's set in one commit

Design Decisions:
    - Single commit per mutation: a failed commit rolls back both sides of the
      post/owner relationship, so no orphaned post or dangling reference survives
    - Image deletion failures are logged, not raised: the stored file is
      secondary to the post record
"""

import logging

from postboard.core.domain_types import UNCHANGED_IMAGE_SENTINEL, Identity
from postboard.core.enforce_access import check_ownership
from postboard.core.errors import InputValidationError, NotAuthenticatedError
from postboard.core.repository_protocols import EntityStore, ImageStore
from postboard.core.validate_input import validate_post_input
from postboard.schemas.operations import (
    CreatePostArgs, PostIdArgs, PostOut, UpdatePostArgs,
)
from postboard.services.handle_post_queries import load_post_or_404

logger = logging.getLogger(__name__)


def is_image_replacement(image_url: str | None) -> bool:
    return image_url is not None and image_url != UNCHANGED_IMAGE_SENTINEL


class PostMutationHandlers:
    """Owner-scoped post mutations."""

    def __init__(self, store: EntityStore, images: ImageStore):
        self.store = store
        self.images = images

    async def create_post(self, identity: Identity, args: CreatePostArgs) -> PostOut:
        data = args.post_input
        violations = validate_post_input(data.title, data.content)
        if violations:
            raise InputValidationError(violations)

        creator = await self.store.find_user_by_id(identity.user_id)
        if creator is None:
            # Token outlived its account.
            raise NotAuthenticatedError("Invalid user.")

        post = await self.store.insert_post(
            data.title, data.content, data.image_url, creator,
        )
        await self.store.commit()
        logger.info(
            f"Post {post.id} created",
            extra={"user_id": identity.user_id},
        )
        return PostOut.from_entity(post)

    async def update_post(self, identity: Identity, args: UpdatePostArgs) -> PostOut:
        post = await load_post_or_404(self.store, args.id)
        check_ownership(post.creator_id, identity)

        data = args.post_input
        violations = validate_post_input(data.title, data.content)
        if violations:
            raise InputValidationError(violations)

        post.title = data.title
        post.content = data.content
        if is_image_replacement(data.image_url):
            post.image_url = data.image_url
        await self.store.save_post(post)
        await self.store.commit()
        return PostOut.from_entity(post)

    async def delete_post(self, identity: Identity, args: PostIdArgs) -> bool:
        post = await load_post_or_404(self.store, args.id)
        check_ownership(post.creator_id, identity)

        await self._discard_image(post.image_url)
        await self.store.delete_post(post)
        await self.store.commit()
        logger.info(
            f"Post {args.id} deleted",
            extra={"user_id": identity.user_id},
        )
        return True

    async def _discard_image(self, path: str) -> None:
        try:
            await self.images.delete(path)
        except Exception as e:
            logger.warning(f"Failed to delete image '{path}': {e}")
