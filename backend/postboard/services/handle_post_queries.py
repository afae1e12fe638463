"""Post Query Handlers — read-only post operations: posts, post (2 methods).

Invariants:
    - posts orders by created_at descending, page size from Settings (default 2)
    - total_posts counts the whole collection, independent of the returned page
    - A page past the end returns an empty list, never an error
    - post returns 404 for unknown or malformed ids

Design Decisions:
    - load_post_or_404 exported for reuse by the mutation handlers (one 404 path)
"""

from postboard.core.domain_types import DEFAULT_POSTS_PER_PAGE, Identity
from postboard.core.errors import ResourceNotFoundError
from postboard.core.pagination import page_window
from postboard.core.repository_protocols import EntityStore, PostLike
from postboard.schemas.operations import PostData, PostIdArgs, PostOut, PostsArgs


async def load_post_or_404(store: EntityStore, post_id: str) -> PostLike:
    """Get post (creator resolved) or raise 404."""
    post = await store.find_post_by_id(post_id)
    if post is None:
        raise ResourceNotFoundError("Post", post_id)
    return post


class PostQueryHandlers:
    """Paginated listing and single-post lookup."""

    def __init__(self, store: EntityStore, per_page: int = DEFAULT_POSTS_PER_PAGE):
        self.store = store
        self.per_page = per_page

    async def posts(self, identity: Identity, args: PostsArgs) -> PostData:
        window = page_window(args.page, self.per_page)
        total = await self.store.count_posts()
        page = await self.store.find_posts_page(
            sort_key="created_at", descending=True,
            skip=window.skip, limit=window.limit,
        )
        return PostData(
            posts=[PostOut.from_entity(p) for p in page],
            total_posts=total,
        )

    async def post(self, identity: Identity, args: PostIdArgs) -> PostOut:
        return PostOut.from_entity(await load_post_or_404(self.store, args.id))
