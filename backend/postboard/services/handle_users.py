"""User Handlers — the caller's own account: user, updateStatus (2 methods).

Invariants:
    - Both operations act on the user named by the token, never on an argument id
    - A token whose user no longer exists yields 404
    - updateStatus accepts any string, including empty
"""

from postboard.core.domain_types import Identity
from postboard.core.errors import ResourceNotFoundError
from postboard.core.repository_protocols import EntityStore, UserLike
from postboard.schemas.operations import NoArgs, UpdateStatusArgs, UserOut


async def load_self_or_404(store: EntityStore, identity: Identity) -> UserLike:
    user = await store.find_user_by_id(identity.user_id)
    if user is None:
        raise ResourceNotFoundError("User", identity.user_id)
    return user


class UserHandlers:
    """Profile read and status update."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def user(self, identity: Identity, args: NoArgs) -> UserOut:
        return UserOut.from_entity(await load_self_or_404(self.store, identity))

    async def update_status(
        self, identity: Identity, args: UpdateStatusArgs,
    ) -> UserOut:
        user = await load_self_or_404(self.store, identity)
        user.status = args.status
        await self.store.save_user(user)
        await self.store.commit()
        return UserOut.from_entity(user)
