"""Access Enforcement — authentication and ownership checks.

Invariants:
    - All functions are PURE: they inspect identities and ids, never load anything
    - Violations raise typed errors (401 / 403); success returns the checked identity
    - Ownership compares string forms so UUID and str ids match

Design Decisions:
    - Raise instead of returning error dicts: every caller aborts the whole operation
      on failure, so there is no partial result to carry
"""

from postboard.core.domain_types import Identity
from postboard.core.errors import NotAuthenticatedError, NotAuthorizedError


def require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise NotAuthenticatedError()
    return identity


def is_owner(creator_id: object, identity: Identity) -> bool:
    return str(creator_id) == str(identity.user_id)


def check_ownership(creator_id: object, identity: Identity) -> None:
    """Only the recorded creator may mutate a resource."""
    if not is_owner(creator_id, identity):
        raise NotAuthorizedError()
