"""Authorization Guard — resolves the caller's identity from the Authorization header.

Invariants:
    - Runs once per inbound call, before dispatch
    - NEVER rejects: absent, malformed or invalid credentials resolve to None and the
      call proceeds; each operation's declared policy decides whether None is fatal
    - Only the "Bearer <token>" scheme is recognized (scheme is case-insensitive)
"""

import logging

from fastapi import Depends, Header

from postboard.core.domain_types import Identity
from postboard.services.credentials import CredentialService, get_credentials

logger = logging.getLogger(__name__)


def parse_bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def resolve_identity(
    authorization: str | None, credentials: CredentialService,
) -> Identity | None:
    claims = credentials.verify_token(parse_bearer(authorization))
    if claims is None:
        if authorization:
            logger.info("Authorization header present but token rejected")
        return None
    return Identity(user_id=claims.user_id, email=claims.email)


async def get_identity(
    authorization: str | None = Header(None),
    credentials: CredentialService = Depends(get_credentials),
) -> Identity | None:
    """FastAPI dependency — identity for this request, or None."""
    return resolve_identity(authorization, credentials)
