"""Operations Route — the single named-operation endpoint.

Invariants:
    - POST /api/v1/operations accepts {"operation", "arguments"} and answers {"data": ...}
    - Identity is resolved by the Authorization Guard before dispatch; the route itself
      never rejects unauthenticated calls (each operation's policy does)
    - Failures surface through the global PostboardError handler as {"errors": [...]}

Design Decisions:
    - OperationDispatch built per request around the request's DB session
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.api.dependencies import get_image_store
from postboard.config import Settings, get_settings
from postboard.core.domain_types import Identity
from postboard.infrastructure.database import get_db
from postboard.infrastructure.entity_store import SqlEntityStore
from postboard.infrastructure.image_store import LocalImageStore
from postboard.schemas.operations import OperationRequest
from postboard.services.authorization_guard import get_identity
from postboard.services.credentials import CredentialService, get_credentials
from postboard.services.operation_dispatch import OperationDispatch

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/operations", tags=["operations"])


@router.post("")
async def run_operation(
    body: OperationRequest,
    identity: Identity | None = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credentials),
    images: LocalImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings),
):
    """Dispatch one named operation."""
    dispatch = OperationDispatch(
        SqlEntityStore(db), credentials, images, per_page=settings.posts_per_page,
    )
    data = await dispatch.execute(body.operation, body.arguments, identity)
    return {"data": data}
