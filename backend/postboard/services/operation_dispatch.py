"""Operation Dispatch — explicit routing from operation name to handler.

Invariants:
    - Every operation->handler mapping is visible in one dict — no getattr magic
    - Every operation declares requires_auth; the check runs BEFORE arguments are parsed
    - Unknown operations raise UnknownOperationError (400)
    - Arguments are parsed into the operation's declared model; shape errors raise
      InvalidArgumentsError (400) listing every offending field
    - Handlers receive (identity, parsed_args) and return a pydantic model or a plain value
    - Every call is logged with its outcome; errors propagate unchanged to the API boundary

Design Decisions:
    - Explicit dict over auto-discovery: adding an operation requires editing this table
    - Auth as a declared per-operation policy (OperationSpec.requires_auth), not ambient
      request state; login and createUser are the only public operations
    - Handlers instantiated per-dispatch with the request's store and shared services
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from postboard.core.domain_types import (
    DEFAULT_POSTS_PER_PAGE, PUBLIC_OPERATIONS, Identity, OperationName,
)
from postboard.core.enforce_access import require_identity
from postboard.core.errors import (
    InvalidArgumentsError, PostboardError, UnknownOperationError,
)
from postboard.core.repository_protocols import EntityStore, ImageStore
from postboard.schemas.operations import (
    CreatePostArgs, CreateUserArgs, LoginArgs, NoArgs, PostIdArgs, PostsArgs,
    UpdatePostArgs, UpdateStatusArgs,
)
from postboard.services.credentials import CredentialService
from postboard.services.handle_auth import AuthHandlers
from postboard.services.handle_post_mutations import PostMutationHandlers
from postboard.services.handle_post_queries import PostQueryHandlers
from postboard.services.handle_users import UserHandlers

logger = logging.getLogger(__name__)

Handler = Callable[[Identity | None, Any], Awaitable[Any]]


@dataclass(frozen=True)
class OperationSpec:
    """Declared policy and wiring for one operation."""
    name: OperationName
    handler: Handler
    args_model: type[BaseModel]
    requires_auth: bool = True


def describe_argument_errors(exc: ValidationError) -> list[dict]:
    return [
        {
            "message": (
                f"{'.'.join(str(loc) for loc in e['loc']) or 'arguments'}: {e['msg']}"
            ),
        }
        for e in exc.errors()
    ]


def to_payload(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump()
    return result


class OperationDispatch:
    """Routes operation name -> handler. Explicit registration, no auto-discovery."""

    def __init__(
        self,
        store: EntityStore,
        credentials: CredentialService,
        images: ImageStore,
        per_page: int = DEFAULT_POSTS_PER_PAGE,
    ):
        auth = AuthHandlers(store, credentials)
        post_queries = PostQueryHandlers(store, per_page)
        post_mutations = PostMutationHandlers(store, images)
        users = UserHandlers(store)

        specs = [
            # Public
            self._spec(OperationName.LOGIN, auth.login, LoginArgs),
            self._spec(OperationName.CREATE_USER, auth.create_user, CreateUserArgs),

            # Posts
            self._spec(OperationName.CREATE_POST, post_mutations.create_post, CreatePostArgs),
            self._spec(OperationName.POSTS, post_queries.posts, PostsArgs),
            self._spec(OperationName.POST, post_queries.post, PostIdArgs),
            self._spec(OperationName.UPDATE_POST, post_mutations.update_post, UpdatePostArgs),
            self._spec(OperationName.DELETE_POST, post_mutations.delete_post, PostIdArgs),

            # Self
            self._spec(OperationName.USER, users.user, NoArgs),
            self._spec(OperationName.UPDATE_STATUS, users.update_status, UpdateStatusArgs),
        ]
        self._operations: dict[str, OperationSpec] = {s.name.value: s for s in specs}

    @staticmethod
    def _spec(
        name: OperationName, handler: Handler, args_model: type[BaseModel],
    ) -> OperationSpec:
        return OperationSpec(
            name=name, handler=handler, args_model=args_model,
            requires_auth=name not in PUBLIC_OPERATIONS,
        )

    @property
    def operations(self) -> dict[str, OperationSpec]:
        return dict(self._operations)

    async def execute(
        self, operation: str, arguments: dict | None, identity: Identity | None,
    ) -> Any:
        """Run one operation through the pipeline. Returns a JSON-ready payload."""
        log_extra = {
            "operation": operation,
            "user_id": identity.user_id if identity else None,
        }
        spec = self._operations.get(operation)
        try:
            if spec is None:
                raise UnknownOperationError(operation)
            if spec.requires_auth:
                identity = require_identity(identity)
            args = self._parse_arguments(spec, arguments)
            result = await spec.handler(identity, args)
        except PostboardError as e:
            logger.info(
                f"Operation {operation} failed: {e.message}",
                extra={**log_extra, "error_code": e.code, "status": e.http_status},
            )
            raise
        logger.info(f"Operation {operation} succeeded", extra=log_extra)
        return to_payload(result)

    @staticmethod
    def _parse_arguments(spec: OperationSpec, arguments: dict | None) -> BaseModel:
        try:
            return spec.args_model.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidArgumentsError(spec.name.value, describe_argument_errors(e))
