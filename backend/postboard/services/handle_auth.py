"""Auth Handlers — the two public operations: login and createUser (2 methods).

Invariants:
    - login fails with the SAME 401 for unknown email and wrong password
    - createUser writes nothing until every field is valid (422 with all violations)
    - createUser rejects an already-registered email with 409 even when other fields are
      invalid, whether detected by the lookup or by the unique index at commit
    - The stored hash is never the plaintext and is never returned

Design Decisions:
    - bcrypt runs in the thread pool (run_in_threadpool): 12 rounds would otherwise
      block the event loop for every concurrent request
"""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError

from postboard.core.domain_types import Identity
from postboard.core.errors import (
    InputValidationError, NotAuthenticatedError, UserExistsError,
)
from postboard.core.repository_protocols import EntityStore
from postboard.core.validate_input import is_email, validate_user_input
from postboard.schemas.operations import (
    AuthData, CreateUserArgs, LoginArgs, UserOut,
)
from postboard.services.credentials import CredentialService

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "E-Mail or password is incorrect."


class AuthHandlers:
    """Registration and login."""

    def __init__(self, store: EntityStore, credentials: CredentialService):
        self.store = store
        self.credentials = credentials

    async def login(self, identity: Identity | None, args: LoginArgs) -> AuthData:
        user = await self.store.find_user_by_email(args.email)
        if user is None:
            raise NotAuthenticatedError(_BAD_CREDENTIALS)
        matches = await run_in_threadpool(
            self.credentials.verify_password, args.password, user.password_hash,
        )
        if not matches:
            raise NotAuthenticatedError(_BAD_CREDENTIALS)
        user_id = str(user.id)
        token = self.credentials.issue_token(user_id, user.email)
        logger.info("User logged in", extra={"user_id": user_id})
        return AuthData(token=token, user_id=user_id)

    async def create_user(
        self, identity: Identity | None, args: CreateUserArgs,
    ) -> UserOut:
        data = args.user_input
        violations = validate_user_input(data.email, data.password, data.name)
        # A taken email is a conflict whatever else is wrong with the input;
        # only well-formed emails are looked up, and nothing is written before this.
        if is_email(data.email) and await self.store.find_user_by_email(data.email):
            raise UserExistsError()
        if violations:
            raise InputValidationError(violations)

        password_hash = await run_in_threadpool(
            self.credentials.hash_password, data.password,
        )
        try:
            user = await self.store.insert_user(data.email, data.name, password_hash)
            await self.store.commit()
        except IntegrityError:
            # Lost a registration race: unique index on users.email fired.
            await self.store.rollback()
            raise UserExistsError()
        logger.info("User registered", extra={"user_id": str(user.id)})
        return UserOut.from_entity(user)
