"""Credential Service — password hashing and signed identity tokens.

Invariants:
    - Password hashes are bcrypt with a fresh salt per call; the plaintext is never stored
    - verify_password never raises on a malformed or foreign hash — it returns False
    - Tokens are JWTs carrying sub (user id), email, iat and exp = iat + ttl
    - verify_token returns None for ANY failure (missing, malformed, bad signature,
      expired, missing subject) — callers treat None as "unauthenticated"

Design Decisions:
    - passlib CryptContext over raw bcrypt: scheme upgrades stay a config change
    - python-jose for JWT: exp is validated during decode, JWTError covers every failure
    - Secret, algorithm, ttl and rounds injected from Settings, never module constants
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext

from postboard.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Verified token payload."""
    user_id: str
    email: str | None
    issued_at: datetime
    expires_at: datetime


class CredentialService:
    """Hashes passwords and issues/verifies identity tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 3600,
        bcrypt_rounds: int = 12,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds)
        self._pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=bcrypt_rounds,
        )

    # --- Passwords ------------------------------------------------------------

    def hash_password(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str | None) -> bool:
        if not password_hash:
            return False
        try:
            return self._pwd_context.verify(password, password_hash)
        except (ValueError, TypeError) as e:
            logger.warning(f"Unverifiable password hash: {e}")
            return False

    # --- Tokens ---------------------------------------------------------------

    def issue_token(
        self, user_id: str, email: str | None = None, now: datetime | None = None,
    ) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: str | None) -> TokenClaims | None:
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            return None
        user_id = payload.get("sub")
        if not user_id or "exp" not in payload:
            return None
        try:
            issued_at = datetime.fromtimestamp(int(payload.get("iat", 0)), timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None
        return TokenClaims(
            user_id=str(user_id),
            email=payload.get("email"),
            issued_at=issued_at,
            expires_at=expires_at,
        )


@lru_cache
def get_credentials() -> CredentialService:
    """FastAPI dependency — one CredentialService per process, built from Settings."""
    settings = get_settings()
    return CredentialService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
