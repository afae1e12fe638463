"""Error Hierarchy — typed, categorized exceptions for every Postboard failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the HTTP status it surfaces as; the boundary never re-maps it
    - data is either None or a list of {"message": str} records
    - to_response() produces the caller-facing envelope {message, status, data?}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with PostboardError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - UserExistsError is 409 CONFLICT, not an unclassified 500
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class PostboardError(Exception):
    """Base exception for all Postboard errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        data: list[dict] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.data = data

    def to_envelope(self) -> dict:
        """Single error record: {message, status, data?}."""
        envelope = {"message": self.message, "status": self.http_status}
        if self.data is not None:
            envelope["data"] = self.data
        return envelope

    def to_response(self) -> dict:
        """Convert to the response body returned by both endpoints."""
        return {"errors": [self.to_envelope()]}


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(PostboardError):
    """One or more input fields violated their rules. Carries every violation."""
    def __init__(self, violations: list[dict], context: ErrorContext | None = None):
        super().__init__(
            "Invalid input.", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 422, list(violations),
        )


class NotAuthenticatedError(PostboardError):
    """Caller presented no identity, or one that no longer resolves."""
    def __init__(
        self, message: str = "Not authenticated!", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.UNAUTHENTICATED,
            ErrorSeverity.WARNING, context, 401,
        )


class NotAuthorizedError(PostboardError):
    """Caller is authenticated but does not own the target resource."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not authorized!", "FORBIDDEN", ErrorCategory.FORBIDDEN,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(PostboardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UserExistsError(PostboardError):
    """Registration attempted with an email that is already registered."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User exists already!", "USER_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class UnknownOperationError(PostboardError):
    """Operation name is not in the dispatch table."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Operation '{operation}' does not exist.",
            "UNKNOWN_OPERATION", ErrorCategory.BAD_REQUEST,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidArgumentsError(PostboardError):
    """Arguments do not match the operation's declared shape."""
    def __init__(
        self, operation: str, problems: list[dict], context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Invalid arguments for '{operation}'.",
            "INVALID_ARGUMENTS", ErrorCategory.BAD_REQUEST,
            ErrorSeverity.ERROR, context, 400, list(problems),
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(PostboardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
