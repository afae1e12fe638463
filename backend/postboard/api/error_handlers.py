"""Error Handlers — global exception handlers for the Postboard API.

Invariants:
    - PostboardError → its own http_status and {"errors": [{message, status, data?}]}
    - RequestValidationError → 400 with one {message} per malformed request field
    - Exception (catch-all) → 500, logged with traceback, never leaks internal details
    - Every body uses the same {"errors": [...]} envelope

Design Decisions:
    - Three-layer handler: domain (PostboardError), validation (Pydantic), catch-all (Exception)
    - The boundary performs no translation: status and data come from the raised error
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from postboard.core.errors import ErrorSeverity, PostboardError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_postboard_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_postboard_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(PostboardError)
    async def postboard_error_handler(request: Request, exc: PostboardError):
        """Handle all Postboard domain/infrastructure errors."""
        log = logger.error if exc.severity == ErrorSeverity.CRITICAL else logger.info
        log(
            f"PostboardError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "status": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic request validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle malformed request bodies."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "errors": [
                    {
                        "message": "An unexpected error occurred",
                        "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
                    },
                ],
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured request validation error response."""
    return {
        "errors": [
            {
                "message": "Invalid request data",
                "status": status.HTTP_400_BAD_REQUEST,
                "data": [
                    {
                        "message": (
                            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
                        ),
                    }
                    for e in exc.errors()
                ],
            },
        ],
    }
