"""
Error types and the global error handler for the FEPRO API.

GraphQL resolvers raise DomainError subclasses; graphql-core copies the
error's ``extensions`` into the response, so clients see the code and
details next to the message. Plain routes fall back to a JSON envelope.
Never exposes internal details to clients.
"""
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger("fepro.api.errors")


class DomainError(Exception):
    """Base class for domain-level errors."""
    status_code: int = 400
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def extensions(self) -> dict:
        """GraphQL error extensions: the error code plus any details."""
        extensions = {"code": self.error_code}
        if self.details:
            extensions["details"] = self.details
        return extensions


class InvalidIdentifierError(DomainError):
    """Identifier is not a valid UUID."""
    status_code = 422
    error_code = "INVALID_ID"


def _error_body(code: str, message: str, details: dict | None = None) -> dict:
    return {"error": {"code": code, "message": message, "details": details or None}}


def register_error_handlers(app: FastAPI) -> None:
    """Register the catch-all exception handler on the FastAPI app."""

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_error",
            error_type=type(exc).__name__,
            error=str(exc),
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )
