"""Global exception handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from verity.core.errors import UnauthenticatedError, VerityError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(VerityError)
    async def verity_error_handler(request: Request, exc: VerityError):
        """Turn domain errors into their HTTP status and error envelope."""
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

        headers = None
        if isinstance(exc, UnauthenticatedError):
            headers = {"WWW-Authenticate": "Bearer"}

        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
        )
