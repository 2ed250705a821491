"""HTTP middleware and exception handlers."""

import logging
from collections.abc import Callable
from typing import Any, cast

from fastapi import FastAPI, Request, Response, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from autodevelop_api.config import get_settings

logger = logging.getLogger(__name__)

METHOD_HINTS = {
    "/api/chat": "Only POST requests are accepted",
    "/api/pricing": "Only GET requests are supported",
}


def method_not_allowed_hint(path: str) -> str:
    """Hint naming the methods a route prefix accepts."""
    for prefix, hint in METHOD_HINTS.items():
        if path == prefix or path.startswith(prefix + "/"):
            return hint
    return "This method is not supported on this endpoint"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds browser hardening headers to every response."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
    }

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        response = cast(Response, await call_next(request))
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Render HTTP errors with the ``{error, hint}`` body used by the API."""
    headers = getattr(exc, "headers", None)

    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "Method not allowed",
                "hint": method_not_allowed_hint(request.url.path),
            },
            headers=headers,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and answer without leaking internals."""
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    message = (
        str(exc)
        if get_settings().debug
        else "Please try again later or contact support if the problem persists"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred", "message": message},
        # Rendered outside SecurityHeadersMiddleware
        headers=SecurityHeadersMiddleware.HEADERS,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the API exception handlers on an app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
