"""HTTP middleware for the lists API.

Three layers wrap every request, outermost first:
- RequestIdMiddleware tags the request, its log lines and the response
- PaidOperationAuthMiddleware demands the API key for calls that spend
  generation budget
- ErrorHandlerMiddleware turns escaped exceptions into the standard 500 body
"""

import secrets
import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from repairbeam.infrastructure.config import settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a response in the standard error body format."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": [],
            "request_id": request_id,
        },
        headers=headers,
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlates a request across logs and the response.

    Reuses the caller's ``X-Request-ID`` when present, otherwise mints a
    UUID. The ID is bound into structlog contextvars for the lifetime of
    the request, so service and generation-client log lines carry it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# API Key Middleware
# ============================================================================


# Always reachable without a key
OPEN_PATHS = frozenset({"/health", "/ready", "/docs", "/redoc", "/openapi.json"})

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def is_public_request(method: str, path: str) -> bool:
    """Check whether a request may skip API key authentication.

    Reading lists and validating a user-entered brand are open; every
    other list operation costs generation calls and needs the key.

    Args:
        method: HTTP method.
        path: Request path without trailing slash.

    Returns:
        True if no API key is needed.
    """
    if path in OPEN_PATHS or path.startswith(("/docs/", "/redoc/")):
        return True
    if path != "/lists" and not path.startswith("/lists/"):
        return False
    if method in SAFE_METHODS:
        return True
    return method == "POST" and path.endswith("/validate-brand")


class PaidOperationAuthMiddleware(BaseHTTPMiddleware):
    """Requires ``Authorization: Bearer <api_key>`` on paid list operations.

    Initialization, forced updates, model sweeps and expired refreshes
    each trigger provider calls, so they are closed to anonymous callers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path.rstrip("/") or "/"
        if is_public_request(request.method, path):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", None)
        challenge = {"WWW-Authenticate": "Bearer"}
        header = request.headers.get("Authorization")

        if not header:
            logger.warning("Missing authorization header", path=path, method=request.method)
            return error_response(
                status.HTTP_401_UNAUTHORIZED,
                "UNAUTHORIZED",
                "Missing Authorization header",
                request_id,
                challenge,
            )

        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            logger.warning("Invalid authorization format", path=path, method=request.method)
            return error_response(
                status.HTTP_401_UNAUTHORIZED,
                "UNAUTHORIZED",
                "Invalid Authorization header format. Use 'Bearer <api_key>'",
                request_id,
                challenge,
            )

        if not secrets.compare_digest(token.encode(), settings.repairbeam_api_key.encode()):
            logger.warning("Invalid API key", path=path, method=request.method)
            return error_response(
                status.HTTP_401_UNAUTHORIZED,
                "INVALID_API_KEY",
                "Invalid API key",
                request_id,
                challenge,
            )

        return await call_next(request)


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler for exceptions no route handler mapped."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
                getattr(request.state, "request_id", None),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware stack.

    Starlette runs the last-added middleware first, so layers are added
    innermost to outermost.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(PaidOperationAuthMiddleware)
    app.add_middleware(RequestIdMiddleware)
