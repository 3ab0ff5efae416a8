"""Repair Beam lists API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from repairbeam.api.health import router as health_router
from repairbeam.api.lists import router as lists_router
from repairbeam.api.middleware import setup_middleware
from repairbeam.application.list_service import get_list_service
from repairbeam.application.scheduler import ListRefreshScheduler
from repairbeam.domain.exceptions import (
    CatalogListNotFoundError,
    DomainError,
    UnknownCategoryError,
)
from repairbeam.infrastructure.config import settings
from repairbeam.infrastructure.logging_conf import configure_logging

configure_logging(settings.log_level, json_output=settings.log_json)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting Repair Beam lists API",
        version=settings.api_version,
        debug=settings.debug,
    )

    scheduler = ListRefreshScheduler(
        get_list_service,
        enabled=settings.list_refresh_enabled,
        interval_seconds=settings.list_refresh_interval_hours * 3600,
        initial_delay_seconds=settings.list_refresh_initial_delay_seconds,
    )
    scheduler.start()
    app.state.list_refresh_scheduler = scheduler

    yield

    await scheduler.stop()
    logger.info("Shutting down Repair Beam lists API")


app = FastAPI(
    title="Repair Beam Lists API",
    description="AI-generated device brand and model catalogs",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware stack, see repairbeam.api.middleware
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(lists_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _error_body(
    request: Request,
    error_code: str,
    message: str,
    details: list | None = None,
) -> dict:
    return {
        "error_code": error_code,
        "message": message,
        "details": details or [],
        "request_id": getattr(request.state, "request_id", None),
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, error_code, message, details),
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Map domain errors to 4xx responses."""
    if isinstance(exc, UnknownCategoryError):
        status_code, error_code = status.HTTP_400_BAD_REQUEST, "UNKNOWN_CATEGORY"
    elif isinstance(exc, CatalogListNotFoundError):
        status_code, error_code = status.HTTP_404_NOT_FOUND, "LIST_NOT_FOUND"
    else:
        status_code, error_code = status.HTTP_409_CONFLICT, "CONFLICT"

    logger.info(
        "Domain error in handler",
        path=request.url.path,
        error_code=error_code,
        error=exc.message,
    )

    details = [{"field": k, "message": str(v)} for k, v in exc.details.items()]
    return JSONResponse(
        status_code=status_code,
        content=_error_body(request, error_code, exc.message, details),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "INTERNAL_ERROR", "An internal error occurred"),
    )
