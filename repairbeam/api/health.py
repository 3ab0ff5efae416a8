"""Health check endpoints.

``/health`` is a liveness check and never touches storage. ``/ready``
reads the catalog store so a load balancer stops routing traffic while
the database is unreachable.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from repairbeam.api.schemas import ErrorResponse
from repairbeam.application.list_service import ListGenerationService, get_list_service
from repairbeam.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter()

SERVICE_NAME = "repairbeam-lists-api"


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response with the number of stored lists."""

    status: str
    stored_lists: int


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the process is up."""
    return HealthResponse(status="healthy", service=SERVICE_NAME, version=settings.api_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ErrorResponse}},
)
async def readiness_check(
    service: Annotated[ListGenerationService, Depends(get_list_service)],
) -> ReadinessResponse:
    """Check that the catalog store answers queries.

    Raises:
        HTTPException: 503 if the store cannot be read.
    """
    try:
        lists = await service.list_all()
    except Exception as e:
        logger.warning("Readiness check failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error_code": "NOT_READY",
                "message": "Catalog store is unavailable",
            },
        ) from e

    return ReadinessResponse(status="ready", stored_lists=len(lists))
