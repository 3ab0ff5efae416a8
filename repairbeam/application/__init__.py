"""Application layer.

Services that orchestrate list generation, persistence and refresh.
"""

from repairbeam.application.list_service import (
    BatchModelGenerationResult,
    BrandGenerationResult,
    BrandValidationResult,
    ListGenerationService,
    ModelGenerationResult,
    ModelSweepResult,
    RefreshReport,
    get_list_service,
)
from repairbeam.application.locks import KeyedLock
from repairbeam.application.scheduler import ListRefreshScheduler

__all__ = [
    "BatchModelGenerationResult",
    "BrandGenerationResult",
    "BrandValidationResult",
    "KeyedLock",
    "ListGenerationService",
    "ListRefreshScheduler",
    "ModelGenerationResult",
    "ModelSweepResult",
    "RefreshReport",
    "get_list_service",
]
