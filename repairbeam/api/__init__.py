"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from repairbeam.api.health import router as health_router
from repairbeam.api.lists import router as lists_router

__all__ = [
    "health_router",
    "lists_router",
]
