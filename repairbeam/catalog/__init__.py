"""Catalog list storage.

Provides the CatalogList model, store implementations and the static
fallback tables used when generation is unavailable.
"""

from repairbeam.catalog.fallbacks import fallback_brands, fallback_models
from repairbeam.catalog.models import CatalogList
from repairbeam.catalog.repository import (
    CatalogListRepository,
    CatalogStore,
    InMemoryCatalogStore,
)

__all__ = [
    # Models
    "CatalogList",
    # Stores
    "CatalogListRepository",
    "CatalogStore",
    "InMemoryCatalogStore",
    # Fallbacks
    "fallback_brands",
    "fallback_models",
]
