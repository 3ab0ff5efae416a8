"""Domain layer for auto-generated lists.

Contains categories, refresh intervals, list-kind keys and domain errors.
"""

from repairbeam.domain.exceptions import (
    CatalogListNotFoundError,
    DomainError,
    DuplicateListKindError,
    UnknownCategoryError,
)
from repairbeam.domain.value_objects import (
    DEFAULT_REFRESH_INTERVAL,
    Category,
    ListFreshness,
    RefreshInterval,
    add_months,
    brand_list_kind,
    is_brand_list_kind,
    model_list_kind,
)

__all__ = [
    # Exceptions
    "CatalogListNotFoundError",
    "DomainError",
    "DuplicateListKindError",
    "UnknownCategoryError",
    # Value objects
    "Category",
    "DEFAULT_REFRESH_INTERVAL",
    "ListFreshness",
    "RefreshInterval",
    "add_months",
    "brand_list_kind",
    "is_brand_list_kind",
    "model_list_kind",
]
