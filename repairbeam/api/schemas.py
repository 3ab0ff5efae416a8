"""API schemas for the lists API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from repairbeam.catalog.models import CatalogList


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Catalog List Schemas
# ============================================================================


class CatalogListResponse(BaseModel):
    """A stored brand or model list."""

    id: str = Field(..., description="List identifier")
    list_kind: str = Field(..., description="List key, e.g. 'brands:Phone' or 'models:Phone:Apple'")
    category: str = Field(..., description="Device category")
    brand: str | None = Field(default=None, description="Brand, for model lists")
    items: list[str] = Field(default_factory=list, description="Brand or model names")
    excluded_items: list[str] = Field(
        default_factory=list, description="Brands confirmed to have no models"
    )
    refresh_interval: str = Field(..., description="weekly, biweekly, monthly or quarterly")
    last_generated_at: datetime = Field(..., description="Last successful generation")
    next_refresh_at: datetime = Field(..., description="When the list becomes stale")
    freshness: str = Field(..., description="fresh, stale or pruned")
    is_active: bool = Field(..., description="Whether the list is enabled")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, catalog_list: CatalogList, now: datetime) -> "CatalogListResponse":
        """Build a response from a stored list."""
        return cls(
            **catalog_list.to_dict(),
            freshness=catalog_list.freshness(now).value,
        )


class CatalogListCollectionResponse(BaseModel):
    """All stored lists."""

    lists: list[CatalogListResponse]
    total: int


class InitializeListsResponse(BaseModel):
    """Response of brand list initialization."""

    message: str
    brands: dict[str, int] = Field(
        default_factory=dict, description="Brand count per initialized category"
    )


class UpdateBrandListResponse(BaseModel):
    """Response of a forced brand list refresh."""

    message: str
    brands: int = Field(..., description="Number of brands in the refreshed list")


class GenerateModelsResponse(BaseModel):
    """Response of a model list sweep."""

    message: str
    active_brands: int = Field(default=0, description="Brands with a model list")
    excluded_brands: list[str] = Field(
        default_factory=list, description="Brands excluded in this sweep"
    )
    fallback_brands: list[str] = Field(
        default_factory=list, description="Brands that received fallback models"
    )


class RefreshExpiredResponse(BaseModel):
    """Response of an expired list refresh."""

    message: str
    refreshed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)


class ValidateBrandRequest(BaseModel):
    """Request to validate a user-entered brand."""

    model_config = ConfigDict(populate_by_name=True)

    brand_name: str = Field(
        ...,
        alias="brandName",
        max_length=200,
        description="Brand name as typed by the user",
    )


class ValidateBrandResponse(BaseModel):
    """Outcome of brand validation."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    corrected_name: str | None = Field(default=None, alias="correctedName")
    added: bool = False
