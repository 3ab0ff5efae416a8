"""Auto-generated list API endpoints.

Exposes stored brand and model lists and the operations that
(re)generate them. Mutating endpoints trigger paid generation calls.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from repairbeam.api.schemas import (
    CatalogListCollectionResponse,
    CatalogListResponse,
    ErrorResponse,
    GenerateModelsResponse,
    InitializeListsResponse,
    RefreshExpiredResponse,
    UpdateBrandListResponse,
    ValidateBrandRequest,
    ValidateBrandResponse,
)
from repairbeam.application.list_service import ListGenerationService, get_list_service
from repairbeam.domain.value_objects import Category

router = APIRouter(prefix="/lists", tags=["Lists"])

ServiceDep = Annotated[ListGenerationService, Depends(get_list_service)]


# ============================================================================
# Reads
# ============================================================================


@router.get(
    "",
    response_model=CatalogListCollectionResponse,
    summary="List all catalog lists",
    description="Get every stored brand and model list.",
)
async def list_all(service: ServiceDep) -> CatalogListCollectionResponse:
    """List all stored lists."""
    lists = await service.list_all()
    now = service.now()
    return CatalogListCollectionResponse(
        lists=[CatalogListResponse.from_model(c, now) for c in lists],
        total=len(lists),
    )


@router.get(
    "/{category}",
    response_model=CatalogListResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Get brand list",
    description="Get the stored brand list of a device category.",
)
async def get_brand_list(category: str, service: ServiceDep) -> CatalogListResponse:
    """Get a category's brand list.

    Args:
        category: Device category (case-insensitive).
        service: List generation service.

    Returns:
        Brand list.

    Raises:
        HTTPException: If no brand list exists yet.
    """
    resolved = Category.parse(category)
    brand_list = await service.get_brand_list(resolved)

    if brand_list is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "LIST_NOT_FOUND",
                "message": f"No brand list for category: {resolved.value}",
            },
        )

    return CatalogListResponse.from_model(brand_list, service.now())


@router.get(
    "/{category}/{brand}/models",
    response_model=CatalogListResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Get model list",
    description="Get the stored model list of a brand within a device category.",
)
async def get_model_list(category: str, brand: str, service: ServiceDep) -> CatalogListResponse:
    """Get a brand's model list."""
    resolved = Category.parse(category)
    model_list = await service.get_model_list(resolved, brand)

    if model_list is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "LIST_NOT_FOUND",
                "message": f"No model list for {brand} {resolved.value}",
            },
        )

    return CatalogListResponse.from_model(model_list, service.now())


# ============================================================================
# Generation
# ============================================================================


@router.post(
    "/initialize",
    response_model=InitializeListsResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Initialize brand lists",
    description="Generate brand lists for every known category. Makes paid generation calls.",
)
async def initialize_lists(service: ServiceDep) -> InitializeListsResponse:
    """Generate or regenerate brand lists for all categories."""
    counts = await service.initialize_brand_lists()
    return InitializeListsResponse(
        message=f"Brand lists initialized for {len(counts)} categories",
        brands=counts,
    )


@router.post(
    "/refresh-expired",
    response_model=RefreshExpiredResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Refresh expired lists",
    description="Regenerate every brand list whose refresh time has passed.",
)
async def refresh_expired(service: ServiceDep) -> RefreshExpiredResponse:
    """Refresh all expired brand lists."""
    report = await service.refresh_expired_lists()
    return RefreshExpiredResponse(
        message=f"Refreshed {len(report.refreshed)} expired lists",
        refreshed=report.refreshed,
        failed=report.failed,
    )


@router.post(
    "/{category}/update",
    response_model=UpdateBrandListResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
    summary="Regenerate brand list",
    description="Force regeneration of a category's brand list. Makes a paid generation call.",
)
async def update_brand_list(category: str, service: ServiceDep) -> UpdateBrandListResponse:
    """Force a brand list refresh."""
    resolved = Category.parse(category)
    brand_list = await service.refresh_brand_list(resolved)
    return UpdateBrandListResponse(
        message=f"{resolved.value} brand list updated",
        brands=len(brand_list.items),
    )


@router.post(
    "/{category}/generate-models",
    response_model=GenerateModelsResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
    summary="Generate model lists",
    description=(
        "Regenerate model lists for every brand in the category and prune "
        "brands without models. Makes one paid generation call per five brands."
    ),
)
async def generate_models(category: str, service: ServiceDep) -> GenerateModelsResponse:
    """Run a full model sweep for a category."""
    resolved = Category.parse(category)
    sweep = await service.refresh_all_model_lists(resolved)

    if sweep is None:
        return GenerateModelsResponse(
            message=f"No brand list for {resolved.value}; generate brands first",
        )

    return GenerateModelsResponse(
        message=f"{resolved.value} model lists generated",
        active_brands=len(sweep.active_brands),
        excluded_brands=sweep.excluded_brands,
        fallback_brands=sweep.fallback_brands,
    )


@router.post(
    "/{category}/validate-brand",
    response_model=ValidateBrandResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Validate brand",
    description="Check a user-entered brand name, correct it and add it to the brand list.",
)
async def validate_brand(
    category: str,
    request: ValidateBrandRequest,
    service: ServiceDep,
) -> ValidateBrandResponse:
    """Validate and possibly add a brand."""
    resolved = Category.parse(category)
    result = await service.validate_and_add_brand(resolved, request.brand_name)
    return ValidateBrandResponse(
        is_valid=result.is_valid,
        corrected_name=result.corrected_name,
        added=result.added,
    )
