"""List generation application service.

Produces, caches and refreshes AI-generated brand and model catalogs.
Provider calls are slow, cost money and can fail, so every operation
degrades to static fallback data instead of surfacing generation errors.
"""

import asyncio
import math
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from repairbeam.application import prompts
from repairbeam.application.locks import KeyedLock
from repairbeam.catalog.fallbacks import fallback_brands, fallback_models
from repairbeam.catalog.models import CatalogList
from repairbeam.catalog.repository import CatalogListRepository, CatalogStore
from repairbeam.domain.value_objects import (
    DEFAULT_REFRESH_INTERVAL,
    Category,
    brand_list_kind,
    model_list_kind,
)
from repairbeam.infrastructure.config import settings
from repairbeam.infrastructure.database import async_session_factory
from repairbeam.infrastructure.generation_client import (
    GeminiGenerationClient,
    GenerationError,
    TextGenerator,
)

logger = structlog.get_logger()


# ============================================================================
# Constants
# ============================================================================

MIN_BRANDS = 30
MAX_BRANDS = 40
MAX_MODELS_PER_BRAND = 40
MAX_MODELS_PER_BRAND_IN_BATCH = 30
MODEL_YEAR_WINDOW = 4
DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY_SECONDS = 0.5


# ============================================================================
# Name Helpers
# ============================================================================


def dedupe_names(names: Iterable[Any]) -> list[str]:
    """Drop blanks, non-strings and exact duplicates, keeping first-seen order.

    Duplicates are detected case-sensitively: "HP" and "Hp" are distinct.

    Args:
        names: Candidate names.

    Returns:
        Cleaned names.
    """
    seen: set[str] = set()
    cleaned: list[str] = []
    for name in names:
        if not isinstance(name, str):
            continue
        name = name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        cleaned.append(name)
    return cleaned


def sort_names(names: Iterable[Any]) -> list[str]:
    """Dedupe and sort names case-insensitively ascending."""
    return sorted(dedupe_names(names), key=lambda n: (n.casefold(), n))


def _category_name(category: Category | str) -> str:
    return category.value if isinstance(category, Category) else str(category)


def _clean_name_list(value: list[Any], label: str) -> list[str]:
    """Validate a provider name array and return its cleaned names.

    An empty array is a valid answer. Non-string entries, or a non-empty
    array with no usable name, mean the payload is malformed.
    """
    if any(not isinstance(entry, str) for entry in value):
        raise GenerationError(f"Response field '{label}' contains non-string entries")
    names = dedupe_names(value)
    if value and not names:
        raise GenerationError(f"Response field '{label}' contains no usable names")
    return names


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list):
        raise GenerationError(f"Response field '{key}' is missing or not a list")
    return _clean_name_list(value, key)


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class BrandGenerationResult:
    """Result of generating a category's brand names."""

    brands: list[str]
    category: str
    from_fallback: bool = False


@dataclass
class ModelGenerationResult:
    """Result of generating one brand's model names."""

    models: list[str]
    brand: str
    category: str
    from_fallback: bool = False


@dataclass
class BatchModelGenerationResult:
    """Result of generating model names for several brands."""

    category: str
    results: dict[str, list[str]] = field(default_factory=dict)
    failed_chunks: list[list[str]] = field(default_factory=list)
    # Answered chunks that left a brand out or gave it a malformed value
    unanswered_brands: list[str] = field(default_factory=list)

    @property
    def fallback_brands(self) -> list[str]:
        """Brands whose models came from the fallback table."""
        failed = [brand for chunk in self.failed_chunks for brand in chunk]
        return failed + self.unanswered_brands


@dataclass
class ModelSweepResult:
    """Outcome of regenerating every model list of a category."""

    category: str
    active_brands: list[str] = field(default_factory=list)
    excluded_brands: list[str] = field(default_factory=list)
    fallback_brands: list[str] = field(default_factory=list)
    failed_writes: list[str] = field(default_factory=list)
    brand_list_pruned: bool = False


@dataclass
class RefreshReport:
    """Outcome of refreshing every expired list."""

    refreshed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass
class BrandValidationResult:
    """Outcome of validating a user-entered brand name."""

    is_valid: bool
    corrected_name: str | None = None
    added: bool = False


# ============================================================================
# List Generation Service
# ============================================================================


class ListGenerationService:
    """Application service for AI-generated brand and model lists.

    Orchestrates:
    1. Brand list generation per category
    2. Model list generation per brand, singly or batched
    3. Full model sweeps that prune brands without models
    4. Refresh of lists whose cache lifetime has elapsed
    5. Validation of user-entered brand names

    Read-modify-write sequences on a list are serialized through a
    KeyedLock keyed by list kind.
    """

    def __init__(
        self,
        generator: TextGenerator,
        store: CatalogStore,
        locks: KeyedLock | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ) -> None:
        """Initialize service.

        Args:
            generator: Generation provider client.
            store: Catalog list store.
            locks: Per-list locks, shared between services touching the same store.
            clock: Returns the current time; defaults to UTC now.
            sleep: Awaitable used for the inter-chunk throttle.
            batch_size: Brands per batched generation request.
            batch_delay_seconds: Pause between batched requests.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.generator = generator
        self.store = store
        self.locks = locks or KeyedLock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds

    def now(self) -> datetime:
        """Current time as seen by this service.

        Freshness and refresh scheduling are both computed from this clock.
        """
        return self._clock()

    def _model_year_window(self) -> tuple[int, int]:
        end_year = self.now().year
        return end_year - MODEL_YEAR_WINDOW, end_year

    async def _generate(self, purpose: str, prompt: tuple[str, str]) -> dict[str, Any]:
        """Run one provider call, normalizing every failure to GenerationError."""
        system_prompt, user_prompt = prompt
        try:
            return await self.generator.generate_json(system_prompt, user_prompt)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(str(e) or type(e).__name__, purpose=purpose) from e

    # ------------------------------------------------------------------------
    # Brands
    # ------------------------------------------------------------------------

    async def generate_brands(self, category: Category | str) -> BrandGenerationResult:
        """Generate brand names for a category.

        Never raises on provider failure: falls back to the static
        brand table (empty for unknown categories).

        Args:
            category: Device category.

        Returns:
            Brand names sorted case-insensitively.
        """
        name = _category_name(category)
        logger.info("Requesting brand list generation", category=name)

        try:
            data = await self._generate(
                "brands", prompts.brand_list_prompt(name, MIN_BRANDS, MAX_BRANDS)
            )
            brands = sort_names(_string_list(data, "brands"))
        except GenerationError as e:
            logger.warning(
                "Brand generation failed, using fallback list",
                category=name,
                error=str(e),
            )
            return BrandGenerationResult(
                brands=sort_names(fallback_brands(name)),
                category=name,
                from_fallback=True,
            )

        return BrandGenerationResult(brands=brands, category=name)

    async def refresh_brand_list(self, category: Category | str) -> CatalogList:
        """Regenerate and persist a category's brand list.

        Every call issues a new generation request; callers gate cost
        through ``next_refresh_at``.

        Args:
            category: Device category.

        Returns:
            The created or updated brand list.
        """
        name = _category_name(category)
        async with self.locks.hold(brand_list_kind(name)):
            existing = await self.store.get_brand_list(name)
            result = await self.generate_brands(name)
            return await self._save_brand_list(name, existing, result.brands)

    async def _save_brand_list(
        self,
        category: str,
        existing: CatalogList | None,
        brands: Sequence[str],
    ) -> CatalogList:
        """Persist regenerated brand names, honoring exclusions.

        Caller must hold the brand list lock.
        """
        now = self.now()
        brands = sort_names(brands)

        if existing is None:
            catalog_list = CatalogList.create(
                list_kind=brand_list_kind(category),
                category=category,
                items=brands,
                generated_at=now,
                refresh_interval=DEFAULT_REFRESH_INTERVAL,
            )
            await self.store.create(catalog_list)
            logger.info(
                "Created brand list",
                category=category,
                brand_count=len(brands),
            )
            return catalog_list

        excluded = set(existing.excluded_items or [])
        kept = [b for b in brands if b not in excluded]
        if len(kept) != len(brands):
            logger.info(
                "Suppressed brands without models",
                category=category,
                suppressed=[b for b in brands if b in excluded],
            )

        interval = existing.interval
        updated = await self.store.update(
            existing.id,
            items=kept,
            last_generated_at=now,
            next_refresh_at=interval.next_refresh_from(now),
        )
        logger.info(
            "Updated brand list",
            category=category,
            brand_count=len(kept),
            excluded_count=len(brands) - len(kept),
            refresh_interval=interval.value,
        )
        return updated

    async def initialize_brand_lists(self) -> dict[str, int]:
        """Generate brand lists for every known category.

        A failure on one category is logged and the rest still run.

        Returns:
            Brand count per successfully refreshed category.
        """
        logger.warning(
            "Cost warning: generating brand lists for all categories",
            provider_calls=len(Category),
        )
        counts: dict[str, int] = {}
        for category in Category:
            try:
                catalog_list = await self.refresh_brand_list(category)
            except Exception:
                logger.exception(
                    "Failed to initialize brand list",
                    category=category.value,
                )
                continue
            counts[category.value] = len(catalog_list.items)
        return counts

    # ------------------------------------------------------------------------
    # Models
    # ------------------------------------------------------------------------

    async def generate_models_for_brand(
        self,
        category: Category | str,
        brand: str,
    ) -> ModelGenerationResult:
        """Generate model names for one brand.

        Covers a rolling window of the last four years, newest first.
        An empty successful result means the brand has no models for the
        category; provider failures fall back to the static table or
        numbered placeholders and are never empty.

        Args:
            category: Device category.
            brand: Brand name.

        Returns:
            At most 40 model names in provider order.
        """
        name = _category_name(category)
        start_year, end_year = self._model_year_window()

        try:
            data = await self._generate(
                "models",
                prompts.model_list_prompt(
                    name, brand, start_year, end_year, MAX_MODELS_PER_BRAND
                ),
            )
            models = _string_list(data, "models")[:MAX_MODELS_PER_BRAND]
        except GenerationError as e:
            logger.warning(
                "Model generation failed, using fallback list",
                category=name,
                brand=brand,
                error=str(e),
            )
            return ModelGenerationResult(
                models=fallback_models(name, brand)[:MAX_MODELS_PER_BRAND],
                brand=brand,
                category=name,
                from_fallback=True,
            )

        return ModelGenerationResult(models=models, brand=brand, category=name)

    async def generate_models_batched(
        self,
        category: Category | str,
        brands: Sequence[str],
    ) -> BatchModelGenerationResult:
        """Generate model names for many brands with one request per chunk.

        Best effort: a failed chunk gives each of its brands the static
        fallback list and processing continues with the next chunk. The
        result always has exactly one entry per distinct input brand.

        Args:
            category: Device category.
            brands: Brand names.

        Returns:
            Model names per brand, each truncated to 30.
        """
        name = _category_name(category)
        unique_brands = dedupe_names(brands)
        chunks = [
            unique_brands[i : i + self.batch_size]
            for i in range(0, len(unique_brands), self.batch_size)
        ]
        start_year, end_year = self._model_year_window()
        batch = BatchModelGenerationResult(category=name)

        logger.info(
            "Starting batched model generation",
            category=name,
            brand_count=len(unique_brands),
            chunk_count=len(chunks),
        )

        for index, chunk in enumerate(chunks):
            if index > 0 and self.batch_delay_seconds > 0:
                await self._sleep(self.batch_delay_seconds)

            try:
                data = await self._generate(
                    "batch_models",
                    prompts.batch_model_list_prompt(
                        name, chunk, start_year, end_year, MAX_MODELS_PER_BRAND_IN_BATCH
                    ),
                )
            except GenerationError as e:
                logger.warning(
                    "Batch chunk failed, using fallback lists",
                    category=name,
                    chunk_index=index,
                    brands=chunk,
                    error=str(e),
                )
                batch.failed_chunks.append(list(chunk))
                for brand in chunk:
                    if brand not in batch.results:
                        batch.results[brand] = fallback_models(name, brand)[
                            :MAX_MODELS_PER_BRAND_IN_BATCH
                        ]
                continue

            for brand in chunk:
                models = self._models_from_batch(data, brand)
                if models is None:
                    logger.warning(
                        "Brand missing or malformed in batch response, using fallback list",
                        category=name,
                        brand=brand,
                    )
                    models = fallback_models(name, brand)
                    batch.unanswered_brands.append(brand)
                batch.results[brand] = models[:MAX_MODELS_PER_BRAND_IN_BATCH]

        logger.info(
            "Batched model generation completed",
            category=name,
            brand_count=len(batch.results),
            failed_chunks=len(batch.failed_chunks),
        )
        return batch

    @staticmethod
    def _models_from_batch(data: dict[str, Any], brand: str) -> list[str] | None:
        """Pick one brand's models out of a batch response.

        Matches the brand key exactly first, then case-insensitively.
        Returns None when the brand is absent or its value is not a
        well-formed name array.
        """
        value = data.get(brand)
        if value is None:
            folded = brand.casefold()
            for key, candidate in data.items():
                if isinstance(key, str) and key.strip().casefold() == folded:
                    value = candidate
                    break
        if not isinstance(value, list):
            return None
        try:
            return _clean_name_list(value, brand)
        except GenerationError:
            return None

    async def refresh_all_model_lists(self, category: Category | str) -> ModelSweepResult | None:
        """Regenerate every model list of a category and prune its brand list.

        Brands whose batch result is empty are dropped from the brand
        list and added to its exclusions; every other brand gets its
        model list created or replaced. Does nothing when the category
        has no brand list yet.

        Args:
            category: Device category.

        Returns:
            Sweep outcome, or None when there was no brand list to sweep.
        """
        name = _category_name(category)

        async with self.locks.hold(brand_list_kind(name)):
            brand_list = await self.store.get_brand_list(name)
            if brand_list is None or not brand_list.items:
                logger.warning(
                    "No brand list to generate models for; generate brands first",
                    category=name,
                )
                return None

            brands = list(brand_list.items)
            logger.warning(
                "Cost warning: starting model list generation",
                category=name,
                brand_count=len(brands),
                provider_calls=math.ceil(len(dedupe_names(brands)) / self.batch_size),
            )

            batch = await self.generate_models_batched(name, brands)
            sweep = ModelSweepResult(category=name, fallback_brands=batch.fallback_brands)

            for brand in dedupe_names(brands):
                models = batch.results.get(brand, [])
                if not models:
                    logger.info("Brand has no models, excluding", category=name, brand=brand)
                    sweep.excluded_brands.append(brand)
                    continue

                sweep.active_brands.append(brand)
                try:
                    await self._save_model_list(name, brand, models)
                except Exception:
                    logger.exception(
                        "Failed to save model list",
                        category=name,
                        brand=brand,
                    )
                    sweep.failed_writes.append(brand)

            if sweep.excluded_brands or len(sweep.active_brands) != len(brands):
                excluded = dedupe_names(
                    [*(brand_list.excluded_items or []), *sweep.excluded_brands]
                )
                await self.store.update(
                    brand_list.id,
                    items=list(sweep.active_brands),
                    excluded_items=excluded,
                )
                sweep.brand_list_pruned = True
                logger.info(
                    "Pruned brand list",
                    category=name,
                    active_brands=len(sweep.active_brands),
                    newly_excluded=sweep.excluded_brands,
                    excluded_total=len(excluded),
                )

        logger.info(
            "Model list generation completed",
            category=name,
            active_brands=len(sweep.active_brands),
            excluded_brands=len(sweep.excluded_brands),
            fallback_brands=len(sweep.fallback_brands),
        )
        return sweep

    async def _save_model_list(self, category: str, brand: str, models: list[str]) -> CatalogList:
        """Create or replace one brand's model list."""
        list_kind = model_list_kind(category, brand)
        async with self.locks.hold(list_kind):
            now = self.now()
            existing = await self.store.get_by_list_kind(list_kind)

            if existing is None:
                catalog_list = CatalogList.create(
                    list_kind=list_kind,
                    category=category,
                    brand=brand,
                    items=models,
                    generated_at=now,
                    refresh_interval=DEFAULT_REFRESH_INTERVAL,
                )
                await self.store.create(catalog_list)
                logger.debug("Created model list", list_kind=list_kind, model_count=len(models))
                return catalog_list

            updated = await self.store.update(
                existing.id,
                items=list(models),
                last_generated_at=now,
                next_refresh_at=existing.interval.next_refresh_from(now),
            )
            logger.debug("Updated model list", list_kind=list_kind, model_count=len(models))
            return updated

    # ------------------------------------------------------------------------
    # Scheduled Maintenance
    # ------------------------------------------------------------------------

    async def refresh_expired_lists(self, now: datetime | None = None) -> RefreshReport:
        """Regenerate every brand list whose cache lifetime has elapsed.

        Each list keeps its own refresh interval. A failure on one list
        is logged and the remaining lists are still processed.

        Args:
            now: Reference time; defaults to the service clock.

        Returns:
            List kinds refreshed and failed.
        """
        now = now or self.now()
        report = RefreshReport()
        due = await self.store.get_due_for_refresh(now)

        if not due:
            logger.info("No expired lists found")
            return report

        logger.warning(
            "Cost warning: refreshing expired lists",
            list_count=len(due),
            provider_calls=len(due),
        )

        for catalog_list in due:
            try:
                async with self.locks.hold(catalog_list.list_kind):
                    # Re-read under the lock in case a manual refresh just ran
                    current = await self.store.get_by_list_kind(catalog_list.list_kind)
                    if current is None or not current.is_due(now):
                        continue
                    result = await self.generate_brands(current.category)
                    await self._save_brand_list(current.category, current, result.brands)
            except Exception:
                logger.exception(
                    "Failed to refresh expired list",
                    list_kind=catalog_list.list_kind,
                )
                report.failed.append(catalog_list.list_kind)
                continue
            report.refreshed.append(catalog_list.list_kind)

        logger.info(
            "Expired list refresh completed",
            refreshed=len(report.refreshed),
            failed=len(report.failed),
        )
        return report

    # ------------------------------------------------------------------------
    # Brand Validation
    # ------------------------------------------------------------------------

    async def validate_and_add_brand(
        self,
        category: Category | str,
        raw_brand_name: str,
    ) -> BrandValidationResult:
        """Validate a user-entered brand and add it to the brand list.

        If the provider is unavailable the input is accepted unchanged
        (but not added) so the user is never blocked.

        Args:
            category: Device category.
            raw_brand_name: Brand name as typed by the user.

        Returns:
            Validation outcome with the canonical name when valid.
        """
        name = _category_name(category)
        clean = (raw_brand_name or "").strip()
        if not clean:
            return BrandValidationResult(is_valid=False)

        logger.info("Validating brand", category=name, brand=clean)
        try:
            data = await self._generate(
                "validate_brand", prompts.brand_validation_prompt(name, clean)
            )
        except GenerationError as e:
            logger.warning(
                "Brand validation unavailable, accepting input as-is",
                category=name,
                brand=raw_brand_name,
                error=str(e),
            )
            return BrandValidationResult(is_valid=True, corrected_name=raw_brand_name)

        corrected = data.get("correctedName")
        corrected = corrected.strip() if isinstance(corrected, str) else ""
        if data.get("isValid") is not True or not corrected:
            return BrandValidationResult(is_valid=False)

        async with self.locks.hold(brand_list_kind(name)):
            brand_list = await self.store.get_brand_list(name)
            if brand_list is None or corrected in (brand_list.items or []):
                return BrandValidationResult(is_valid=True, corrected_name=corrected)

            await self.store.update(
                brand_list.id,
                items=sort_names([*brand_list.items, corrected]),
            )

        logger.info("Added brand to list", category=name, brand=corrected)
        return BrandValidationResult(is_valid=True, corrected_name=corrected, added=True)

    # ------------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------------

    async def get_brand_list(self, category: Category | str) -> CatalogList | None:
        """Get a category's stored brand list."""
        return await self.store.get_brand_list(_category_name(category))

    async def get_model_list(self, category: Category | str, brand: str) -> CatalogList | None:
        """Get a brand's stored model list."""
        return await self.store.get_by_list_kind(model_list_kind(_category_name(category), brand))

    async def list_all(self) -> Sequence[CatalogList]:
        """Get every stored list."""
        return await self.store.list_all()


# Global service instance
_list_service: ListGenerationService | None = None


def get_list_service() -> ListGenerationService:
    """Get the list generation service singleton.

    Wires the Gemini client and the SQLAlchemy store from settings.

    Returns:
        ListGenerationService instance.
    """
    global _list_service
    if _list_service is None:
        _list_service = ListGenerationService(
            generator=GeminiGenerationClient(
                api_key=settings.gemini_api_key,
                model_name=settings.gemini_model,
                timeout=settings.generation_timeout_seconds,
            ),
            store=CatalogListRepository(async_session_factory),
            batch_size=settings.generation_batch_size,
            batch_delay_seconds=settings.generation_batch_delay_seconds,
        )
    return _list_service
