"""Catalog list storage.

Defines the store contract the list generation service depends on and
provides a SQLAlchemy implementation plus an in-memory one for tests
and local runs.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from repairbeam.catalog.models import CatalogList, utc_now
from repairbeam.domain.exceptions import CatalogListNotFoundError, DuplicateListKindError
from repairbeam.domain.value_objects import (
    BRAND_LIST_PREFIX,
    Category,
    brand_list_kind,
    is_brand_list_kind,
)

# Fields a caller may replace through update()
UPDATABLE_FIELDS = frozenset(
    {
        "items",
        "excluded_items",
        "refresh_interval",
        "last_generated_at",
        "next_refresh_at",
        "is_active",
    }
)


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update catalog list fields: {sorted(unknown)}")


class CatalogStore(Protocol):
    """Persistence contract consumed by the list generation service."""

    async def get_brand_list(self, category: Category | str) -> CatalogList | None:
        """Get a category's brand list."""
        ...

    async def get_by_list_kind(self, list_kind: str) -> CatalogList | None:
        """Get a list by its exact list kind."""
        ...

    async def create(self, catalog_list: CatalogList) -> CatalogList:
        """Persist a new list."""
        ...

    async def update(self, list_id: str, **fields: Any) -> CatalogList:
        """Replace fields of an existing list, bumping ``updated_at``."""
        ...

    async def get_due_for_refresh(self, now: datetime) -> Sequence[CatalogList]:
        """Get active brand lists whose ``next_refresh_at`` has passed."""
        ...

    async def list_all(self) -> Sequence[CatalogList]:
        """Get every stored list."""
        ...


class CatalogListRepository:
    """SQLAlchemy-backed catalog store.

    Each call runs in its own session and transaction, so a long
    generation sweep commits every list as soon as it is written and a
    failure on one write leaves earlier writes intact.

    Example usage:
        repo = CatalogListRepository(async_session_factory)
        brand_list = await repo.get_brand_list("Phone")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: Async SQLAlchemy session factory.
        """
        self._session_factory = session_factory

    async def get_brand_list(self, category: Category | str) -> CatalogList | None:
        """Get a category's brand list.

        Args:
            category: Device category.

        Returns:
            Brand list if found, None otherwise.
        """
        return await self.get_by_list_kind(brand_list_kind(category))

    async def get_by_list_kind(self, list_kind: str) -> CatalogList | None:
        """Get a list by list kind.

        Args:
            list_kind: Exact list kind.

        Returns:
            CatalogList if found, None otherwise.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(CatalogList).where(CatalogList.list_kind == list_kind)
            )
            return result.scalar_one_or_none()

    async def create(self, catalog_list: CatalogList) -> CatalogList:
        """Persist a new list.

        Args:
            catalog_list: List to save.

        Returns:
            Saved list.

        Raises:
            DuplicateListKindError: If the list kind already exists.
        """
        async with self._session_factory() as session:
            session.add(catalog_list)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateListKindError(catalog_list.list_kind) from e
        return catalog_list

    async def update(self, list_id: str, **fields: Any) -> CatalogList:
        """Replace fields of an existing list.

        Args:
            list_id: List ID.
            **fields: Column values to set.

        Returns:
            Updated list.

        Raises:
            CatalogListNotFoundError: If no list has this ID.
            ValueError: If a field is not updatable.
        """
        _check_fields(fields)
        async with self._session_factory() as session:
            async with session.begin():
                catalog_list = await session.get(CatalogList, list_id)
                if catalog_list is None:
                    raise CatalogListNotFoundError(list_id)
                for name, value in fields.items():
                    setattr(catalog_list, name, value)
                catalog_list.updated_at = utc_now()
        return catalog_list

    async def get_due_for_refresh(self, now: datetime) -> Sequence[CatalogList]:
        """Get active brand lists due for regeneration.

        Args:
            now: Current time.

        Returns:
            Due brand lists ordered by ``next_refresh_at``.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(CatalogList)
                .where(
                    CatalogList.is_active.is_(True),
                    CatalogList.list_kind.startswith(f"{BRAND_LIST_PREFIX}:"),
                    CatalogList.next_refresh_at <= now,
                )
                .order_by(CatalogList.next_refresh_at.asc())
            )
            return result.scalars().all()

    async def list_all(self) -> Sequence[CatalogList]:
        """Get every stored list ordered by list kind."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(CatalogList).order_by(CatalogList.list_kind)
            )
            return result.scalars().all()


class InMemoryCatalogStore:
    """In-memory catalog store with the same contract as the repository."""

    def __init__(self) -> None:
        self._lists: dict[str, CatalogList] = {}

    async def get_brand_list(self, category: Category | str) -> CatalogList | None:
        """Get a category's brand list."""
        return await self.get_by_list_kind(brand_list_kind(category))

    async def get_by_list_kind(self, list_kind: str) -> CatalogList | None:
        """Get a list by list kind."""
        for catalog_list in self._lists.values():
            if catalog_list.list_kind == list_kind:
                return catalog_list
        return None

    async def create(self, catalog_list: CatalogList) -> CatalogList:
        """Save a new list."""
        if await self.get_by_list_kind(catalog_list.list_kind) is not None:
            raise DuplicateListKindError(catalog_list.list_kind)
        self._lists[catalog_list.id] = catalog_list
        return catalog_list

    async def update(self, list_id: str, **fields: Any) -> CatalogList:
        """Replace fields of an existing list."""
        _check_fields(fields)
        catalog_list = self._lists.get(list_id)
        if catalog_list is None:
            raise CatalogListNotFoundError(list_id)
        for name, value in fields.items():
            if isinstance(value, list):
                value = list(value)
            setattr(catalog_list, name, value)
        catalog_list.updated_at = utc_now()
        return catalog_list

    async def get_due_for_refresh(self, now: datetime) -> Sequence[CatalogList]:
        """Get active brand lists due for regeneration."""
        due = [
            c
            for c in self._lists.values()
            if c.is_active and is_brand_list_kind(c.list_kind) and c.is_due(now)
        ]
        due.sort(key=lambda c: c.next_refresh_at)
        return due

    async def list_all(self) -> Sequence[CatalogList]:
        """Get every stored list."""
        return sorted(self._lists.values(), key=lambda c: c.list_kind)
