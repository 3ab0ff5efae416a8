"""SQLAlchemy models for cached catalog lists.

Defines the CatalogList table that stores AI-generated brand and model lists.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from repairbeam.domain.value_objects import (
    DEFAULT_REFRESH_INTERVAL,
    ListFreshness,
    RefreshInterval,
    is_brand_list_kind,
)
from repairbeam.infrastructure.database import Base


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class CatalogList(Base):
    """A cached, AI-produced list of brand or model names.

    Brand lists are keyed by category alone; model lists by the
    (category, brand) pair. Rows are updated in place on every
    regeneration and never hard-deleted.

    Attributes:
        id: Unique list identifier (UUID string).
        list_kind: ``"brands:<category>"`` or ``"models:<category>:<brand>"``.
        category: Device category (Phone, Laptop, Desktop).
        brand: Brand name, only set for model lists.
        items: Ordered brand or model names.
        excluded_items: Brands confirmed to have no models (brand lists only).
        refresh_interval: Cache lifetime (weekly, biweekly, monthly, quarterly).
        last_generated_at: Timestamp of last successful generation.
        next_refresh_at: Timestamp after which the list is stale.
        is_active: Soft-delete flag.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "catalog_lists"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    list_kind: Mapped[str] = mapped_column(String(300), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    items: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    excluded_items: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    refresh_interval: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_REFRESH_INTERVAL.value,
    )
    last_generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    next_refresh_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    __table_args__ = (
        UniqueConstraint("list_kind", name="uq_catalog_lists_list_kind"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CatalogList(id={self.id}, list_kind={self.list_kind}, items={len(self.items or [])})>"

    @classmethod
    def create(
        cls,
        list_kind: str,
        category: str,
        items: list[str],
        generated_at: datetime,
        brand: str | None = None,
        refresh_interval: RefreshInterval = DEFAULT_REFRESH_INTERVAL,
        excluded_items: list[str] | None = None,
    ) -> "CatalogList":
        """Build a new list stamped as freshly generated.

        Column defaults only apply at flush time, so identifiers and
        timestamps are set here to keep unsaved instances complete.

        Args:
            list_kind: List kind key.
            category: Device category.
            items: Generated names.
            generated_at: Generation timestamp.
            brand: Brand for model lists.
            refresh_interval: Cache lifetime.
            excluded_items: Initial exclusions.

        Returns:
            Unsaved CatalogList.
        """
        return cls(
            id=str(uuid4()),
            list_kind=list_kind,
            category=category,
            brand=brand,
            items=list(items),
            excluded_items=list(excluded_items or []),
            refresh_interval=refresh_interval.value,
            last_generated_at=generated_at,
            next_refresh_at=refresh_interval.next_refresh_from(generated_at),
            is_active=True,
            created_at=generated_at,
            updated_at=generated_at,
        )

    @property
    def is_brand_list(self) -> bool:
        """Whether this is a category's brand list."""
        return is_brand_list_kind(self.list_kind)

    @property
    def interval(self) -> RefreshInterval:
        """Refresh interval as an enum."""
        return RefreshInterval.coerce(self.refresh_interval)

    def is_due(self, now: datetime) -> bool:
        """Check whether the list should be regenerated.

        Args:
            now: Current time.

        Returns:
            True if ``now`` has reached ``next_refresh_at``.
        """
        return now >= _as_utc(self.next_refresh_at)

    def freshness(self, now: datetime) -> ListFreshness:
        """Report the cache state of this list.

        Args:
            now: Current time.

        Returns:
            STALE if due, PRUNED for brand lists carrying exclusions, else FRESH.
        """
        if self.is_due(now):
            return ListFreshness.STALE
        if self.is_brand_list and self.excluded_items:
            return ListFreshness.PRUNED
        return ListFreshness.FRESH

    def to_dict(self) -> dict:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "list_kind": self.list_kind,
            "category": self.category,
            "brand": self.brand,
            "items": list(self.items or []),
            "excluded_items": list(self.excluded_items or []),
            "refresh_interval": self.refresh_interval,
            "last_generated_at": self.last_generated_at,
            "next_refresh_at": self.next_refresh_at,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def _as_utc(moment: datetime) -> datetime:
    # SQLite and some drivers hand back naive datetimes
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
