"""Value objects for the list domain.

Device categories, refresh cadences and the list-kind keys that
address every cached catalog list.
"""

import calendar
from datetime import datetime, timedelta
from enum import Enum

from repairbeam.domain.exceptions import UnknownCategoryError


# ============================================================================
# Device Categories
# ============================================================================


class Category(str, Enum):
    """Device categories that scope brand and model catalogs."""

    PHONE = "Phone"
    LAPTOP = "Laptop"
    DESKTOP = "Desktop"

    @classmethod
    def values(cls) -> list[str]:
        """Get all category names.

        Returns:
            Category names in declaration order.
        """
        return [c.value for c in cls]

    @classmethod
    def parse(cls, value: str) -> "Category":
        """Resolve a category name case-insensitively.

        Args:
            value: Category name as supplied by a caller (e.g. "phone").

        Returns:
            Matching Category.

        Raises:
            UnknownCategoryError: If no category matches.
        """
        normalized = (value or "").strip().casefold()
        for category in cls:
            if category.value.casefold() == normalized:
                return category
        raise UnknownCategoryError(value, cls.values())


# ============================================================================
# Refresh Intervals
# ============================================================================


def add_months(moment: datetime, months: int) -> datetime:
    """Add calendar months to a datetime.

    The day of month is clamped to the last day of the target month,
    so Jan 31 + 1 month is Feb 28 (or 29).

    Args:
        moment: Starting datetime.
        months: Number of months to add.

    Returns:
        Shifted datetime with the same time of day and tzinfo.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class RefreshInterval(str, Enum):
    """Cache lifetime of a generated list."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

    def next_refresh_from(self, moment: datetime) -> datetime:
        """Compute when a list generated at ``moment`` becomes due.

        Args:
            moment: Generation timestamp.

        Returns:
            Timestamp at which the list is considered stale.
        """
        if self is RefreshInterval.WEEKLY:
            return moment + timedelta(days=7)
        if self is RefreshInterval.BIWEEKLY:
            return moment + timedelta(days=14)
        if self is RefreshInterval.MONTHLY:
            return add_months(moment, 1)
        return add_months(moment, 3)

    @classmethod
    def coerce(cls, value: "str | RefreshInterval | None") -> "RefreshInterval":
        """Convert a stored value to an interval, defaulting to quarterly."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.QUARTERLY


DEFAULT_REFRESH_INTERVAL = RefreshInterval.QUARTERLY


# ============================================================================
# List Freshness
# ============================================================================


class ListFreshness(str, Enum):
    """Cache state of a stored list.

    State diagram:
        ABSENT ──first generation──► FRESH ──next_refresh_at elapses──► STALE
                                      ▲  │                               │
                                      │  │ model sweep excludes brands   │
                                      │  ▼                               │
                                      │ PRUNED                           │
                                      └─────────── refresh ◄─────────────┘
    """

    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"
    PRUNED = "pruned"


# ============================================================================
# List Kinds
# ============================================================================


BRAND_LIST_PREFIX = "brands"
MODEL_LIST_PREFIX = "models"


def _category_name(category: "Category | str") -> str:
    return category.value if isinstance(category, Category) else str(category)


def brand_list_kind(category: "Category | str") -> str:
    """Build the list kind of a category's brand list.

    Args:
        category: Device category.

    Returns:
        List kind such as ``"brands:Phone"``.
    """
    return f"{BRAND_LIST_PREFIX}:{_category_name(category)}"


def model_list_kind(category: "Category | str", brand: str) -> str:
    """Build the list kind of a brand's model list.

    Args:
        category: Device category.
        brand: Brand name.

    Returns:
        List kind such as ``"models:Phone:Apple"``.
    """
    return f"{MODEL_LIST_PREFIX}:{_category_name(category)}:{brand}"


def is_brand_list_kind(list_kind: str) -> bool:
    """Check whether a list kind addresses a brand list."""
    return list_kind.startswith(f"{BRAND_LIST_PREFIX}:")
