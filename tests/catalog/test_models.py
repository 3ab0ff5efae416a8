"""Tests for the CatalogList model."""

from datetime import datetime, timedelta, timezone

from repairbeam.catalog.models import CatalogList
from repairbeam.domain.value_objects import ListFreshness, RefreshInterval

GENERATED_AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_brand_list(**overrides) -> CatalogList:
    kwargs = {
        "list_kind": "brands:Phone",
        "category": "Phone",
        "items": ["Apple", "Samsung"],
        "generated_at": GENERATED_AT,
    }
    kwargs.update(overrides)
    return CatalogList.create(**kwargs)


class TestCatalogListCreate:
    """Tests for CatalogList.create."""

    def test_defaults_to_quarterly(self) -> None:
        """New lists refresh quarterly."""
        catalog_list = make_brand_list()
        assert catalog_list.refresh_interval == "quarterly"
        assert catalog_list.interval is RefreshInterval.QUARTERLY
        assert catalog_list.next_refresh_at == datetime(2026, 4, 15, 12, 0, tzinfo=timezone.utc)

    def test_stamps_identity_and_timestamps(self) -> None:
        """Unsaved lists are complete without a flush."""
        catalog_list = make_brand_list()
        assert len(catalog_list.id) == 36
        assert catalog_list.is_active is True
        assert catalog_list.last_generated_at == GENERATED_AT
        assert catalog_list.created_at == GENERATED_AT
        assert catalog_list.excluded_items == []

    def test_copies_items(self) -> None:
        """The caller's list is not shared with the model."""
        items = ["Apple"]
        catalog_list = make_brand_list(items=items)
        items.append("Samsung")
        assert catalog_list.items == ["Apple"]

    def test_model_list_carries_brand(self) -> None:
        """Model lists record their brand and are not brand lists."""
        catalog_list = CatalogList.create(
            list_kind="models:Phone:Apple",
            category="Phone",
            brand="Apple",
            items=["iPhone 15"],
            generated_at=GENERATED_AT,
        )
        assert catalog_list.brand == "Apple"
        assert catalog_list.is_brand_list is False


class TestCatalogListFreshness:
    """Tests for due checks and freshness."""

    def test_not_due_before_next_refresh(self) -> None:
        """A new list is fresh."""
        catalog_list = make_brand_list()
        assert catalog_list.is_due(GENERATED_AT + timedelta(days=1)) is False
        assert catalog_list.freshness(GENERATED_AT) is ListFreshness.FRESH

    def test_due_at_next_refresh(self) -> None:
        """A list is due exactly at next_refresh_at."""
        catalog_list = make_brand_list(refresh_interval=RefreshInterval.WEEKLY)
        due_at = GENERATED_AT + timedelta(days=7)
        assert catalog_list.is_due(due_at) is True
        assert catalog_list.freshness(due_at) is ListFreshness.STALE

    def test_naive_timestamps_are_treated_as_utc(self) -> None:
        """Drivers returning naive datetimes still compare correctly."""
        catalog_list = make_brand_list(refresh_interval=RefreshInterval.WEEKLY)
        catalog_list.next_refresh_at = catalog_list.next_refresh_at.replace(tzinfo=None)
        assert catalog_list.is_due(GENERATED_AT + timedelta(days=8)) is True

    def test_brand_list_with_exclusions_is_pruned(self) -> None:
        """Fresh brand lists with exclusions report PRUNED."""
        catalog_list = make_brand_list(excluded_items=["Nokia"])
        assert catalog_list.freshness(GENERATED_AT) is ListFreshness.PRUNED

    def test_stale_wins_over_pruned(self) -> None:
        """Due lists report STALE even with exclusions."""
        catalog_list = make_brand_list(excluded_items=["Nokia"])
        assert catalog_list.freshness(GENERATED_AT + timedelta(days=365)) is ListFreshness.STALE


def test_to_dict_round_trips_fields() -> None:
    """to_dict exposes every column."""
    data = make_brand_list(excluded_items=["Nokia"]).to_dict()
    assert data["list_kind"] == "brands:Phone"
    assert data["items"] == ["Apple", "Samsung"]
    assert data["excluded_items"] == ["Nokia"]
    assert data["brand"] is None
    assert set(data) >= {"id", "next_refresh_at", "updated_at", "is_active"}
