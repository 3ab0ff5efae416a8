"""Tests for the expired list refresh scheduler."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from repairbeam.application.list_service import RefreshReport
from repairbeam.application.scheduler import ListRefreshScheduler


def make_service(side_effect=None) -> MagicMock:
    """Create a mock list service."""
    service = MagicMock()
    service.refresh_expired_lists = AsyncMock(
        return_value=RefreshReport(refreshed=["brands:Phone"]),
        side_effect=side_effect,
    )
    return service


class TestListRefreshScheduler:
    """Tests for ListRefreshScheduler."""

    @pytest.mark.asyncio
    async def test_disabled_by_default(self) -> None:
        """Without opting in, start() launches nothing."""
        service = make_service()
        scheduler = ListRefreshScheduler(lambda: service)

        assert scheduler.start() is False
        assert scheduler.is_running is False
        await scheduler.stop()
        service.refresh_expired_lists.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_once_returns_report(self) -> None:
        """A manual run delegates to the service."""
        service = make_service()
        scheduler = ListRefreshScheduler(lambda: service)

        report = await scheduler.run_once()

        assert report.refreshed == ["brands:Phone"]

    @pytest.mark.asyncio
    async def test_run_once_swallows_errors(self) -> None:
        """A failing run is logged, not raised."""
        service = make_service(side_effect=RuntimeError("database unavailable"))
        scheduler = ListRefreshScheduler(lambda: service)

        assert await scheduler.run_once() is None

    @pytest.mark.asyncio
    async def test_enabled_loop_runs_and_stops(self) -> None:
        """An enabled scheduler refreshes after the initial delay until stopped."""
        ran = asyncio.Event()

        async def refresh():
            ran.set()
            return RefreshReport()

        service = make_service(side_effect=refresh)
        scheduler = ListRefreshScheduler(
            lambda: service,
            enabled=True,
            interval_seconds=3600,
            initial_delay_seconds=0,
        )

        assert scheduler.start() is True
        assert scheduler.start() is False
        await asyncio.wait_for(ran.wait(), timeout=1)
        await scheduler.stop()

        assert scheduler.is_running is False
        service.refresh_expired_lists.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_during_initial_delay(self) -> None:
        """Stopping before the first run skips it."""
        service = make_service()
        scheduler = ListRefreshScheduler(
            lambda: service,
            enabled=True,
            initial_delay_seconds=3600,
        )

        scheduler.start()
        await asyncio.sleep(0)
        await asyncio.wait_for(scheduler.stop(), timeout=1)

        service.refresh_expired_lists.assert_not_awaited()
