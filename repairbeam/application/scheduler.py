"""Background refresh of expired lists.

Every refresh calls the generation provider, so the scheduler only
runs when explicitly enabled in settings. Otherwise expired lists are
refreshed by hand or by an external scheduler through the
``refresh-expired`` endpoint or ``scripts/manage_lists.py``.
"""

import asyncio
from collections.abc import Callable

import structlog

from repairbeam.application.list_service import ListGenerationService, RefreshReport

logger = structlog.get_logger()


class ListRefreshScheduler:
    """Periodically runs ``refresh_expired_lists`` when enabled.

    Example usage:
        scheduler = ListRefreshScheduler(get_list_service, enabled=True)
        scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        service_factory: Callable[[], ListGenerationService],
        enabled: bool = False,
        interval_seconds: float = 6 * 60 * 60,
        initial_delay_seconds: float = 60.0,
    ) -> None:
        """Initialize scheduler.

        Args:
            service_factory: Returns the service to run refreshes on.
            enabled: Whether start() launches the background loop.
            interval_seconds: Pause between refresh runs.
            initial_delay_seconds: Pause before the first run.
        """
        self._service_factory = service_factory
        self.enabled = enabled
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        """Whether the background loop is active."""
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Launch the background loop if enabled.

        Returns:
            True if a loop was started.
        """
        if not self.enabled:
            logger.info(
                "Automatic list refresh disabled for cost control; "
                "lists update only when triggered manually",
            )
            return False
        if self.is_running:
            return False

        self._stop_event.clear()
        self._task = asyncio.create_task(self._runner())
        logger.info(
            "Automatic list refresh started",
            interval_hours=round(self.interval_seconds / 3600, 2),
            initial_delay_seconds=self.initial_delay_seconds,
        )
        return True

    async def stop(self) -> None:
        """Stop the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("Automatic list refresh stopped")

    async def run_once(self) -> RefreshReport | None:
        """Run a single refresh, logging instead of raising on failure."""
        logger.info("Checking for expired auto-generated lists")
        try:
            return await self._service_factory().refresh_expired_lists()
        except Exception:
            logger.exception("Expired list refresh run failed")
            return None

    async def _wait(self, seconds: float) -> bool:
        """Sleep for ``seconds`` unless stopped first. Returns True if stopped."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def _runner(self) -> None:
        if await self._wait(self.initial_delay_seconds):
            return
        while not self._stop_event.is_set():
            await self.run_once()
            if await self._wait(self.interval_seconds):
                return
