"""Shared fixtures for list tests."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from repairbeam.application.list_service import ListGenerationService
from repairbeam.catalog.repository import InMemoryCatalogStore

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeGenerator:
    """Scripted stand-in for the generation provider.

    Replies come from ``handler`` when given, otherwise from the
    ``responses`` queue in order. Queued exceptions are raised.
    """

    def __init__(
        self,
        responses: list[Any] | None = None,
        handler: Callable[[str, str], Any] | None = None,
    ) -> None:
        self.responses = list(responses or [])
        self.handler = handler
        self.calls: list[tuple[str, str]] = []

    async def generate_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        self.calls.append((system_prompt, user_prompt))
        # Yield like a real network call so concurrent callers interleave
        await asyncio.sleep(0)
        if self.handler is not None:
            reply = self.handler(system_prompt, user_prompt)
        elif self.responses:
            reply = self.responses.pop(0)
        else:
            raise AssertionError("FakeGenerator called more times than scripted")
        if isinstance(reply, BaseException):
            raise reply
        return reply

    @property
    def user_prompts(self) -> list[str]:
        return [user for _, user in self.calls]


@pytest.fixture
def now() -> datetime:
    """Fixed current time."""
    return FIXED_NOW


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """Empty in-memory catalog store."""
    return InMemoryCatalogStore()


@pytest.fixture
def generator() -> FakeGenerator:
    """Fake generator with an empty script."""
    return FakeGenerator()


@pytest.fixture
def sleep() -> AsyncMock:
    """Recorded no-op sleep for the batch throttle."""
    return AsyncMock()


@pytest.fixture
def service(
    generator: FakeGenerator,
    store: InMemoryCatalogStore,
    sleep: AsyncMock,
    now: datetime,
) -> ListGenerationService:
    """List service wired to fakes and a fixed clock."""
    return ListGenerationService(
        generator=generator,
        store=store,
        clock=lambda: now,
        sleep=sleep,
    )
