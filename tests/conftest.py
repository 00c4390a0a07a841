"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone

import pytest

from careerquest.config import get_settings
from careerquest.gamification.enums import ActivityKind
from careerquest.gamification.orchestrator import ProgressOrchestrator
from careerquest.gamification.schemas import ActivityEvent, ProfileSnapshot

# Monday of 2026-W10
START = datetime(2026, 3, 2, 14, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Settings are cached per process; tests that patch the env need a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    return START


@pytest.fixture
def new_profile(now: datetime) -> ProfileSnapshot:
    return ProfileSnapshot.new("user-1", now=now)


@pytest.fixture
def orchestrator() -> ProgressOrchestrator:
    return ProgressOrchestrator()


@pytest.fixture
def make_activity() -> Callable[..., ActivityEvent]:
    """Factory: activity completed ``day`` days after START at ``hour`` UTC."""
    counter = iter(range(1, 10_000))

    def _make(
        day: int = 0,
        hour: int = 14,
        kind: ActivityKind | str = ActivityKind.COURSE,
        activity_id: str | None = None,
    ) -> ActivityEvent:
        n = next(counter)
        completed_at = START.replace(hour=hour) + timedelta(days=day)
        return ActivityEvent(
            id=activity_id or f"activity_{n}",
            resource_id=f"resource_{n}",
            title=f"Resource {n}",
            kind=kind,
            completed_at=completed_at,
        )

    return _make
