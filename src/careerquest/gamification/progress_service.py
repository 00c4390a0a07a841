"""Progress service: the async write path for one user.

Each call loads the user's snapshot (creating it on first contact), runs the
orchestrator, commits the result once with compare-and-swap, and then
publishes the outcome's notifications. A lost commit race is retried from a
fresh read, so a concurrent writer's progress is never overwritten.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from careerquest.config import get_settings
from careerquest.gamification.errors import ProfileConflict, ProfileNotFound
from careerquest.gamification.notifications import publish_notifications
from careerquest.gamification.orchestrator import ProgressOrchestrator
from careerquest.gamification.schemas import (
    ActivityEvent,
    ActivityOutcome,
    EventOutcome,
    ProfileSnapshot,
    TriggerEvent,
)
from careerquest.gamification.status import GamificationStatus, gamification_status

if TYPE_CHECKING:
    from careerquest.store.profile_store import ProfileStore

logger = structlog.get_logger()

OutcomeT = TypeVar("OutcomeT", bound=EventOutcome)


async def load_or_create(store: ProfileStore, user_id: str, now: datetime | None = None) -> ProfileSnapshot:
    """Stored snapshot, or a fresh version-0 profile for a new user."""
    profile = await store.load(user_id)
    if profile is None:
        profile = ProfileSnapshot.new(user_id, now=now, streak_goal=get_settings().default_streak_goal)
    return profile


async def _save_with_retry(
    store: ProfileStore,
    user_id: str,
    step: Callable[[ProfileSnapshot], OutcomeT],
    now: datetime | None,
    attempts: int,
) -> OutcomeT:
    """Run ``step`` on a fresh read and commit it, retrying lost races."""
    attempt = 0
    while True:
        attempt += 1
        profile = await load_or_create(store, user_id, now)
        outcome = step(profile)

        if isinstance(outcome, ActivityOutcome) and outcome.duplicate:
            return outcome

        try:
            await store.save(outcome.profile, expected_version=profile.version)
        except ProfileConflict as exc:
            logger.warning(
                "profile_commit_retry",
                attempt=attempt,
                expected_version=exc.expected_version,
                actual_version=exc.actual_version,
            )
            if attempt >= attempts:
                raise
            continue

        logger.info(
            "progress_committed",
            version=outcome.profile.version,
            xp_gained=outcome.total_xp_gained,
            achievements=[a.id for a in outcome.new_achievements],
            milestones=list(outcome.newly_completed_milestones),
        )
        return outcome


async def _commit(
    store: ProfileStore,
    redis: Any,  # noqa: ANN401
    user_id: str,
    step: Callable[[ProfileSnapshot], OutcomeT],
    now: datetime | None,
) -> OutcomeT:
    settings = get_settings()

    with structlog.contextvars.bound_contextvars(user_id=user_id):
        outcome = await _save_with_retry(store, user_id, step, now, max(1, settings.commit_retries))

        if isinstance(outcome, ActivityOutcome) and outcome.duplicate:
            logger.info("duplicate_activity_skipped")
            return outcome

        if settings.publish_notifications and outcome.notifications:
            await publish_notifications(
                redis,
                user_id,
                outcome.notifications,
                channel_prefix=settings.notification_channel_prefix,
            )
    return outcome


async def record_activity(
    store: ProfileStore,
    redis: Any,  # noqa: ANN401
    user_id: str,
    activity: ActivityEvent,
    orchestrator: ProgressOrchestrator | None = None,
    now: datetime | None = None,
) -> ActivityOutcome:
    """Award a completed activity and persist the result."""
    orchestrator = orchestrator or ProgressOrchestrator()
    when = now or datetime.now(timezone.utc)
    return await _commit(
        store,
        redis,
        user_id,
        lambda profile: orchestrator.process_activity(profile, activity, when),
        when,
    )


async def record_event(
    store: ProfileStore,
    redis: Any,  # noqa: ANN401
    user_id: str,
    trigger: TriggerEvent,
    orchestrator: ProgressOrchestrator | None = None,
    now: datetime | None = None,
) -> EventOutcome:
    """Apply a non-activity trigger (assessment, chat, resume, ...) and persist the result."""
    orchestrator = orchestrator or ProgressOrchestrator()
    when = now or datetime.now(timezone.utc)
    return await _commit(
        store,
        redis,
        user_id,
        lambda profile: orchestrator.process_event(profile, trigger, when),
        when,
    )


async def get_status(store: ProfileStore, user_id: str) -> GamificationStatus:
    """Dashboard summary for an existing user."""
    profile = await store.load(user_id)
    if profile is None:
        raise ProfileNotFound(user_id)
    return gamification_status(profile)
