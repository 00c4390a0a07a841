"""Milestone evaluation: per-profile checkpoints with their own reward channel."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import ValidationError

from careerquest.gamification.enums import MilestoneCategory
from careerquest.gamification.errors import ConfigurationError, DuplicateAchievementId, MalformedRequirementString
from careerquest.gamification.requirements import RequirementBase, all_met, parse_requirements
from careerquest.gamification.schemas import (
    AchievementDefinition,
    EarnedAchievement,
    Milestone,
    ProfileSnapshot,
)
from careerquest.gamification.seed import MILESTONE_SEED_DATA

logger = logging.getLogger(__name__)


class MilestoneEvaluation(NamedTuple):
    milestones: tuple[Milestone, ...]
    completed: list[tuple[str, EarnedAchievement]]


def create_milestone(
    milestone_id: str,
    title: str,
    description: str,
    category: MilestoneCategory | str,
    requirements: Iterable[RequirementBase | dict | str],
    reward: AchievementDefinition | dict,
    order: int = 0,
) -> Milestone:
    """Build an incomplete milestone, parsing its requirements."""
    from careerquest.gamification.achievement_engine import load_definition

    parsed = parse_requirements(requirements)
    if not parsed:
        raise MalformedRequirementString(milestone_id, "milestone has no requirements")
    try:
        return Milestone(
            id=milestone_id,
            title=title,
            description=description,
            category=category,
            requirements=parsed,
            reward=load_definition(reward, require_requirements=False),
            order=order,
        )
    except ValidationError as exc:
        msg = f"Invalid milestone {milestone_id!r}: {exc.errors()[0]['msg']}"
        raise ConfigurationError(msg) from exc


def load_milestones(seed: Iterable[dict]) -> tuple[Milestone, ...]:
    """Validate a milestone set. Milestone ids and reward ids must be unique."""
    milestones: list[Milestone] = []
    seen_ids: set[str] = set()
    seen_rewards: set[str] = set()
    for entry in seed:
        milestone = create_milestone(
            entry["id"],
            entry["title"],
            entry.get("description", ""),
            entry["category"],
            entry.get("requirements", ()),
            entry["reward"],
            entry.get("order", 0),
        )
        if milestone.id in seen_ids:
            msg = f"Duplicate milestone id: {milestone.id!r}"
            raise ConfigurationError(msg)
        if milestone.reward.id in seen_rewards:
            raise DuplicateAchievementId(milestone.reward.id)
        seen_ids.add(milestone.id)
        seen_rewards.add(milestone.reward.id)
        milestones.append(milestone)
    return tuple(milestones)


def default_milestones() -> tuple[Milestone, ...]:
    """The milestone set installed on every new profile."""
    return load_milestones(MILESTONE_SEED_DATA)


def check_reward_ids(milestones: Iterable[Milestone], achievement_ids: Iterable[str]) -> None:
    """Milestone rewards must not reuse an achievement id from the registry."""
    registry = set(achievement_ids)
    for milestone in milestones:
        if milestone.reward.id in registry:
            raise DuplicateAchievementId(milestone.reward.id)


def next_milestone(milestones: Sequence[Milestone]) -> Milestone | None:
    """Lowest-order incomplete milestone, for display."""
    pending = [m for m in milestones if not m.is_completed]
    return min(pending, key=lambda m: m.order) if pending else None


class MilestoneEngine:
    """Completes milestones whose requirements all hold.

    Every incomplete milestone is checked on each call, in ascending order.
    Completion is one-way: completed milestones are never re-evaluated.
    Rewards are not checked against the achievement registry.
    """

    def evaluate(self, profile: ProfileSnapshot, now: datetime | None = None) -> MilestoneEvaluation:
        if now is None:
            now = datetime.now(timezone.utc)

        completed_ids: dict[str, EarnedAchievement] = {}
        for milestone in sorted(profile.milestones, key=lambda m: m.order):
            if milestone.is_completed:
                continue
            if all_met(milestone.requirements, profile):
                completed_ids[milestone.id] = milestone.reward.earn(now)

        if not completed_ids:
            return MilestoneEvaluation(milestones=profile.milestones, completed=[])

        updated = tuple(
            m.model_copy(update={"is_completed": True, "completed_at": now}) if m.id in completed_ids else m
            for m in profile.milestones
        )
        logger.info("User %s completed milestones: %s", profile.user_id, ", ".join(completed_ids))
        return MilestoneEvaluation(milestones=updated, completed=list(completed_ids.items()))
