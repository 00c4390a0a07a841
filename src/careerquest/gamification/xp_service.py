"""XP awarding with level-up detection, and the XP value tables."""

from __future__ import annotations

from typing import NamedTuple

from careerquest.gamification.enums import ActivityKind, TriggerKind
from careerquest.gamification.errors import InvalidAward
from careerquest.gamification.level_thresholds import level_number

BASELINE_ACTIVITY_XP = 50

ACTIVITY_XP: dict[ActivityKind, int] = {
    ActivityKind.COURSE: 50,
    ActivityKind.CERTIFICATION: 150,
    ActivityKind.PROJECT: 100,
}

# XP granted by non-activity triggers. XP_AWARDED uses the trigger's own amount.
TRIGGER_XP: dict[TriggerKind, int] = {
    TriggerKind.ASSESSMENT_COMPLETED: 100,
    TriggerKind.RECOMMENDATIONS_GENERATED: 75,
    TriggerKind.ATS_IMPROVEMENT: 50,
    TriggerKind.CHAT_MILESTONE: 10,
    TriggerKind.PROFILE_UPDATED: 25,
    TriggerKind.CAREER_SELECTED: 0,
    TriggerKind.ROADMAP_GENERATED: 0,
    TriggerKind.SKILL_GAP_ANALYSIS: 0,
}


class AwardResult(NamedTuple):
    new_xp: int
    leveled_up: bool
    new_level: int | None = None


def activity_xp(kind: ActivityKind | str) -> int:
    """XP for completing an activity. Unknown kinds earn the baseline."""
    return ACTIVITY_XP.get(kind, BASELINE_ACTIVITY_XP)  # type: ignore[arg-type]


def trigger_xp(kind: TriggerKind, amount: int | None = None) -> int:
    """XP for a non-activity trigger."""
    if kind == TriggerKind.XP_AWARDED:
        return amount or 0
    return TRIGGER_XP.get(kind, 0)


def award(current_xp: int, amount: int) -> AwardResult:
    """Add amount to current_xp and report whether the level rose.

    Raises InvalidAward for a negative amount; it is never clamped.
    """
    if amount < 0:
        raise InvalidAward(amount)

    old_level = level_number(current_xp)
    new_xp = current_xp + amount
    new_level = level_number(new_xp)

    if new_level > old_level:
        return AwardResult(new_xp=new_xp, leveled_up=True, new_level=new_level)
    return AwardResult(new_xp=new_xp, leveled_up=False)
