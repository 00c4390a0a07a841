"""Requirement predicates shared by achievements and milestones.

A requirement is a frozen pydantic model tagged by ``kind``. The full set of
variants forms the ``Requirement`` discriminated union; every variant is a
pure predicate over a profile snapshot and an optional trigger event.

Registries may also be written in the two legacy string vocabularies:

    achievement style:  "daily_streak_7", "explore_5_careers", "complete_activity"
    milestone style:    "streak_days:7", "level_reached:5", "assessment_complete"

``parse_requirement`` turns any of these into a typed variant at load time.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import date, timedelta
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from careerquest.gamification.enums import SkillLevel, StreakType, TimeWindow, TriggerKind
from careerquest.gamification.errors import MalformedRequirementString, UnknownRequirement
from careerquest.gamification.streak_service import get_monday, utc_datetime

if TYPE_CHECKING:
    from careerquest.gamification.schemas import ProfileSnapshot, TriggerEvent

MORNING_CUTOFF_HOUR = 9
NIGHT_START_HOUR = 21


class RequirementBase(BaseModel):
    """Common base: frozen, and evaluated with ``is_met``."""

    model_config = ConfigDict(frozen=True)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        raise NotImplementedError


# --- Trigger-gated ---


class ActivityTypeIs(RequirementBase):
    """The triggering event carries the given tag."""

    kind: Literal["activity_type_is"] = "activity_type_is"
    trigger: TriggerKind

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return trigger is not None and trigger.kind == self.trigger


class ChatMilestone(RequirementBase):
    kind: Literal["chat_milestone"] = "chat_milestone"
    count: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return (
            trigger is not None
            and trigger.kind == TriggerKind.CHAT_MILESTONE
            and (trigger.count or 0) >= self.count
        )


class AtsImprovementAtLeast(RequirementBase):
    kind: Literal["ats_improvement_at_least"] = "ats_improvement_at_least"
    points: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return (
            trigger is not None
            and trigger.kind == TriggerKind.ATS_IMPROVEMENT
            and (trigger.amount or 0) >= self.points
        )


class CareerSelected(RequirementBase):
    kind: Literal["career_selected"] = "career_selected"

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return (
            trigger is not None
            and trigger.kind == TriggerKind.CAREER_SELECTED
            and bool(profile.selected_career_path)
        )


class RoadmapGenerated(RequirementBase):
    kind: Literal["roadmap_generated"] = "roadmap_generated"

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return (
            trigger is not None
            and trigger.kind == TriggerKind.ROADMAP_GENERATED
            and profile.has_learning_roadmap
        )


class SkillGapAnalysisDone(RequirementBase):
    kind: Literal["skill_gap_analysis_done"] = "skill_gap_analysis_done"

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return (
            trigger is not None
            and trigger.kind == TriggerKind.SKILL_GAP_ANALYSIS
            and profile.has_skill_gap_analysis
        )


# --- Profile state ---


class AssessmentCompleted(RequirementBase):
    kind: Literal["assessment_completed"] = "assessment_completed"

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return profile.assessment_completed


class DailyStreakAtLeast(RequirementBase):
    kind: Literal["daily_streak_at_least"] = "daily_streak_at_least"
    days: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return profile.streak.streak_type == StreakType.DAILY and profile.streak.current_streak >= self.days


class StreakDaysAtLeast(RequirementBase):
    """Current streak length, regardless of streak type."""

    kind: Literal["streak_days_at_least"] = "streak_days_at_least"
    days: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return profile.streak.current_streak >= self.days


class SkillAtExpertLevel(RequirementBase):
    kind: Literal["skill_at_expert_level"] = "skill_at_expert_level"

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return any(s.current_level == SkillLevel.EXPERT for s in profile.skill_progress.values())


class SkillsLearnedAtLeast(RequirementBase):
    kind: Literal["skills_learned_at_least"] = "skills_learned_at_least"
    count: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return len(profile.skill_progress) >= self.count


class ActivitiesCompletedAtLeast(RequirementBase):
    kind: Literal["activities_completed_at_least"] = "activities_completed_at_least"
    count: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return profile.learning_activities_count >= self.count


class RoadmapProgressAtLeast(RequirementBase):
    kind: Literal["roadmap_progress_at_least"] = "roadmap_progress_at_least"
    percent: float = Field(gt=0, le=100)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return profile.overall_progress >= self.percent


class CareersExploredAtLeast(RequirementBase):
    kind: Literal["careers_explored_at_least"] = "careers_explored_at_least"
    count: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return len(profile.career_recommendations) >= self.count


class ProfileCompletenessAtLeast(RequirementBase):
    kind: Literal["profile_completeness_at_least"] = "profile_completeness_at_least"
    percent: int = Field(gt=0, le=100)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        from careerquest.gamification.status import profile_completeness

        return profile_completeness(profile) >= self.percent


class LevelAtLeast(RequirementBase):
    kind: Literal["level_at_least"] = "level_at_least"
    level: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        return profile.level >= self.level


class TimeOfDayActivityDays(RequirementBase):
    """Distinct UTC days with an activity completed in the given window.

    Morning is before 09:00, night is 21:00 or later.
    """

    kind: Literal["time_of_day_activity_days"] = "time_of_day_activity_days"
    window: TimeWindow
    days: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        days = set()
        for entry in profile.activity_log:
            ts = utc_datetime(entry.completed_at)
            in_window = (
                ts.hour < MORNING_CUTOFF_HOUR
                if self.window == TimeWindow.MORNING
                else ts.hour >= NIGHT_START_HOUR
            )
            if in_window:
                days.add(ts.date())
        return len(days) >= self.days


class WeekendActiveWeeks(RequirementBase):
    """Longest run of consecutive ISO weeks with a Saturday or Sunday activity."""

    kind: Literal["weekend_active_weeks"] = "weekend_active_weeks"
    weeks: int = Field(ge=1)

    def is_met(self, profile: ProfileSnapshot, trigger: TriggerEvent | None = None) -> bool:
        mondays = sorted({
            get_monday(utc_datetime(e.completed_at))
            for e in profile.activity_log
            if utc_datetime(e.completed_at).weekday() >= 5
        })
        return _longest_weekly_run(mondays) >= self.weeks


def _longest_weekly_run(mondays: list[date]) -> int:
    longest = run = 0
    previous = None
    for monday in mondays:
        run = run + 1 if previous is not None and monday - previous == timedelta(weeks=1) else 1
        longest = max(longest, run)
        previous = monday
    return longest


Requirement = Annotated[
    Union[
        ActivityTypeIs,
        ChatMilestone,
        AtsImprovementAtLeast,
        CareerSelected,
        RoadmapGenerated,
        SkillGapAnalysisDone,
        AssessmentCompleted,
        DailyStreakAtLeast,
        StreakDaysAtLeast,
        SkillAtExpertLevel,
        SkillsLearnedAtLeast,
        ActivitiesCompletedAtLeast,
        RoadmapProgressAtLeast,
        CareersExploredAtLeast,
        ProfileCompletenessAtLeast,
        LevelAtLeast,
        TimeOfDayActivityDays,
        WeekendActiveWeeks,
    ],
    Field(discriminator="kind"),
]

_requirement_adapter: TypeAdapter[Any] = TypeAdapter(Requirement)

REQUIREMENT_KINDS: frozenset[str] = frozenset(
    cls.model_fields["kind"].default for cls in RequirementBase.__subclasses__()
)


# --- Legacy string vocabularies ---

# Achievement style: whole-string names, some with an embedded number.
_NAMED: dict[str, Callable[[], RequirementBase]] = {
    "complete_activity": lambda: ActivityTypeIs(trigger=TriggerKind.ACTIVITY_COMPLETED),
    "complete_assessment": AssessmentCompleted,
    "create_roadmap": lambda: CareersExploredAtLeast(count=1),
    "skill_expert_level": SkillAtExpertLevel,
    "career_selected": CareerSelected,
    "roadmap_generated": RoadmapGenerated,
    "skill_gap_analysis": SkillGapAnalysisDone,
}

_NUMBERED: list[tuple[re.Pattern[str], Callable[[int], RequirementBase]]] = [
    (re.compile(r"^daily_streak_(.+)$"), lambda n: DailyStreakAtLeast(days=n)),
    (re.compile(r"^roadmap_(.+)_percent$"), lambda n: RoadmapProgressAtLeast(percent=n)),
    (re.compile(r"^early_morning_streak_(.+)$"), lambda n: TimeOfDayActivityDays(window=TimeWindow.MORNING, days=n)),
    (re.compile(r"^late_night_streak_(.+)$"), lambda n: TimeOfDayActivityDays(window=TimeWindow.NIGHT, days=n)),
    (re.compile(r"^weekend_activity_(.+)_weeks$"), lambda n: WeekendActiveWeeks(weeks=n)),
    (re.compile(r"^explore_(.+)_careers$"), lambda n: CareersExploredAtLeast(count=n)),
    (re.compile(r"^ats_score_improvement_(.+)$"), lambda n: AtsImprovementAtLeast(points=n)),
    (re.compile(r"^chat_conversations_(.+)$"), lambda n: ChatMilestone(count=n)),
    (re.compile(r"^complete_profile_(.+)$"), lambda n: ProfileCompletenessAtLeast(percent=n)),
]

# Milestone style: "type" or "type:value", value defaulting when omitted.
_TYPED: dict[str, tuple[int | None, Callable[[int], RequirementBase]]] = {
    "assessment_complete": (None, lambda _n: AssessmentCompleted()),
    "skills_learned": (1, lambda n: SkillsLearnedAtLeast(count=n)),
    "activities_completed": (1, lambda n: ActivitiesCompletedAtLeast(count=n)),
    "progress_percentage": (100, lambda n: RoadmapProgressAtLeast(percent=n)),
    "streak_days": (1, lambda n: StreakDaysAtLeast(days=n)),
    "level_reached": (1, lambda n: LevelAtLeast(level=n)),
}


def _to_int(raw: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedRequirementString(raw, f"expected an integer, got {value!r}") from None


def _build(raw: object, factory: Callable[..., RequirementBase], *args: int) -> RequirementBase:
    try:
        return factory(*args)
    except ValidationError as exc:
        raise MalformedRequirementString(raw, str(exc.errors()[0]["msg"])) from None


def _parse_string(raw: str) -> RequirementBase:
    text = raw.strip()
    if not text:
        raise MalformedRequirementString(raw, "empty requirement")

    if ":" in text:
        type_, _, value = text.partition(":")
        if type_ not in _TYPED:
            raise UnknownRequirement(type_)
        default, factory = _TYPED[type_]
        if default is None:
            if value:
                raise MalformedRequirementString(raw, f"{type_} takes no value")
            return factory(0)
        return _build(raw, factory, _to_int(raw, value) if value else default)

    if text in _NAMED:
        return _NAMED[text]()
    if text in _TYPED:
        default, factory = _TYPED[text]
        return _build(raw, factory, default or 0)
    for pattern, factory in _NUMBERED:
        match = pattern.match(text)
        if match:
            return _build(raw, factory, _to_int(raw, match.group(1)))
    raise UnknownRequirement(text)


def parse_requirement(raw: RequirementBase | dict | str) -> RequirementBase:
    """Convert a variant, a dict, or a legacy string into a typed requirement."""
    if isinstance(raw, RequirementBase):
        return raw
    if isinstance(raw, str):
        return _parse_string(raw)
    if isinstance(raw, dict):
        kind = raw.get("kind")
        if not isinstance(kind, str):
            raise MalformedRequirementString(raw, "missing 'kind'")
        if kind not in REQUIREMENT_KINDS:
            raise UnknownRequirement(kind)
        try:
            return _requirement_adapter.validate_python(raw)
        except ValidationError as exc:
            raise MalformedRequirementString(raw, str(exc.errors()[0]["msg"])) from None
    raise UnknownRequirement(type(raw).__name__)


def parse_requirements(raw: Iterable[RequirementBase | dict | str]) -> tuple[RequirementBase, ...]:
    """Parse an ordered requirement list, preserving order."""
    return tuple(parse_requirement(r) for r in raw)


def all_met(
    requirements: Iterable[RequirementBase],
    profile: ProfileSnapshot,
    trigger: TriggerEvent | None = None,
) -> bool:
    """True when every requirement holds, checked in declaration order."""
    return all(r.is_met(profile, trigger) for r in requirements)
