"""Pydantic models for the progress engine.

Every model is frozen: the engine never mutates a snapshot, it produces a new
one with ``model_copy(update=...)``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from careerquest.gamification.enums import (
    AchievementCategory,
    ActivityKind,
    MilestoneCategory,
    NotificationType,
    Rarity,
    SkillLevel,
    StreakType,
    TriggerKind,
)
from careerquest.gamification.requirements import Requirement


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


def _coerce_activity_kind(value: object) -> object:
    if isinstance(value, str) and not isinstance(value, ActivityKind):
        try:
            return ActivityKind(value)
        except ValueError:
            return value
    return value


# --- Level ---


class LevelInfo(FrozenModel):
    current_level: int
    current_xp: int
    xp_to_next_level: int
    total_xp_required: int
    level_title: str
    xp_into_level: int = 0
    xp_for_level: int = 0

    @property
    def progress_percent(self) -> float:
        """Progress through the current level, 100 at max level."""
        if self.xp_for_level <= 0:
            return 100.0
        return self.xp_into_level / self.xp_for_level * 100


# --- Streak ---


class StreakRecord(FrozenModel):
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_activity_date: datetime | None = None
    streak_type: StreakType = StreakType.DAILY
    streak_goal: int = Field(default=7, ge=1)

    @model_validator(mode="after")
    def check_longest_covers_current(self) -> StreakRecord:
        if self.longest_streak < self.current_streak:
            msg = f"longest_streak ({self.longest_streak}) < current_streak ({self.current_streak})"
            raise ValueError(msg)
        return self


# --- Achievements ---


class EarnedAchievement(FrozenModel):
    id: str
    title: str
    description: str = ""
    badge_icon: str = ""
    category: AchievementCategory
    rarity: Rarity
    xp_reward: int = Field(ge=0)
    earned_at: datetime


class AchievementDefinition(FrozenModel):
    id: str
    title: str
    description: str
    badge_icon: str = ""
    category: AchievementCategory
    xp_reward: int = Field(ge=0)
    rarity: Rarity
    requirements: tuple[Requirement, ...] = ()

    def earn(self, now: datetime) -> EarnedAchievement:
        """Freeze this definition into an earned record."""
        return EarnedAchievement(
            id=self.id,
            title=self.title,
            description=self.description,
            badge_icon=self.badge_icon,
            category=self.category,
            rarity=self.rarity,
            xp_reward=self.xp_reward,
            earned_at=now,
        )


# --- Milestones ---


class Milestone(FrozenModel):
    id: str
    title: str
    description: str = ""
    category: MilestoneCategory
    requirements: tuple[Requirement, ...]
    reward: AchievementDefinition
    order: int = 0
    is_completed: bool = False
    completed_at: datetime | None = None
    estimated_time_to_complete: str | None = None


# --- Activities & triggers ---


class ActivityEvent(FrozenModel):
    """A completed learning resource, as reported by the dashboard."""

    id: str
    resource_id: str
    title: str
    # Unrecognised kinds are kept as plain strings and earn baseline XP.
    kind: ActivityKind | str
    completed_at: datetime
    time_spent_minutes: int = Field(default=60, ge=0)
    skills_gained: frozenset[str] = frozenset()
    rating: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def coerce_kind(cls, value: object) -> object:
        return _coerce_activity_kind(value)

    @classmethod
    def create(
        cls,
        resource_id: str,
        title: str,
        kind: ActivityKind | str,
        time_spent_minutes: int = 60,
        skills_gained: frozenset[str] | set[str] | list[str] = frozenset(),
        rating: int | None = None,
        notes: str | None = None,
        completed_at: datetime | None = None,
    ) -> ActivityEvent:
        """Build an activity with a fresh unique id, completed now by default."""
        return cls(
            id=f"activity_{uuid.uuid4().hex}",
            resource_id=resource_id,
            title=title,
            kind=kind,
            completed_at=completed_at or datetime.now(timezone.utc),
            time_spent_minutes=time_spent_minutes,
            skills_gained=frozenset(skills_gained),
            rating=rating,
            notes=notes,
        )


class ActivityLogEntry(FrozenModel):
    id: str
    kind: ActivityKind | str
    completed_at: datetime

    @field_validator("kind", mode="before")
    @classmethod
    def coerce_kind(cls, value: object) -> object:
        return _coerce_activity_kind(value)

    @classmethod
    def from_activity(cls, activity: ActivityEvent) -> ActivityLogEntry:
        return cls(id=activity.id, kind=activity.kind, completed_at=activity.completed_at)


class TriggerEvent(FrozenModel):
    """The event that caused an evaluation, with its optional payload."""

    kind: TriggerKind
    activity: ActivityEvent | None = None
    amount: int | None = None
    count: int | None = None
    reason: str | None = None
    career_path: str | None = None
    recommendations: tuple[str, ...] | None = None

    @classmethod
    def activity_completed(cls, activity: ActivityEvent) -> TriggerEvent:
        return cls(kind=TriggerKind.ACTIVITY_COMPLETED, activity=activity)

    @classmethod
    def assessment_completed(cls) -> TriggerEvent:
        return cls(kind=TriggerKind.ASSESSMENT_COMPLETED)

    @classmethod
    def recommendations_generated(cls, recommendations: list[str] | tuple[str, ...]) -> TriggerEvent:
        return cls(
            kind=TriggerKind.RECOMMENDATIONS_GENERATED,
            recommendations=tuple(recommendations),
            count=len(recommendations),
        )

    @classmethod
    def ats_improvement(cls, amount: int) -> TriggerEvent:
        return cls(kind=TriggerKind.ATS_IMPROVEMENT, amount=amount)

    @classmethod
    def chat_milestone(cls, count: int) -> TriggerEvent:
        return cls(kind=TriggerKind.CHAT_MILESTONE, count=count)

    @classmethod
    def career_selected(cls, career_path: str) -> TriggerEvent:
        return cls(kind=TriggerKind.CAREER_SELECTED, career_path=career_path)

    @classmethod
    def roadmap_generated(cls) -> TriggerEvent:
        return cls(kind=TriggerKind.ROADMAP_GENERATED)

    @classmethod
    def skill_gap_analysis(cls) -> TriggerEvent:
        return cls(kind=TriggerKind.SKILL_GAP_ANALYSIS)

    @classmethod
    def xp_awarded(cls, amount: int, reason: str) -> TriggerEvent:
        return cls(kind=TriggerKind.XP_AWARDED, amount=amount, reason=reason)

    @classmethod
    def profile_updated(cls) -> TriggerEvent:
        return cls(kind=TriggerKind.PROFILE_UPDATED)


# --- Profile ---


class SkillProgress(FrozenModel):
    skill_id: str
    skill_name: str
    current_level: SkillLevel = SkillLevel.BEGINNER
    progress: float = Field(default=0.0, ge=0, le=100)
    activities_completed: int = Field(default=0, ge=0)
    total_activities: int = Field(default=0, ge=0)
    last_practiced: datetime | None = None


class ProfileDetails(FrozenModel):
    name: str = ""
    age: int = 0
    education_level: str = ""
    location: str = ""
    career_interest: str = ""
    skills: tuple[str, ...] = ()


class ProfileSnapshot(FrozenModel):
    """Read-only view of one user's gamification state."""

    user_id: str
    version: int = 0
    experience_points: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    earned_achievements: tuple[EarnedAchievement, ...] = ()
    milestones: tuple[Milestone, ...] = ()
    streak: StreakRecord = StreakRecord()
    skill_progress: dict[str, SkillProgress] = Field(default_factory=dict)
    career_recommendations: tuple[str, ...] = ()
    selected_career_path: str | None = None
    assessment_completed: bool = False
    has_learning_roadmap: bool = False
    has_skill_gap_analysis: bool = False
    resume_attached: bool = False
    overall_progress: float = Field(default=0.0, ge=0, le=100)
    details: ProfileDetails = ProfileDetails()
    activity_log: tuple[ActivityLogEntry, ...] = ()
    updated_at: datetime | None = None

    @property
    def learning_activities_count(self) -> int:
        return len(self.activity_log)

    @property
    def earned_ids(self) -> frozenset[str]:
        return frozenset(a.id for a in self.earned_achievements)

    def has_activity(self, activity_id: str) -> bool:
        return any(entry.id == activity_id for entry in self.activity_log)

    @classmethod
    def new(cls, user_id: str, now: datetime | None = None, streak_goal: int = 7) -> ProfileSnapshot:
        """Fresh profile: no XP, level 1, zeroed streak, default milestones installed."""
        from careerquest.gamification.milestone_engine import default_milestones

        return cls(
            user_id=user_id,
            milestones=default_milestones(),
            streak=StreakRecord(streak_goal=streak_goal),
            updated_at=now or datetime.now(timezone.utc),
        )


# --- Outcomes ---


class Notification(FrozenModel):
    """UI-facing event describing something the learner just earned."""

    type: NotificationType
    id: str
    title: str
    message: str
    timestamp: datetime
    icon: str = ""
    xp: int | None = None
    level: int | None = None
    streak: int | None = None


class EventOutcome(FrozenModel):
    """Result of processing a non-activity trigger."""

    xp_awarded: int
    total_xp_gained: int
    new_achievements: tuple[EarnedAchievement, ...] = ()
    newly_completed_milestones: tuple[str, ...] = ()
    milestone_rewards: tuple[EarnedAchievement, ...] = ()
    leveled_up: bool = False
    new_level: int | None = None
    final_level: int = 1
    profile: ProfileSnapshot
    notifications: tuple[Notification, ...] = ()


class ActivityOutcome(EventOutcome):
    """Result of processing one completed activity."""

    updated_streak: StreakRecord
    duplicate: bool = False
