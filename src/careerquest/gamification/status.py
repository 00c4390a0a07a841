"""Read-side summaries of a profile for the dashboard."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from careerquest.gamification.level_thresholds import level_of
from careerquest.gamification.milestone_engine import next_milestone
from careerquest.gamification.schemas import (
    EarnedAchievement,
    LevelInfo,
    Milestone,
    ProfileSnapshot,
    StreakRecord,
)

RECENT_ACHIEVEMENTS_LIMIT = 5


class GamificationStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: LevelInfo
    recent_achievements: tuple[EarnedAchievement, ...]
    current_streak: StreakRecord
    next_milestone: Milestone | None = None
    progress_to_next_level: float


def profile_completeness(profile: ProfileSnapshot) -> int:
    """Percentage of profile information filled in, 0-100."""
    details = profile.details
    score = 0

    # Basic info (30)
    if details.name:
        score += 10
    if details.age > 0:
        score += 5
    if details.education_level:
        score += 5
    if details.location:
        score += 5
    if details.career_interest:
        score += 5

    # Skills (20)
    if len(details.skills) > 0:
        score += 10
    if len(details.skills) >= 5:
        score += 10

    if profile.assessment_completed:
        score += 25
    if profile.resume_attached:
        score += 15
    if profile.career_recommendations:
        score += 10

    return min(score, 100)


def career_readiness(profile: ProfileSnapshot) -> int:
    """Overall career readiness score, 0-100."""
    score = 0
    if profile.assessment_completed:
        score += 20
    if profile.selected_career_path:
        score += 15
    score += min(25, len(profile.skill_progress) * 5)
    score += min(20, profile.learning_activities_count * 2)
    if profile.resume_attached:
        score += 10
    score += min(10, len(profile.earned_achievements))
    return min(score, 100)


def gamification_status(profile: ProfileSnapshot) -> GamificationStatus:
    level = level_of(profile.experience_points)
    recent = sorted(profile.earned_achievements, key=lambda a: a.earned_at, reverse=True)
    return GamificationStatus(
        level=level,
        recent_achievements=tuple(recent[:RECENT_ACHIEVEMENTS_LIMIT]),
        current_streak=profile.streak,
        next_milestone=next_milestone(profile.milestones),
        progress_to_next_level=level.progress_percent,
    )
