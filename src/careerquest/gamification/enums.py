"""Closed vocabularies used across the progress engine."""

from __future__ import annotations

from enum import Enum


class ActivityKind(str, Enum):
    """Learning resource types a completed activity can have."""

    COURSE = "course"
    CERTIFICATION = "certification"
    PROJECT = "project"
    BOOK = "book"
    VIDEO = "video"
    PRACTICE = "practice"


class TriggerKind(str, Enum):
    """Event tags that cause achievements to be re-evaluated."""

    ACTIVITY_COMPLETED = "activity_completed"
    ASSESSMENT_COMPLETED = "assessment_completed"
    RECOMMENDATIONS_GENERATED = "recommendations_generated"
    ATS_IMPROVEMENT = "ats_improvement"
    CHAT_MILESTONE = "chat_milestone"
    CAREER_SELECTED = "career_selected"
    ROADMAP_GENERATED = "roadmap_generated"
    SKILL_GAP_ANALYSIS = "skill_gap_analysis"
    XP_AWARDED = "xp_awarded"
    PROFILE_UPDATED = "profile_updated"


class AchievementCategory(str, Enum):
    LEARNING = "learning"
    PROGRESS = "progress"
    CONSISTENCY = "consistency"
    MILESTONE = "milestone"
    SOCIAL = "social"


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class MilestoneCategory(str, Enum):
    ASSESSMENT = "assessment"
    LEARNING = "learning"
    SKILL = "skill"
    CAREER = "career"
    PROGRESS = "progress"


class StreakType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class TimeWindow(str, Enum):
    """Parts of the UTC day tracked by time-of-day achievements."""

    MORNING = "morning"
    NIGHT = "night"


class NotificationType(str, Enum):
    ACHIEVEMENT = "achievement"
    LEVELUP = "levelup"
    STREAK = "streak"
    MILESTONE = "milestone"


class AchievementId(str, Enum):
    """Every achievement in the static registry."""

    FIRST_COURSE = "first_course"
    COURSE_STREAK_3 = "course_streak_3"
    COURSE_STREAK_7 = "course_streak_7"
    SKILL_MASTER = "skill_master"
    ASSESSMENT_COMPLETE = "assessment_complete"
    ROADMAP_CREATED = "roadmap_created"
    HALFWAY_HERO = "halfway_hero"
    GOAL_CRUSHER = "goal_crusher"
    EARLY_BIRD = "early_bird"
    NIGHT_OWL = "night_owl"
    WEEKEND_WARRIOR = "weekend_warrior"
    CAREER_EXPLORER = "career_explorer"
    RESUME_OPTIMIZER = "resume_optimizer"
    MENTOR_SEEKER = "mentor_seeker"
    PROFILE_PERFECTIONIST = "profile_perfectionist"
    CAREER_COMMITTED = "career_committed"
    ROADMAP_READY = "roadmap_ready"
    SKILL_ANALYST = "skill_analyst"
