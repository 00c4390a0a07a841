"""Achievement and milestone seed data: matches the dashboard's badge gallery."""

from __future__ import annotations

ACHIEVEMENT_SEED_DATA: list[dict] = [
    # Learning
    {
        "id": "first_course",
        "title": "First Steps",
        "description": "Complete your first learning activity",
        "badge_icon": "\U0001f3af",
        "category": "learning",
        "xp_reward": 50,
        "rarity": "common",
        "requirements": [{"kind": "activity_type_is", "trigger": "activity_completed"}],
    },
    {
        "id": "course_streak_3",
        "title": "Learning Momentum",
        "description": "Complete learning activities for 3 consecutive days",
        "badge_icon": "\U0001f525",
        "category": "learning",
        "xp_reward": 100,
        "rarity": "uncommon",
        "requirements": [{"kind": "daily_streak_at_least", "days": 3}],
    },
    {
        "id": "course_streak_7",
        "title": "Week Warrior",
        "description": "Complete learning activities for 7 consecutive days",
        "badge_icon": "⚡",
        "category": "learning",
        "xp_reward": 250,
        "rarity": "rare",
        "requirements": [{"kind": "daily_streak_at_least", "days": 7}],
    },
    {
        "id": "skill_master",
        "title": "Skill Master",
        "description": "Reach expert level in any skill",
        "badge_icon": "\U0001f451",
        "category": "learning",
        "xp_reward": 500,
        "rarity": "epic",
        "requirements": [{"kind": "skill_at_expert_level"}],
    },
    # Progress
    {
        "id": "assessment_complete",
        "title": "Self-Aware",
        "description": "Complete your career assessment",
        "badge_icon": "\U0001f9e0",
        "category": "progress",
        "xp_reward": 100,
        "rarity": "common",
        "requirements": [{"kind": "assessment_completed"}],
    },
    {
        "id": "roadmap_created",
        "title": "Path Finder",
        "description": "Generate your first learning roadmap",
        "badge_icon": "\U0001f5fa️",
        "category": "progress",
        "xp_reward": 75,
        "rarity": "common",
        "requirements": [{"kind": "careers_explored_at_least", "count": 1}],
    },
    {
        "id": "halfway_hero",
        "title": "Halfway Hero",
        "description": "Reach 50% completion on your career roadmap",
        "badge_icon": "\U0001f3c3",
        "category": "progress",
        "xp_reward": 300,
        "rarity": "uncommon",
        "requirements": [{"kind": "roadmap_progress_at_least", "percent": 50}],
    },
    {
        "id": "goal_crusher",
        "title": "Goal Crusher",
        "description": "Complete your entire career roadmap",
        "badge_icon": "\U0001f3c6",
        "category": "progress",
        "xp_reward": 1000,
        "rarity": "legendary",
        "requirements": [{"kind": "roadmap_progress_at_least", "percent": 100}],
    },
    # Consistency
    {
        "id": "early_bird",
        "title": "Early Bird",
        "description": "Complete activities before 9 AM for 5 days",
        "badge_icon": "\U0001f305",
        "category": "consistency",
        "xp_reward": 150,
        "rarity": "uncommon",
        "requirements": [{"kind": "time_of_day_activity_days", "window": "morning", "days": 5}],
    },
    {
        "id": "night_owl",
        "title": "Night Owl",
        "description": "Complete activities after 9 PM for 5 days",
        "badge_icon": "\U0001f989",
        "category": "consistency",
        "xp_reward": 150,
        "rarity": "uncommon",
        "requirements": [{"kind": "time_of_day_activity_days", "window": "night", "days": 5}],
    },
    {
        "id": "weekend_warrior",
        "title": "Weekend Warrior",
        "description": "Stay active on weekends for 4 consecutive weeks",
        "badge_icon": "⚔️",
        "category": "consistency",
        "xp_reward": 200,
        "rarity": "rare",
        "requirements": [{"kind": "weekend_active_weeks", "weeks": 4}],
    },
    # Milestone
    {
        "id": "career_explorer",
        "title": "Career Explorer",
        "description": "Explore 5 different career recommendations",
        "badge_icon": "\U0001f50d",
        "category": "milestone",
        "xp_reward": 125,
        "rarity": "common",
        "requirements": [{"kind": "careers_explored_at_least", "count": 5}],
    },
    {
        "id": "resume_optimizer",
        "title": "Resume Optimizer",
        "description": "Improve your ATS score by 20 points",
        "badge_icon": "\U0001f4c4",
        "category": "milestone",
        "xp_reward": 200,
        "rarity": "uncommon",
        "requirements": [{"kind": "ats_improvement_at_least", "points": 20}],
    },
    {
        "id": "mentor_seeker",
        "title": "Mentor Seeker",
        "description": "Have 10 conversations with the AI career mentor",
        "badge_icon": "\U0001f4ac",
        "category": "milestone",
        "xp_reward": 175,
        "rarity": "uncommon",
        "requirements": [{"kind": "chat_milestone", "count": 10}],
    },
    # Social
    {
        "id": "profile_perfectionist",
        "title": "Profile Perfectionist",
        "description": "Complete 100% of your profile information",
        "badge_icon": "✨",
        "category": "social",
        "xp_reward": 100,
        "rarity": "common",
        "requirements": [{"kind": "profile_completeness_at_least", "percent": 100}],
    },
    # Career selection
    {
        "id": "career_committed",
        "title": "Career Committed",
        "description": "Select your target career path",
        "badge_icon": "\U0001f3af",
        "category": "milestone",
        "xp_reward": 100,
        "rarity": "common",
        "requirements": [{"kind": "career_selected"}],
    },
    {
        "id": "roadmap_ready",
        "title": "Roadmap Ready",
        "description": "Generate your personalized learning roadmap",
        "badge_icon": "\U0001f5fa️",
        "category": "milestone",
        "xp_reward": 150,
        "rarity": "uncommon",
        "requirements": [{"kind": "roadmap_generated"}],
    },
    {
        "id": "skill_analyst",
        "title": "Skill Analyst",
        "description": "Complete your first skill gap analysis",
        "badge_icon": "\U0001f4ca",
        "category": "milestone",
        "xp_reward": 125,
        "rarity": "uncommon",
        "requirements": [{"kind": "skill_gap_analysis_done"}],
    },
]

# Installed on every new profile. Requirements use the compact milestone vocabulary.
MILESTONE_SEED_DATA: list[dict] = [
    {
        "id": "first_assessment",
        "title": "Complete Career Assessment",
        "description": "Take your first career assessment to discover your path",
        "category": "assessment",
        "requirements": ["assessment_complete"],
        "order": 1,
        "reward": {
            "id": "milestone_first_assessment",
            "title": "Assessment Pioneer",
            "description": "Completed first career assessment",
            "badge_icon": "\U0001f3af",
            "category": "milestone",
            "xp_reward": 100,
            "rarity": "common",
        },
    },
    {
        "id": "first_skill",
        "title": "Learn Your First Skill",
        "description": "Complete learning activities for your first skill",
        "category": "learning",
        "requirements": ["skills_learned:1"],
        "order": 2,
        "reward": {
            "id": "milestone_first_skill",
            "title": "Skill Starter",
            "description": "Started learning your first skill",
            "badge_icon": "\U0001f4da",
            "category": "milestone",
            "xp_reward": 75,
            "rarity": "common",
        },
    },
    {
        "id": "week_streak",
        "title": "One Week Streak",
        "description": "Maintain learning activity for 7 consecutive days",
        "category": "learning",
        "requirements": ["streak_days:7"],
        "order": 3,
        "reward": {
            "id": "milestone_week_streak",
            "title": "Week Warrior",
            "description": "Maintained a 7-day learning streak",
            "badge_icon": "\U0001f525",
            "category": "milestone",
            "xp_reward": 200,
            "rarity": "uncommon",
        },
    },
    {
        "id": "halfway_complete",
        "title": "Halfway There",
        "description": "Reach 50% completion on your learning roadmap",
        "category": "progress",
        "requirements": ["progress_percentage:50"],
        "order": 4,
        "reward": {
            "id": "milestone_halfway",
            "title": "Halfway Hero",
            "description": "Reached 50% completion on roadmap",
            "badge_icon": "\U0001f3c3",
            "category": "milestone",
            "xp_reward": 300,
            "rarity": "uncommon",
        },
    },
    {
        "id": "level_five",
        "title": "Reach Level 5",
        "description": "Advance to level 5 in your career journey",
        "category": "progress",
        "requirements": ["level_reached:5"],
        "order": 5,
        "reward": {
            "id": "milestone_level_five",
            "title": "Rising Star",
            "description": "Reached level 5 in career development",
            "badge_icon": "⭐",
            "category": "milestone",
            "xp_reward": 250,
            "rarity": "rare",
        },
    },
]
