"""Level thresholds and computation.

These values MUST match the dashboard's level display exactly.
"""

from __future__ import annotations

from careerquest.gamification.schemas import LevelInfo

# Cumulative XP at which each level begins; index 0 is level 1.
XP_REQUIREMENTS: tuple[int, ...] = (
    0,
    100,
    250,
    450,
    700,
    1000,
    1350,
    1750,
    2200,
    2700,
    3250,
    3850,
    4500,
    5200,
    5950,
    6750,
    7600,
    8500,
    9450,
    10450,
)

# One title per two levels.
LEVEL_TITLES: tuple[str, ...] = (
    "Career Novice",
    "Skill Seeker",
    "Path Explorer",
    "Growth Minded",
    "Career Focused",
    "Skill Builder",
    "Progress Maker",
    "Goal Achiever",
    "Career Expert",
    "Master Professional",
)

MAX_LEVEL = 20


def level_title(level: int) -> str:
    """Title for a level, clamped to the last bucket."""
    return LEVEL_TITLES[min((level - 1) // 2, len(LEVEL_TITLES) - 1)]


def level_of(total_xp: int) -> LevelInfo:
    """Compute level info from total XP."""
    if total_xp < 0:
        msg = f"total_xp must be non-negative, got {total_xp}"
        raise ValueError(msg)

    current_level = 1
    for i in range(len(XP_REQUIREMENTS) - 1, -1, -1):
        if total_xp >= XP_REQUIREMENTS[i]:
            current_level = i + 1
            break
    current_level = min(current_level, MAX_LEVEL)

    # At max level the "next" threshold is the last one, so nothing remains.
    next_level_xp = XP_REQUIREMENTS[current_level] if current_level < MAX_LEVEL else XP_REQUIREMENTS[MAX_LEVEL - 1]
    level_start_xp = XP_REQUIREMENTS[current_level - 1]

    return LevelInfo(
        current_level=current_level,
        current_xp=total_xp,
        xp_to_next_level=max(0, next_level_xp - total_xp),
        total_xp_required=next_level_xp,
        level_title=level_title(current_level),
        xp_into_level=total_xp - level_start_xp,
        xp_for_level=next_level_xp - level_start_xp,
    )


def level_number(total_xp: int) -> int:
    """Shortcut for level_of(total_xp).current_level."""
    return level_of(total_xp).current_level
