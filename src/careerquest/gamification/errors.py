"""Gamification error taxonomy.

Configuration errors are raised while loading achievement registries and
milestone sets, never while evaluating them. ``InvalidAward`` is the only
invocation error the engine raises.
"""

from __future__ import annotations


class GamificationError(Exception):
    """Base class for all progress engine errors."""


class ConfigurationError(GamificationError):
    """Registry or milestone configuration is invalid."""


class UnknownRequirement(ConfigurationError):
    """A requirement names a kind the engine does not recognise."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unknown requirement kind: {kind!r}")


class MalformedRequirementString(ConfigurationError):
    """A requirement was recognised but its value could not be parsed."""

    def __init__(self, raw: object, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed requirement {raw!r}: {reason}")


class DuplicateAchievementId(ConfigurationError):
    """Two registry entries share the same achievement id."""

    def __init__(self, achievement_id: str) -> None:
        self.achievement_id = achievement_id
        super().__init__(f"Duplicate achievement id: {achievement_id!r}")


class InvalidAward(GamificationError, ValueError):
    """An XP award was requested with a negative amount."""

    def __init__(self, amount: int) -> None:
        self.amount = amount
        super().__init__(f"XP award must be non-negative, got {amount}")


class ProfileNotFound(GamificationError):
    """No profile snapshot exists for the requested user."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Profile not found: {user_id}")


class ProfileConflict(GamificationError):
    """A compare-and-swap commit lost against a concurrent writer."""

    def __init__(self, user_id: str, expected_version: int, actual_version: int | None) -> None:
        self.user_id = user_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Profile {user_id} version conflict: expected {expected_version}, found {actual_version}"
        )
