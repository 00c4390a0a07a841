"""Achievement rule engine: evaluates the static registry against a profile."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from functools import lru_cache

from pydantic import ValidationError

from careerquest.gamification.errors import (
    ConfigurationError,
    DuplicateAchievementId,
    MalformedRequirementString,
)
from careerquest.gamification.requirements import all_met, parse_requirements
from careerquest.gamification.schemas import (
    AchievementDefinition,
    EarnedAchievement,
    ProfileSnapshot,
    TriggerEvent,
)
from careerquest.gamification.seed import ACHIEVEMENT_SEED_DATA

logger = logging.getLogger(__name__)


def load_definition(entry: dict | AchievementDefinition, require_requirements: bool = True) -> AchievementDefinition:
    """Build one definition from seed data, parsing its requirements.

    Milestone rewards are definitions without requirements, so the
    non-empty check can be switched off for them.
    """
    if isinstance(entry, AchievementDefinition):
        if require_requirements and not entry.requirements:
            raise MalformedRequirementString(entry.id, "achievement has no requirements")
        return entry

    data = dict(entry)
    raw_requirements = data.pop("requirements", None) or ()
    if require_requirements and not raw_requirements:
        raise MalformedRequirementString(data.get("id"), "achievement has no requirements")

    requirements = parse_requirements(raw_requirements)
    try:
        return AchievementDefinition(**data, requirements=requirements)
    except ValidationError as exc:
        msg = f"Invalid achievement definition {data.get('id')!r}: {exc.errors()[0]['msg']}"
        raise ConfigurationError(msg) from exc


def load_registry(seed: Iterable[dict | AchievementDefinition]) -> tuple[AchievementDefinition, ...]:
    """Validate and load a registry. Fails loud on the first bad entry."""
    definitions: list[AchievementDefinition] = []
    seen: set[str] = set()
    for entry in seed:
        definition = load_definition(entry)
        if definition.id in seen:
            raise DuplicateAchievementId(definition.id)
        seen.add(definition.id)
        definitions.append(definition)
    return tuple(definitions)


class AchievementRuleEngine:
    """Evaluates every achievement definition, in declaration order."""

    def __init__(self, definitions: Iterable[dict | AchievementDefinition] | None = None) -> None:
        self._definitions = load_registry(ACHIEVEMENT_SEED_DATA if definitions is None else definitions)
        self._by_id = {d.id: d for d in self._definitions}
        logger.debug("Loaded %d achievement definitions", len(self._definitions))

    @property
    def definitions(self) -> tuple[AchievementDefinition, ...]:
        return self._definitions

    def get(self, achievement_id: str) -> AchievementDefinition | None:
        return self._by_id.get(achievement_id)

    def evaluate(
        self,
        profile: ProfileSnapshot,
        trigger: TriggerEvent | None = None,
        now: datetime | None = None,
    ) -> list[EarnedAchievement]:
        """Return achievements newly earned by this profile.

        The whole registry is checked on every call, since streak,
        completeness and roadmap requirements have no trigger gate. Already
        earned ids are skipped. Nothing is applied to the profile.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        earned_ids = profile.earned_ids
        awarded: list[EarnedAchievement] = []

        for definition in self._definitions:
            if definition.id in earned_ids:
                continue
            if all_met(definition.requirements, profile, trigger):
                awarded.append(definition.earn(now))

        if awarded:
            logger.info(
                "User %s earned achievements: %s",
                profile.user_id,
                ", ".join(a.id for a in awarded),
            )
        return awarded


@lru_cache
def get_achievement_engine() -> AchievementRuleEngine:
    """Engine over the default registry, validated once per process."""
    return AchievementRuleEngine()
