"""Profile Store: versioned snapshot persistence with compare-and-swap commits.

The engine reads a snapshot, computes the next one, and commits it here in a
single write. ``save`` succeeds only when the stored version still equals the
version the caller read, so concurrent writers for one user cannot interleave.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import structlog

from careerquest.config import get_settings
from careerquest.gamification.errors import ProfileConflict
from careerquest.gamification.schemas import ProfileSnapshot
from careerquest.redis_client import get_redis

if TYPE_CHECKING:
    import redis.asyncio as redis

logger = structlog.get_logger()

# KEYS[1] = profile key, ARGV[1] = expected version, ARGV[2] = new payload,
# ARGV[3] = new version. Returns the stored version on mismatch, -1 on success.
CAS_SCRIPT = """
local current = redis.call('HGET', KEYS[1], 'version')
if current == false then
    current = '0'
end
if current ~= ARGV[1] then
    return tonumber(current)
end
redis.call('HSET', KEYS[1], 'version', ARGV[3], 'data', ARGV[2])
return -1
"""


class ProfileStore(ABC):
    """Storage boundary for profile snapshots."""

    @abstractmethod
    async def load(self, user_id: str) -> ProfileSnapshot | None:
        """Return the stored snapshot, or None for an unknown user."""

    @abstractmethod
    async def save(self, snapshot: ProfileSnapshot, expected_version: int) -> None:
        """Store ``snapshot`` if the stored version equals ``expected_version``.

        A user with no stored snapshot has version 0.

        Raises:
            ProfileConflict: another writer committed first.
        """


class InMemoryProfileStore(ProfileStore):
    """Dict-backed store for tests and single-process use."""

    def __init__(self) -> None:
        self._profiles: dict[str, ProfileSnapshot] = {}

    async def load(self, user_id: str) -> ProfileSnapshot | None:
        return self._profiles.get(user_id)

    async def save(self, snapshot: ProfileSnapshot, expected_version: int) -> None:
        stored = self._profiles.get(snapshot.user_id)
        actual = stored.version if stored is not None else 0
        if actual != expected_version:
            raise ProfileConflict(snapshot.user_id, expected_version, actual)
        self._profiles[snapshot.user_id] = snapshot


class RedisProfileStore(ProfileStore):
    """Snapshots as JSON in a Redis hash ``{prefix}{user_id}`` with a version field."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "profile:") -> None:
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _key(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    async def load(self, user_id: str) -> ProfileSnapshot | None:
        raw = await self.redis.hget(self._key(user_id), "data")
        if raw is None:
            return None
        return ProfileSnapshot.model_validate_json(raw)

    async def save(self, snapshot: ProfileSnapshot, expected_version: int) -> None:
        result = await self.redis.eval(
            CAS_SCRIPT,
            1,
            self._key(snapshot.user_id),
            str(expected_version),
            snapshot.model_dump_json(),
            str(snapshot.version),
        )
        if int(result) != -1:
            logger.info(
                "profile_commit_conflict",
                user_id=snapshot.user_id,
                expected_version=expected_version,
                actual_version=int(result),
            )
            raise ProfileConflict(snapshot.user_id, expected_version, int(result))
        logger.debug("profile_committed", user_id=snapshot.user_id, version=snapshot.version)


def get_profile_store() -> RedisProfileStore:
    """Redis store over the shared connection pool."""
    return RedisProfileStore(get_redis(), get_settings().profile_key_prefix)
