"""Profile Store tests: in-memory CAS and the Redis-backed store over a mocked client."""

from unittest.mock import AsyncMock

import pytest

from careerquest.gamification.errors import ProfileConflict
from careerquest.gamification.schemas import ProfileSnapshot
from careerquest.redis_client import close_redis, get_redis, init_redis
from careerquest.store.profile_store import (
    CAS_SCRIPT,
    InMemoryProfileStore,
    RedisProfileStore,
    get_profile_store,
)


class TestInMemoryProfileStore:
    @pytest.mark.asyncio
    async def test_unknown_user(self):
        assert await InMemoryProfileStore().load("nobody") is None

    @pytest.mark.asyncio
    async def test_save_and_load(self, new_profile):
        store = InMemoryProfileStore()
        committed = new_profile.model_copy(update={"version": 1, "experience_points": 50})
        await store.save(committed, expected_version=0)
        assert await store.load("user-1") == committed

    @pytest.mark.asyncio
    async def test_stale_version_conflicts(self, new_profile):
        store = InMemoryProfileStore()
        await store.save(new_profile.model_copy(update={"version": 1}), expected_version=0)

        with pytest.raises(ProfileConflict) as exc_info:
            await store.save(new_profile.model_copy(update={"version": 1}), expected_version=0)
        assert exc_info.value.expected_version == 0
        assert exc_info.value.actual_version == 1

        await store.save(new_profile.model_copy(update={"version": 2}), expected_version=1)
        assert (await store.load("user-1")).version == 2


class TestRedisProfileStore:
    @pytest.mark.asyncio
    async def test_missing_key(self):
        redis = AsyncMock()
        redis.hget.return_value = None
        store = RedisProfileStore(redis)

        assert await store.load("user-1") is None
        redis.hget.assert_awaited_once_with("profile:user-1", "data")

    @pytest.mark.asyncio
    async def test_load_round_trips_json(self, new_profile):
        redis = AsyncMock()
        redis.hget.return_value = new_profile.model_dump_json()
        loaded = await RedisProfileStore(redis).load("user-1")
        assert loaded == new_profile
        assert len(loaded.milestones) == 5

    @pytest.mark.asyncio
    async def test_save_runs_cas_script(self, new_profile):
        redis = AsyncMock()
        redis.eval.return_value = -1
        store = RedisProfileStore(redis, key_prefix="cq:profile:")
        committed = new_profile.model_copy(update={"version": 1})

        await store.save(committed, expected_version=0)

        args = redis.eval.call_args.args
        assert args[0] == CAS_SCRIPT
        assert args[1:4] == (1, "cq:profile:user-1", "0")
        assert ProfileSnapshot.model_validate_json(args[4]) == committed
        assert args[5] == "1"

    @pytest.mark.asyncio
    async def test_save_conflict(self, new_profile):
        redis = AsyncMock()
        redis.eval.return_value = 3
        with pytest.raises(ProfileConflict) as exc_info:
            await RedisProfileStore(redis).save(new_profile.model_copy(update={"version": 2}), expected_version=1)
        assert exc_info.value.actual_version == 3


class TestProfileStoreFactory:
    def test_get_redis_requires_init(self):
        with pytest.raises(RuntimeError):
            get_redis()

    @pytest.mark.asyncio
    async def test_store_uses_shared_pool(self):
        pool = await init_redis("redis://localhost:6379/0")
        try:
            store = get_profile_store()
            assert isinstance(store, RedisProfileStore)
            assert store.redis is pool
            assert get_redis() is pool
            assert store.key_prefix == "profile:"
        finally:
            await close_redis()
