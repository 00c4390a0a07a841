"""Shared Redis pool for the Profile Store and the notification publisher."""

import redis.asyncio as redis
import structlog

from careerquest.config import get_settings

logger = structlog.get_logger()

_pool: redis.Redis | None = None


async def init_redis(url: str | None = None) -> redis.Redis:
    """Create the pool from ``url`` or the configured ``redis_url``."""
    global _pool  # noqa: PLW0603
    settings = get_settings()
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=settings.redis_max_connections,
    )
    logger.info("redis_pool_created", max_connections=settings.redis_max_connections)
    return _pool


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool:
        await _pool.aclose()
        _pool = None


def get_redis() -> redis.Redis:
    """The shared client. ``init_redis`` must have run first."""
    if _pool is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _pool
