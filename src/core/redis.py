"""Redis connection pool for the client snapshot cache."""

import redis.asyncio as redis

from src.core.config import settings
from src.core.logging import get_logger

logger = get_logger(__name__)


async def create_redis_pool(redis_url: str | None = None) -> redis.Redis:
    """Create Redis connection pool.

    Usage in lifespan:
        context.redis = await create_redis_pool()
        yield
        await context.redis.aclose()

    Args:
        redis_url: Redis URL. Defaults to settings.redis_url.

    Returns:
        Redis connection pool configured with settings.
    """
    return redis.Redis.from_url(
        redis_url or settings.redis_url,
        decode_responses=True,
        max_connections=20,
    )


async def check_redis_health(pool: redis.Redis) -> bool:
    """Check if Redis is responding.

    Args:
        pool: Redis connection pool to check.

    Returns:
        True if Redis responds to ping, False otherwise.
    """
    try:
        await pool.ping()
        return True
    except Exception as e:
        logger.exception("redis_health_check_failed", error=str(e))
        return False
