"""Redis-backed cache of client snapshots keyed by slug.

Every cache operation is best-effort: Redis errors are logged and swallowed,
a failed read counts as a miss, and no request fails because of the cache.
Entries carry no expiry unless ``ttl_seconds`` is configured, so a snapshot
lives until the next update or delete evicts it.
"""

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.clients.schemas import ClientResponse
from src.core.logging import get_logger

logger = get_logger(__name__)


class ClientCache:
    """Get/set/delete of serialized ClientResponse snapshots."""

    def __init__(
        self,
        redis_client: redis.Redis,
        prefix: str = "client:",
        ttl_seconds: int | None = None,
    ) -> None:
        self._redis = redis_client
        self._prefix = prefix
        self._ttl = ttl_seconds

    def key(self, slug: str) -> str:
        return f"{self._prefix}{slug}"

    async def get(self, slug: str) -> ClientResponse | None:
        """Return the cached snapshot for slug, or None on miss or error."""
        try:
            raw = await self._redis.get(self.key(slug))
        except RedisError as e:
            logger.warning("client_cache_get_failed", slug=slug, error=str(e))
            return None

        if raw is None:
            return None

        try:
            return ClientResponse.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("client_cache_entry_invalid", slug=slug, error=str(e))
            return None

    async def set(self, snapshot: ClientResponse) -> bool:
        """Store snapshot under its slug. Returns False if Redis failed."""
        try:
            await self._redis.set(
                self.key(snapshot.slug), snapshot.model_dump_json(), ex=self._ttl
            )
        except RedisError as e:
            logger.warning("client_cache_set_failed", slug=snapshot.slug, error=str(e))
            return False
        return True

    async def delete(self, slug: str) -> bool:
        """Evict slug. Returns False if Redis failed."""
        try:
            await self._redis.delete(self.key(slug))
        except RedisError as e:
            logger.warning("client_cache_delete_failed", slug=slug, error=str(e))
            return False
        return True
