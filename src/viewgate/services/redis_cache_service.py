"""
Redis caching service for host catalog lookups.

Views, groups and user group memberships change rarely compared to how often
the view gate runs, so their raw payloads are cached with a short TTL under
readable keys such as ``catalog:views:42`` or ``catalog:user-groups:alice``.
Falls back to direct fetches when Redis is unavailable.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import orjson
from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisCacheService:
    """
    Redis-based cache for catalog payloads.

    - One key per namespace and subject (app id, user code)
    - Per namespace TTL
    - Graceful fallback when Redis is unavailable
    """

    def __init__(
        self,
        redis_client: Redis | None,
        default_ttl: int = 60,
        enabled: bool = True,
    ):
        """
        Initialize Redis cache service.

        Args:
            redis_client: Redis client instance (None = caching disabled)
            default_ttl: TTL in seconds for namespaces without their own
            enabled: Master switch for caching
        """
        self.redis = redis_client
        self.default_ttl = default_ttl
        self.enabled = enabled and redis_client is not None

        if self.enabled:
            try:
                self.redis.ping()
                logger.info("Redis cache service initialized successfully")
            except (RedisConnectionError, RedisError, AttributeError) as exc:
                logger.warning("Redis unavailable, caching disabled: %s", exc)
                self.enabled = False

    @staticmethod
    def cache_key(namespace: str, subject: str) -> str:
        return f"{namespace}:{subject}"

    def ttl_for(self, namespace: str) -> int:
        return CACHE_TTL_CONFIG.get(namespace, self.default_ttl)

    async def get_or_fetch(self, namespace: str, subject: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached payload of ``subject`` or await ``fetch()`` and cache it.

        Errors raised by ``fetch`` propagate unchanged and nothing is cached;
        Redis errors only cost the cache.
        """
        if not self.enabled:
            return await fetch()

        key = self.cache_key(namespace, subject)
        try:
            cached = self.redis.get(key)
        except (RedisConnectionError, RedisError) as exc:
            logger.warning("Redis GET error for %s: %s", key, exc)
            cached = None

        if cached is not None:
            logger.debug("Cache HIT: %s", key)
            return orjson.loads(cached)

        logger.debug("Cache MISS: %s", key)
        payload = await fetch()

        ttl = self.ttl_for(namespace)
        try:
            self.redis.setex(key, ttl, orjson.dumps(payload))
        except (RedisConnectionError, RedisError, TypeError) as exc:
            logger.warning("Redis SET error for %s: %s", key, exc)

        return payload

    def invalidate_pattern(self, pattern: str) -> int:
        """Delete every key matching the glob ``pattern``; returns how many went."""
        if not self.enabled:
            return 0

        try:
            keys = list(self.redis.scan_iter(match=pattern, count=100))
            deleted = self.redis.delete(*keys) if keys else 0
        except (RedisConnectionError, RedisError) as exc:
            logger.warning("Redis invalidation error for %s: %s", pattern, exc)
            return 0

        logger.info("Invalidated %d key(s) matching %s", deleted, pattern)
        return deleted


CACHE_TTL_CONFIG = {
    "catalog:views": 60,
    # editor reads the preview catalog, which changes while the admin edits views
    "catalog:preview-views": 10,
    "catalog:groups": 300,
    "catalog:user-groups": 60,
}
