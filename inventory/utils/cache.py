import json
import logging
import redis
from typing import Optional, Any

from inventory.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)

# Create Redis client
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


class CacheService:
    """
    Redis cache service for derived inventory data.

    Cache failures never fail a request: reads degrade to a miss and writes
    or deletions report False, leaving the database as the source of truth.
    """

    def __init__(self, client: redis.Redis = None, ttl: int = None):
        self.client = client or redis_client
        self.ttl = ttl or settings.CACHE_TTL

    def _make_key(self, prefix: str, key: str) -> str:
        """Create a namespaced cache key."""
        return f"{prefix}:{key}"

    def get(self, prefix: str, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            prefix: Cache key prefix (e.g., 'statistics')
            key: Unique identifier

        Returns:
            Cached value or None if not found
        """
        cache_key = self._make_key(prefix, key)
        try:
            value = self.client.get(cache_key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, json.JSONDecodeError) as e:
            logger.warning(f"Cache read failed for {cache_key}: {e}")
            return None

    def set(self, prefix: str, key: str, value: Any, ttl: int = None) -> bool:
        """
        Set a value in cache with TTL.

        Args:
            prefix: Cache key prefix
            key: Unique identifier
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds (optional, uses default if not provided)

        Returns:
            True if successful, False otherwise
        """
        cache_key = self._make_key(prefix, key)
        ttl = ttl or self.ttl
        try:
            serialized = json.dumps(value, default=str)
            self.client.setex(cache_key, ttl, serialized)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.warning(f"Cache write failed for {cache_key}: {e}")
            return False

    def incr(self, prefix: str, key: str) -> Optional[int]:
        """
        Atomically increment an integer counter.

        Returns:
            The new value, or None if Redis is unreachable
        """
        cache_key = self._make_key(prefix, key)
        try:
            return self.client.incr(cache_key)
        except redis.RedisError as e:
            logger.warning(f"Cache increment failed for {cache_key}: {e}")
            return None

    def ping(self) -> bool:
        """Check the Redis connection; raises redis.RedisError when unreachable."""
        return self.client.ping()

    def info(self) -> dict:
        """Server statistics reported by Redis."""
        info = self.client.info()
        return {
            "connected_clients": info.get("connected_clients"),
            "used_memory": info.get("used_memory_human"),
            "total_keys": self.client.dbsize(),
            "uptime_seconds": info.get("uptime_in_seconds"),
        }


# Singleton cache service instance
cache_service = CacheService()
