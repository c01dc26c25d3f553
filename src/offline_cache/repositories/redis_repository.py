"""Redis implementation of CacheStorage.

This is the default persistent backend and satisfies the CacheStorage
protocol. Layout, with ``<p>`` the configured key prefix:

- ``<p>:namespaces`` - set of namespace names
- ``<p>:ns:<namespace>:entry:<request key>`` - hash with the fields
  ``status``, ``headers`` (JSON list of name/value pairs), ``body`` (bytes) and ``stored_at``
"""

import json
import logging
import re
import time

import redis.asyncio as redis

from offline_cache.config import Settings, get_redis_client, settings
from offline_cache.entities import CachedResponse

logger = logging.getLogger(__name__)

_GLOB_CHARS = re.compile(r"([*?\[\]\\])")


def _escape_glob(value: str) -> str:
    return _GLOB_CHARS.sub(r"\\\1", value)


class RedisCacheStore:
    """Handle to one namespace stored in Redis.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, client: redis.Redis, key_prefix: str, name: str) -> None:
        self._client = client
        self._name = name
        self._entry_prefix = f"{key_prefix}:ns:{name}:entry:"

    @property
    def name(self) -> str:
        return self._name

    @property
    def entry_pattern(self) -> str:
        """SCAN pattern matching every entry of this namespace."""
        return f"{_escape_glob(self._entry_prefix)}*"

    def _entry_key(self, key: str) -> str:
        return f"{self._entry_prefix}{key}"

    async def match(self, key: str) -> CachedResponse | None:
        """Look up an entry.

        Args:
            key: Request identity

        Returns:
            The stored response, or None on a cache miss
        """
        data = await self._client.hgetall(self._entry_key(key))
        if not data:
            return None

        try:
            headers = json.loads(data.get(b"headers", b"[]"))
        except json.JSONDecodeError:
            logger.warning("Corrupt headers for %s in %s, ignoring them", key, self._name)
            headers = ()

        return CachedResponse(
            status=int(data.get(b"status", b"200")),
            headers=headers,
            body=data.get(b"body", b""),
            stored_at=float(data.get(b"stored_at", b"0")),
        )

    async def put(self, key: str, response: CachedResponse) -> None:
        """Store (or overwrite) an entry.

        Args:
            key: Request identity
            response: Response snapshot to store
        """
        entry_key = self._entry_key(key)
        pipe = self._client.pipeline()
        pipe.delete(entry_key)
        pipe.hset(
            entry_key,
            mapping={
                "status": str(response.status),
                "headers": json.dumps(response.headers),
                "body": response.body,
                "stored_at": str(time.time()),
            },
        )
        await pipe.execute()

    async def delete(self, key: str) -> bool:
        result: int = await self._client.delete(self._entry_key(key))
        return result > 0

    async def keys(self) -> list[str]:
        offset = len(self._entry_prefix)
        return [
            raw.decode()[offset:]
            async for raw in self._client.scan_iter(match=self.entry_pattern)
        ]

    async def count(self) -> int:
        count = 0
        async for _ in self._client.scan_iter(match=self.entry_pattern):
            count += 1
        return count


class RedisCacheStorage:
    """Redis-backed collection of namespaces.

    Satisfies the CacheStorage protocol. All keys live under a single
    prefix so several deployments can share one Redis database.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache storage.

        Args:
            redis_client: Async Redis client instance. If None, creates default.
            key_prefix: Prefix for every key written by this storage.
        """
        self._client = redis_client or get_redis_client()
        self._key_prefix = key_prefix or settings.redis_key_prefix
        self._namespaces_key = f"{self._key_prefix}:namespaces"

    @classmethod
    def create(cls, config: Settings | None = None) -> "RedisCacheStorage":
        """Factory method to create RedisCacheStorage from settings.

        Args:
            config: Settings to read the Redis URL and key prefix from.
                If None, uses the global settings.

        Returns:
            Configured RedisCacheStorage
        """
        config = config or settings
        return cls(
            redis_client=get_redis_client(config),
            key_prefix=config.redis_key_prefix,
        )

    async def open(self, name: str) -> RedisCacheStore:
        await self._client.sadd(self._namespaces_key, name)
        return RedisCacheStore(self._client, self._key_prefix, name)

    async def delete(self, name: str) -> bool:
        """Delete a namespace and all of its entries.

        Returns:
            True if the namespace existed, False otherwise
        """
        store = RedisCacheStore(self._client, self._key_prefix, name)
        keys = [key async for key in self._client.scan_iter(match=store.entry_pattern)]
        if keys:
            await self._client.delete(*keys)
        removed: int = await self._client.srem(self._namespaces_key, name)
        return removed > 0

    async def names(self) -> list[str]:
        members = await self._client.smembers(self._namespaces_key)
        return sorted(m.decode() if isinstance(m, bytes) else m for m in members)

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except Exception:
            return False

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
