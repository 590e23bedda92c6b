"""Redis cache backend (requires redis).

Uses the synchronous client: the listener treats backend calls as
blocking.
"""

from typing import Any

from routecache.errors import ConfigurationError


class RedisBackend:
    """Store cached bodies in Redis, optionally with a TTL in seconds.

    Usage::

        backend = RedisBackend(url="redis://localhost:6379/0", ttl=300)

    Pass ``client`` to reuse an existing ``redis.Redis`` instance.
    """

    __slots__ = ("_client", "ttl")

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        ttl: int | None = None,
        *,
        client: Any = None,
        **options: Any,
    ) -> None:
        if ttl is not None and ttl <= 0:
            msg = f"RedisBackend ttl must be positive, got {ttl}."
            raise ConfigurationError(msg)
        self.ttl = ttl
        if client is None:
            try:
                import redis
            except ImportError:
                msg = (
                    "RedisBackend requires the 'redis' package. "
                    "Install it with: pip install routecache[redis]"
                )
                raise ConfigurationError(msg) from None
            client = redis.Redis.from_url(url, **options)
        self._client = client

    def get(self, key: str) -> bytes | None:
        return self._client.get(key)

    def set(self, key: str, payload: bytes) -> bool:
        return bool(self._client.set(key, payload, ex=self.ttl))
