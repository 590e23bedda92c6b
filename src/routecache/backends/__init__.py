"""Cache backends — anything with ``get(key)`` and ``set(key, payload)``.

Built-in adapters:
    MemoryBackend -- In-process dict with optional TTL and size cap
    RedisBackend -- Redis server (requires redis)

``resolve_backend`` turns configuration (a service name, an inline
adapter spec, or a ready instance) into a backend once, at setup.
"""

from routecache.backends.memory import MemoryBackend
from routecache.backends.protocol import CacheBackend
from routecache.backends.redis import RedisBackend
from routecache.backends.resolve import register_adapter, resolve_backend

__all__ = [
    "CacheBackend",
    "MemoryBackend",
    "RedisBackend",
    "register_adapter",
    "resolve_backend",
]
