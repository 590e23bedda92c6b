"""In-process cache backend."""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable

from routecache.errors import ConfigurationError


class MemoryBackend:
    """Dict-backed store with optional expiry and LRU size cap.

    Shared across requests, so the dict is guarded by a lock.

    Usage::

        backend = MemoryBackend(ttl=60, max_entries=1024)
    """

    __slots__ = ("_clock", "_entries", "_lock", "max_entries", "ttl")

    def __init__(
        self,
        ttl: float | None = None,
        max_entries: int | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl is not None and ttl <= 0:
            msg = f"MemoryBackend ttl must be positive, got {ttl}."
            raise ConfigurationError(msg)
        if max_entries is not None and max_entries < 1:
            msg = f"MemoryBackend max_entries must be at least 1, got {max_entries}."
            raise ConfigurationError(msg)
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[bytes, float | None]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            payload, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return payload

    def set(self, key: str, payload: bytes) -> bool:
        expires_at = self._clock() + self.ttl if self.ttl is not None else None
        with self._lock:
            self._entries[key] = (bytes(payload), expires_at)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
