"""Cache backend protocol.

A backend is any object matching::

    class MyBackend:
        def get(self, key: str) -> bytes | None: ...
        def set(self, key: str, payload: bytes) -> bool: ...

No base class required. Calls are blocking; timeouts, retries, and
expiry are the backend's business.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store for cached response bodies.

    ``get`` returns ``None`` when the key is absent or expired.
    ``set`` returns a truthy value on success.
    """

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, payload: bytes) -> bool: ...
