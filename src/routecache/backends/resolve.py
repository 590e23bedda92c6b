"""Backend resolution — configuration to a ready backend, once.

Three accepted shapes::

    "page_cache"                                   # named service
    {"adapter": "memory", "options": {"ttl": 60}}  # inline adapter spec
    MemoryBackend()                                 # instance, used as-is

Everything else fails fast with ``ConfigurationError``.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from routecache.backends.memory import MemoryBackend
from routecache.backends.protocol import CacheBackend
from routecache.backends.redis import RedisBackend
from routecache.errors import ConfigurationError

logger = logging.getLogger("routecache")

_ADAPTERS: dict[str, Callable[..., Any]] = {
    "memory": MemoryBackend,
    "redis": RedisBackend,
}


def register_adapter(name: str, factory: Callable[..., Any]) -> None:
    """Make *factory* available to inline specs as ``{"adapter": name}``."""
    _ADAPTERS[name.lower()] = factory


def _is_backend(obj: object) -> bool:
    # A class has get/set attributes too; only instances are backends
    return (
        not isinstance(obj, type)
        and isinstance(obj, CacheBackend)
        and callable(getattr(obj, "get", None))
        and callable(getattr(obj, "set", None))
    )


def _from_service(name: str, services: Mapping[str, Any] | None) -> Any:
    if not services or name not in services:
        msg = f"Cache backend service {name!r} is not registered."
        raise ConfigurationError(msg)
    service = services[name]
    # Services may be registered as zero-argument factories
    if isinstance(service, type) or (not _is_backend(service) and callable(service)):
        try:
            service = service()
        except TypeError as exc:
            msg = f"Cache backend service {name!r} could not be built without arguments: {exc}"
            raise ConfigurationError(msg) from exc
    return service


def _from_spec(spec: Mapping[str, Any]) -> Any:
    adapter = spec.get("adapter")
    if not isinstance(adapter, str) or not adapter:
        msg = "Inline cache config needs an 'adapter' name, e.g. {'adapter': 'memory'}."
        raise ConfigurationError(msg)
    factory = _ADAPTERS.get(adapter.lower())
    if factory is None:
        known = ", ".join(sorted(_ADAPTERS))
        msg = f"Unknown cache adapter {adapter!r}. Known adapters: {known}"
        raise ConfigurationError(msg)
    options = spec.get("options") or {}
    if not isinstance(options, Mapping):
        msg = f"Options for cache adapter {adapter!r} must be a mapping."
        raise ConfigurationError(msg)
    try:
        return factory(**options)
    except TypeError as exc:
        msg = f"Invalid options for cache adapter {adapter!r}: {exc}"
        raise ConfigurationError(msg) from exc


def resolve_backend(
    spec: str | Mapping[str, Any] | CacheBackend | None,
    services: Mapping[str, Any] | None = None,
) -> CacheBackend:
    """Resolve *spec* into a backend exposing ``get`` and ``set``.

    Raises ``ConfigurationError`` if *spec* is missing, names an unknown
    service or adapter, or resolves to an object without ``get``/``set``.
    """
    if spec is None:
        msg = "Cache must be configured: set 'cache' to a service name or adapter spec."
        raise ConfigurationError(msg)

    if isinstance(spec, str):
        backend = _from_service(spec, services)
        source = f"service {spec!r}"
    elif isinstance(spec, Mapping):
        backend = _from_spec(spec)
        source = f"adapter {spec.get('adapter')!r}"
    else:
        backend = spec
        source = type(spec).__name__

    if not _is_backend(backend):
        msg = f"Cache backend from {source} does not provide get(key) and set(key, payload)."
        raise ConfigurationError(msg)

    logger.debug("Resolved cache backend from %s: %s", source, type(backend).__name__)
    return backend
