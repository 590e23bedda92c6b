"""Cache configuration.

CacheConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups once loaded. ``CacheConfig.from_mapping``
reads the nested dict shape used by application config files.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from routecache.backends.protocol import CacheBackend
from routecache.errors import ConfigurationError
from routecache.http.response import Response
from routecache.keys import DEFAULT_PREFIX
from routecache.policy import ParamConstraint, PolicyRegistry, RoutePolicy

CONFIG_SECTION = "slm_cache"


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Response cache configuration. Immutable after creation.

    Override what you need::

        config = CacheConfig(
            routes={"blog.show": RoutePolicy(methods=frozenset({"GET"}))},
            cache={"adapter": "memory", "options": {"ttl": 300}},
            use_compression=True,
        )
    """

    # Keys
    cache_prefix: str = DEFAULT_PREFIX

    # Policies, keyed by route name
    routes: Mapping[str, RoutePolicy] = field(default_factory=dict)

    # Backend: service name, inline adapter spec, or a ready backend
    cache: str | Mapping[str, Any] | CacheBackend | None = None

    # Payload compression (zlib)
    use_compression: bool = False
    compression_level: int = 6

    # Return False to skip storing a finalized response (e.g. error statuses)
    store_filter: Callable[[Response], bool] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.routes, PolicyRegistry):
            object.__setattr__(self, "routes", PolicyRegistry(self.routes))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], **overrides: Any) -> CacheConfig:
        """Build a config from a plain mapping.

        Accepts either the full application config (with a
        ``"slm_cache"`` section) or the section itself::

            {
                "cache_prefix": "pages_",
                "cache": "page_cache",
                "use_compression": True,
                "routes": {
                    "blog.show": {"match_method": ["GET", "HEAD"]},
                    "docs.page": {"match_route_params": {"lang": ["en", "fr"]}},
                },
            }

        Keyword *overrides* win over values from *raw*.
        """
        if not isinstance(raw, Mapping):
            msg = f"Cache config must be a mapping, got {type(raw).__name__}."
            raise ConfigurationError(msg)
        section = raw.get(CONFIG_SECTION, raw)
        if not isinstance(section, Mapping):
            msg = f"'{CONFIG_SECTION}' config section must be a mapping."
            raise ConfigurationError(msg)

        prefix = section.get("cache_prefix", DEFAULT_PREFIX)
        if not isinstance(prefix, str):
            msg = "'cache_prefix' must be a string."
            raise ConfigurationError(msg)

        use_compression = section.get("use_compression", False)
        if not isinstance(use_compression, bool):
            msg = f"'use_compression' must be true or false, got {use_compression!r}."
            raise ConfigurationError(msg)

        # bool is an int subclass; True is not a level
        level = section.get("compression_level", 6)
        if isinstance(level, bool) or not isinstance(level, int):
            msg = f"'compression_level' must be an integer, got {level!r}."
            raise ConfigurationError(msg)

        values: dict[str, Any] = {
            "cache_prefix": prefix,
            "routes": parse_routes(section.get("routes") or {}),
            "cache": section.get("cache"),
            "use_compression": use_compression,
            "compression_level": level,
        }
        values.update(overrides)
        return cls(**values)


def parse_routes(raw: Mapping[str, Any]) -> PolicyRegistry:
    """Parse the ``routes`` section into a ``PolicyRegistry``."""
    if not isinstance(raw, Mapping):
        msg = "'routes' must map route names to policies."
        raise ConfigurationError(msg)
    return PolicyRegistry({name: parse_policy(name, spec) for name, spec in raw.items()})


def parse_policy(route: str, raw: Mapping[str, Any] | None) -> RoutePolicy:
    """Parse one route entry. ``None`` or ``{}`` means "cache every request"."""
    if raw is None:
        return RoutePolicy()
    if not isinstance(raw, Mapping):
        msg = f"Policy for route {route!r} must be a mapping."
        raise ConfigurationError(msg)

    methods: frozenset[str] | None = None
    if "match_method" in raw:
        methods = frozenset(m.upper() for m in _string_list(route, "match_method", raw["match_method"]))

    params: dict[str, ParamConstraint] | None = None
    if "match_route_params" in raw:
        spec = raw["match_route_params"]
        if not isinstance(spec, Mapping):
            msg = f"'match_route_params' for route {route!r} must be a mapping."
            raise ConfigurationError(msg)
        params = {}
        for name, value in spec.items():
            if isinstance(value, str):
                params[name] = value
            else:
                params[name] = frozenset(_string_list(route, f"match_route_params.{name}", value))

    return RoutePolicy(
        methods=methods,
        params=MappingProxyType(params) if params is not None else None,
    )


def _string_list(route: str, option: str, value: Any) -> list[str]:
    # A single string widens to a one-element list
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set, frozenset)) and all(isinstance(v, str) for v in value):
        return list(value)
    msg = f"'{option}' for route {route!r} must be a string or a list of strings."
    raise ConfigurationError(msg)
