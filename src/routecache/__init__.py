"""routecache — selective response caching for named routes.

Policies pick which routes (and which methods and parameter values) are
cacheable. Matching requests are served from a cache backend when an
entry exists and stored once their response is finalized.

Basic usage::

    from routecache import CacheConfig, MemoryBackend, Pipeline, ResponseCache

    pipeline = Pipeline()

    @pipeline.route("/blog/{id}", name="blog.show")
    def show(id: str):
        return f"Post {id}"

    config = CacheConfig.from_mapping({
        "routes": {"blog.show": {"match_method": "GET"}},
        "cache": {"adapter": "memory", "options": {"ttl": 300}},
    })
    ResponseCache.from_config(config).attach(pipeline)
"""

__version__ = "0.1.0"
__all__ = [
    "CacheBackend",
    "CacheConfig",
    "ConfigurationError",
    "DecodeError",
    "MatchResult",
    "MemoryBackend",
    "Pipeline",
    "PolicyRegistry",
    "RedisBackend",
    "Request",
    "Response",
    "ResponseCache",
    "RouteCacheError",
    "RouteEvent",
    "RoutePolicy",
    "derive_key",
    "match_route",
    "resolve_backend",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routecache`` fast while providing a clean top-level API.
    """
    if name == "CacheConfig":
        from routecache.config import CacheConfig

        return CacheConfig

    if name == "ResponseCache":
        from routecache.listener import ResponseCache

        return ResponseCache

    if name in ("Pipeline", "RouteEvent"):
        from routecache import pipeline as _pipeline

        return getattr(_pipeline, name)

    if name in ("Request", "Response"):
        from routecache import http as _http

        return getattr(_http, name)

    if name in ("MatchResult", "PolicyRegistry", "RoutePolicy", "match_route"):
        from routecache import policy as _policy

        return getattr(_policy, name)

    if name == "derive_key":
        from routecache.keys import derive_key

        return derive_key

    if name in ("CacheBackend", "MemoryBackend", "RedisBackend", "resolve_backend"):
        from routecache import backends as _backends

        return getattr(_backends, name)

    if name in ("ConfigurationError", "DecodeError", "RouteCacheError"):
        from routecache import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
