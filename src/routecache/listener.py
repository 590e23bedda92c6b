"""Response cache listener — fetch on route, store on finish.

Attaches to a ``Pipeline``'s two hook points:

1. **route** — match the resolved route against the policies. On a
   match, look the derived key up in the backend. A hit that decodes
   becomes the response and the handler is skipped; anything else
   marks a miss and lets the request through.
2. **finish** — if the route matched and the response was not served
   from cache, encode the body and store it.

All per-request state lives on the ``RouteEvent`` under
``STATE_KEY``; the listener itself is shared and read-only.

Diagnostic header values::

    X-Slm-Cache: Fetch: Hit; route=<name>
    X-Slm-Cache: Fetch: Miss; route=<name>
    X-Slm-Cache: Storage: Success; route=<name>
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from routecache.backends.protocol import CacheBackend
from routecache.backends.resolve import resolve_backend
from routecache.codec import Codec, codec_for
from routecache.config import CacheConfig
from routecache.errors import DecodeError
from routecache.http.response import Response
from routecache.keys import derive_key
from routecache.pipeline import Pipeline, RouteEvent
from routecache.policy import MatchResult, match_route

logger = logging.getLogger("routecache")

HEADER = "X-Slm-Cache"
STATE_KEY = "routecache"


@dataclass(slots=True)
class CacheState:
    """What the route hook learned, for the finish hook to act on."""

    match: MatchResult
    key: str
    cached: bool = False


class ResponseCache:
    """Serve matched routes from a cache backend and store fresh responses.

    The backend is injected ready to use. Use ``from_config`` to resolve
    it from configuration instead::

        cache = ResponseCache.from_config(
            CacheConfig.from_mapping(settings),
            services={"page_cache": MemoryBackend(ttl=300)},
        )
        cache.attach(pipeline)
    """

    __slots__ = ("_backend", "_codec", "_config")

    def __init__(
        self,
        config: CacheConfig,
        backend: CacheBackend,
        *,
        codec: Codec | None = None,
    ) -> None:
        self._config = config
        # Validates the injected object the same way configured ones are
        self._backend = resolve_backend(backend)
        self._codec = codec or codec_for(config.use_compression, config.compression_level)

    @classmethod
    def from_config(
        cls,
        config: CacheConfig,
        services: Mapping[str, Any] | None = None,
    ) -> ResponseCache:
        """Resolve ``config.cache`` into a backend and build the listener.

        Raises ``ConfigurationError`` when the backend is missing or
        lacks ``get``/``set``.
        """
        return cls(config, resolve_backend(config.cache, services))

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def attach(self, pipeline: Pipeline) -> None:
        """Register the route and finish hooks on *pipeline*."""
        pipeline.on_route(self.on_route)
        pipeline.on_finish(self.on_finish)

    # -- Hooks --

    def on_route(self, event: RouteEvent) -> Response | None:
        """Fetch a cached response for the resolved route, if any.

        Returns the cached ``Response`` on a hit, ``None`` otherwise.
        """
        state = self._evaluate(event)
        if state is None:
            return None

        payload = self._fetch(state.key)
        if payload is not None:
            try:
                body = self._codec.decode(payload)
            except DecodeError:
                logger.warning(
                    "Discarding undecodable cache entry for route %s (key %s)",
                    state.match.route,
                    state.key,
                )
            else:
                state.cached = True
                logger.debug("Cache hit for route %s", state.match.route)
                event.response = event.response.with_body(body).with_header(
                    HEADER, f"Fetch: Hit; route={state.match.route}"
                )
                return event.response

        logger.debug("Cache miss for route %s", state.match.route)
        event.response = event.response.with_header(
            HEADER, f"Fetch: Miss; route={state.match.route}"
        )
        return None

    def on_finish(self, event: RouteEvent) -> None:
        """Store the finalized response unless it came from the cache."""
        state: CacheState | None = event.params.get(STATE_KEY)
        if state is None or state.cached:
            return

        response = event.response
        store_filter: Callable[[Response], bool] | None = self._config.store_filter
        if store_filter is not None and not store_filter(response):
            logger.debug("Store filter skipped route %s (status %d)", state.match.route, response.status)
            return

        payload = self._codec.encode(response.body_bytes)
        if not self._store(state.key, payload):
            return

        logger.debug("Stored response for route %s", state.match.route)
        event.response = response.with_header(
            HEADER, f"Storage: Success; route={state.match.route}"
        )

    # -- Internals --

    def _evaluate(self, event: RouteEvent) -> CacheState | None:
        """Match the request once and remember the outcome on the event."""
        if STATE_KEY in event.params:
            return event.params[STATE_KEY]
        route_match = event.route_match
        if route_match is None:
            return None
        match = match_route(
            self._config.routes,
            route_match.name,
            route_match.path_params,
            event.request.method,
        )
        state = None
        if match is not None:
            state = CacheState(match=match, key=derive_key(match, self._config.cache_prefix))
        # Recorded even when None so the policy check runs once per request
        event.params[STATE_KEY] = state
        return state

    def _fetch(self, key: str) -> bytes | None:
        try:
            payload = self._backend.get(key)
        except Exception:
            logger.exception("Cache backend get failed for key %s", key)
            return None
        if payload is not None and not isinstance(payload, (bytes, bytearray, memoryview)):
            logger.warning(
                "Cache backend returned %s for key %s; expected bytes",
                type(payload).__name__,
                key,
            )
            return None
        return payload

    def _store(self, key: str, payload: bytes) -> bool:
        try:
            stored = self._backend.set(key, payload)
        except Exception:
            logger.exception("Cache backend set failed for key %s", key)
            return False
        if not stored:
            logger.warning("Cache backend refused to store key %s", key)
            return False
        return True
