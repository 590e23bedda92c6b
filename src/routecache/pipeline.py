"""Request pipeline with two interception points.

Hooks attach to named points in a request's life instead of wrapping
the whole call like middleware:

- ``route`` hooks run after the router resolves the request and before
  the handler. Returning a ``Response`` short-circuits the handler.
- ``finish`` hooks run after the response is produced, for every
  request, including unrouted ones and short-circuited ones.

Hooks may be ``def`` or ``async def``. Each receives the request's
``RouteEvent``, the only place per-request state lives.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from routecache._internal.invoke import invoke
from routecache.http.request import Request
from routecache.http.response import Response
from routecache.routing.route import Route, RouteMatch
from routecache.routing.router import Router

Hook: TypeAlias = Callable[["RouteEvent"], Any]


@dataclass(slots=True)
class RouteEvent:
    """Per-request state shared by all hooks.

    ``response`` is the response under construction; hooks replace it
    with ``.with_*()`` copies. ``params`` is a scratch namespace keyed
    by whoever owns the entry.
    """

    request: Request
    response: Response = field(default_factory=Response)
    route_match: RouteMatch | None = None
    params: dict[str, Any] = field(default_factory=dict)


class Pipeline:
    """Route, dispatch, and finalize requests through hook points.

    Usage::

        pipeline = Pipeline()

        @pipeline.route("/blog/{id}", name="blog.show")
        def show(id: str):
            return f"Post {id}"

        pipeline.on_route(my_route_hook)
        pipeline.on_finish(my_finish_hook)

        response = await pipeline(Request("GET", "/blog/5"))
    """

    __slots__ = ("_finish_hooks", "_route_hooks", "router")

    def __init__(self, router: Router | None = None) -> None:
        self.router = router or Router()
        self._route_hooks: list[Hook] = []
        self._finish_hooks: list[Hook] = []

    # -- Setup --

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a handler. Path parameters arrive as keyword arguments."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.router.add(Route(path=path, handler=handler, methods=frozenset(methods), name=name))
            return handler

        return decorator

    def on_route(self, hook: Hook) -> Hook:
        """Run *hook* once the route is resolved, before the handler."""
        self._route_hooks.append(hook)
        return hook

    def on_finish(self, hook: Hook) -> Hook:
        """Run *hook* once the response is produced."""
        self._finish_hooks.append(hook)
        return hook

    # -- Dispatch --

    async def __call__(self, request: Request) -> Response:
        event = RouteEvent(request=request)
        match = self.router.match(request.method, request.path)

        if match is None:
            event.response = _unrouted(self.router, request)
        else:
            event.route_match = match
            if not await self._run_route_hooks(event):
                result = await invoke(match.route.handler, **match.path_params)
                event.response = _merge(event.response, result)

        for hook in self._finish_hooks:
            await invoke(hook, event)
        return event.response

    async def _run_route_hooks(self, event: RouteEvent) -> bool:
        """Run route hooks; True if one short-circuited with a Response."""
        for hook in self._route_hooks:
            result = await invoke(hook, event)
            if isinstance(result, Response):
                event.response = result
                return True
        return False


def _merge(pending: Response, result: Any) -> Response:
    """Fold a handler's return value into the pending response.

    Headers added by route hooks stay in front of the handler's own.
    """
    if isinstance(result, Response):
        return Response(
            body=result.body,
            status=result.status,
            content_type=result.content_type,
            headers=(*pending.headers, *result.headers),
        )
    if isinstance(result, (str, bytes)):
        return pending.with_body(result)
    msg = f"Handler returned {type(result).__name__}; expected str, bytes, or Response."
    raise TypeError(msg)


def _unrouted(router: Router, request: Request) -> Response:
    allowed = router.allowed_methods(request.path)
    if allowed:
        return Response("Method Not Allowed", status=405).with_header(
            "Allow", ", ".join(sorted(allowed))
        )
    return Response("Not Found", status=404)
