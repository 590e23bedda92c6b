"""Router with segment-wise path matching.

Routes are registered during setup and matched in registration order,
static segments before parameter segments at each depth.
"""

from dataclasses import dataclass

from routecache.errors import ConfigurationError
from routecache.routing.route import Route, RouteMatch


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"       -> [PathSegment("users")]
        "/users/{id}"  -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = f"Route {path!r} uses <param> syntax; use {{param}} instead."
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            name = part[1:-1]
            if not name:
                msg = f"Route {path!r} has an unnamed parameter segment."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        else:
            segments.append(PathSegment(value=part))
    return segments


class Router:
    """Route table keyed by path shape.

    Usage::

        router = Router()
        router.add(Route("/blog/{id}", show, frozenset({"GET"}), name="blog.show"))
        match = router.match("GET", "/blog/5")
        match.name         # "blog.show"
        match.path_params  # {"id": "5"}
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[tuple[Route, list[PathSegment]]] = []

    def add(self, route: Route) -> None:
        """Register a route. Method names are stored upper-case."""
        methods = frozenset(m.upper() for m in route.methods)
        route = Route(path=route.path, handler=route.handler, methods=methods, name=route.name)
        self._routes.append((route, parse_path(route.path)))

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Match a request method and path. ``None`` when nothing matches."""
        method = method.upper()
        for route, params in self._candidates(path):
            if method in route.methods:
                return RouteMatch(route=route, path_params=params)
        return None

    def allowed_methods(self, path: str) -> frozenset[str]:
        """Methods any route matching *path* accepts (empty if none)."""
        allowed: set[str] = set()
        for route, _ in self._candidates(path):
            allowed.update(route.methods)
        return frozenset(allowed)

    def _candidates(self, path: str) -> list[tuple[Route, dict[str, str]]]:
        parts = [p for p in path.strip("/").split("/") if p]
        matched: list[tuple[Route, dict[str, str], int]] = []
        for route, segments in self._routes:
            params = _match_segments(segments, parts)
            if params is not None:
                static = sum(1 for seg in segments if not seg.is_param)
                matched.append((route, params, static))
        # More static segments wins; ties keep registration order
        matched.sort(key=lambda item: -item[2])
        return [(route, params) for route, params, _ in matched]


def _match_segments(segments: list[PathSegment], parts: list[str]) -> dict[str, str] | None:
    if len(segments) != len(parts):
        return None
    params: dict[str, str] = {}
    for seg, part in zip(segments, parts, strict=True):
        if seg.is_param:
            params[seg.param_name or ""] = part
        elif seg.value != part:
            return None
    return params
