"""Cache policies and request matching.

A policy says which requests to a named route may be cached: an
optional set of HTTP methods and optional constraints on route
parameters. Matching is pure — no I/O, no mutation — so the listener
can run it once per request and keep the result.

Usage::

    registry = PolicyRegistry({
        "blog.show": RoutePolicy(methods=frozenset({"GET"})),
        "docs.page": RoutePolicy(params={"lang": frozenset({"en", "fr"})}),
    })
    match = match_route(registry, "blog.show", {"id": "5"}, "GET")
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeAlias

# A literal value, or the set of accepted values
ParamConstraint: TypeAlias = str | frozenset[str]


@dataclass(frozen=True, slots=True)
class RoutePolicy:
    """Cache eligibility rules for one route. Immutable once loaded.

    ``None`` for either field means "no constraint".
    """

    methods: frozenset[str] | None = None
    params: Mapping[str, ParamConstraint] | None = None

    def __post_init__(self) -> None:
        if self.methods is not None:
            object.__setattr__(self, "methods", frozenset(m.upper() for m in self.methods))
        if self.params is not None:
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def allows_method(self, method: str) -> bool:
        return self.methods is None or method.upper() in self.methods

    def allows_params(self, parameters: Mapping[str, Any]) -> bool:
        if not self.params:
            return True
        for name, constraint in self.params.items():
            if name not in parameters:
                return False
            value = parameters[name]
            if isinstance(constraint, str):
                if value != constraint:
                    return False
            elif value not in constraint:
                return False
        return True


class PolicyRegistry(Mapping[str, RoutePolicy]):
    """Read-only mapping of route name to ``RoutePolicy``."""

    __slots__ = ("_policies",)

    def __init__(self, policies: Mapping[str, RoutePolicy] | None = None) -> None:
        self._policies: Mapping[str, RoutePolicy] = MappingProxyType(dict(policies or {}))

    def __getitem__(self, name: str) -> RoutePolicy:
        return self._policies[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._policies)

    def __len__(self) -> int:
        return len(self._policies)

    def __repr__(self) -> str:
        return f"PolicyRegistry({sorted(self._policies)!r})"


@dataclass(frozen=True, slots=True)
class MatchResult:
    """A request that satisfied a route's cache policy.

    Lives for one request: created when the route resolves, consumed
    when the response is finalized.
    """

    route: str
    policy: RoutePolicy
    parameters: Mapping[str, Any]


def match_route(
    registry: Mapping[str, RoutePolicy],
    route_name: str,
    parameters: Mapping[str, Any],
    method: str,
) -> MatchResult | None:
    """Evaluate a resolved route against *registry*.

    Returns ``None`` when the route has no policy, the method is not
    allowed, or a parameter constraint fails. A literal constraint needs
    exact equality; a set constraint needs membership. A parameter the
    route did not capture never satisfies a constraint.
    """
    policy = registry.get(route_name)
    if policy is None:
        return None
    if not policy.allows_method(method):
        return None
    if not policy.allows_params(parameters):
        return None
    return MatchResult(
        route=route_name,
        policy=policy,
        parameters=MappingProxyType(dict(parameters)),
    )
