"""Routing — named routes with ``{param}`` segments.

Route resolution is what the cache listens to: a resolved route name
plus its parameters is the input to policy matching.
"""

from routecache.routing.route import Route, RouteMatch
from routecache.routing.router import Router, parse_path

__all__ = ["Route", "RouteMatch", "Router", "parse_path"]
