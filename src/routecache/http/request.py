"""Immutable HTTP request.

Only the metadata a route-level cache needs: method and path.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    The method is upper-cased on creation so policy checks never have
    to care how the caller spelled it.
    """

    method: str
    path: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
