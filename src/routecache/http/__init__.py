"""HTTP primitives — frozen request and response values."""

from routecache.http.request import Request
from routecache.http.response import Response

__all__ = ["Request", "Response"]
