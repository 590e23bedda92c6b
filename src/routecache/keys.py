"""Cache key derivation.

Keys are a SHA-1 digest of a versioned canonical encoding of the route
name and its parameters, behind a namespace prefix. The encoding sorts
parameters by name and length-prefixes every field, so two distinct
``(route, parameters)`` pairs never share an encoding and the same pair
always produces the same key in any process.

Encoding (``v1``)::

    v1|<len>:<route>|<count>|<len>:<name>=<len>:<len>:<type><value>|...
"""

import hashlib
from collections.abc import Mapping
from typing import Any

from routecache.policy import MatchResult

KEY_VERSION = "v1"
DEFAULT_PREFIX = "slm_cache_"


def _field(value: str) -> str:
    return f"{len(value)}:{value}"


# Values whose str() is stable across processes and independent of iteration order
SCALAR_TYPES = (str, int, float, bool, type(None))


def _value(value: Any) -> str:
    if not isinstance(value, SCALAR_TYPES):
        msg = (
            f"Cannot derive a cache key from a {type(value).__name__} parameter; "
            "route parameters must be str, int, float, bool, or None."
        )
        raise TypeError(msg)
    # Type-tagged so 5 and "5" stay distinct keys
    text = value if isinstance(value, str) else str(value)
    return _field(f"{_field(type(value).__name__)}{text}")


def canonical_encoding(route: str, parameters: Mapping[str, Any]) -> bytes:
    """Deterministic byte encoding of a route name and its parameters.

    Raises ``TypeError`` for parameter values that are not scalars.
    """
    parts = [KEY_VERSION, _field(route), str(len(parameters))]
    for name in sorted(parameters):
        parts.append(f"{_field(name)}={_value(parameters[name])}")
    return "|".join(parts).encode("utf-8")


def derive_key(match: MatchResult, prefix: str = DEFAULT_PREFIX) -> str:
    """Return the cache key for *match*.

    Pure: identical route names and parameters give identical keys,
    regardless of parameter insertion order.
    """
    digest = hashlib.sha1(canonical_encoding(match.route, match.parameters)).hexdigest()  # noqa: S324
    return f"{prefix}{digest}"
