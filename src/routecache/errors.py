"""routecache exception hierarchy.

Shared across config loading, backend resolution, codecs, and the
listener so every module raises and catches the same types.
"""


class RouteCacheError(Exception):
    """Base for all routecache-specific errors."""


class ConfigurationError(RouteCacheError):
    """Raised when cache configuration is invalid.

    Always raised while building the ``ResponseCache``, never while a
    request is being handled.
    """


class DecodeError(RouteCacheError):
    """A stored payload could not be decoded.

    Recoverable: the listener treats it as a cache miss.
    """
