"""Payload codecs — optional compression for stored response bodies.

A codec is any object with ``encode(bytes) -> bytes`` and
``decode(bytes) -> bytes`` where ``decode(encode(x)) == x``. Decoding
foreign or corrupt data raises ``DecodeError``, never a bare
``zlib.error``.
"""

import zlib
from typing import Protocol, runtime_checkable

from routecache.errors import ConfigurationError, DecodeError


@runtime_checkable
class Codec(Protocol):
    """Symmetric transform applied to cached payloads."""

    def encode(self, data: bytes) -> bytes: ...

    def decode(self, data: bytes) -> bytes: ...


class PassthroughCodec:
    """Stores bodies as-is. Used when compression is disabled."""

    __slots__ = ()

    def encode(self, data: bytes) -> bytes:
        return bytes(data)

    def decode(self, data: bytes) -> bytes:
        return bytes(data)


class ZlibCodec:
    """zlib stream compression (the format of PHP's ``gzcompress``)."""

    __slots__ = ("level",)

    def __init__(self, level: int = 6) -> None:
        if not -1 <= level <= 9:
            msg = f"Compression level must be between -1 and 9, got {level}."
            raise ConfigurationError(msg)
        self.level = level

    def encode(self, data: bytes) -> bytes:
        return zlib.compress(data, self.level)

    def decode(self, data: bytes) -> bytes:
        try:
            return zlib.decompress(data)
        except (zlib.error, TypeError) as exc:
            raise DecodeError(f"Cannot decompress cached payload: {exc}") from exc


def codec_for(use_compression: bool, level: int = 6) -> Codec:
    """Pick the codec matching the ``use_compression`` flag."""
    if use_compression:
        return ZlibCodec(level)
    return PassthroughCodec()
