"""Msgpack engine for clients that negotiate a binary format."""

from __future__ import annotations

from typing import Any

import msgpack

from . import Engine


class MsgpackEngine(Engine):
    """Engine backed by msgpack for compact binary payloads."""

    NAME = 'msgpack'
    MEDIA_TYPE = 'application/msgpack'
    BUILTIN_TYPES = (bytes, bytearray)

    def encode(self, value: Any) -> bytes:
        """Serialize values to msgpack bytes."""
        data = msgpack.packb(value, use_bin_type=True)
        if isinstance(data, bytes):
            return data
        if isinstance(data, bytearray):
            return bytes(data)
        raise TypeError(f'unsupported msgpack result: {type(data).__name__}')

    def decode(self, data: bytes) -> Any:
        """Decode msgpack bytes into builtin values."""
        return msgpack.unpackb(data, use_list=True, raw=False)
