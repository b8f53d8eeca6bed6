"""JSON engine, the default wire format."""

from __future__ import annotations

from typing import Any

from msgspec import json

from . import Engine


class JsonEngine(Engine):
    """Engine that serializes wire payloads using JSON."""

    NAME = 'json'
    MEDIA_TYPE = 'application/json'

    def __init__(self) -> None:
        self._encoder = json.Encoder()
        self._decoder = json.Decoder()

    def encode(self, value: Any) -> bytes:
        """Encode builtin values to JSON bytes."""
        return self._encoder.encode(value)

    def decode(self, data: bytes) -> Any:
        """Decode JSON bytes to builtin values."""
        return self._decoder.decode(data)
