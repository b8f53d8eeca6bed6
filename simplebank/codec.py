"""Per-type codecs and the registry that installs them into a mapper."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from . import errors, logs, utils
from .engine import Engine
from .engine import create as create_engine
from .mapper import Mapper

log = logs.get(__name__)

Serializer = Callable[[Any], Any]
Deserializer = Callable[[Any], Any]


class Codec(NamedTuple):
    """Serialize/deserialize pair for one entity type."""

    serializer: Serializer
    deserializer: Deserializer


class CodecRegistry:
    """Collects codecs at startup and applies them to a base engine."""

    def __init__(self) -> None:
        self._codecs: dict[type, Codec] = {}

    def register(
        self, entity_type: type, serializer: Serializer, deserializer: Deserializer
    ) -> CodecRegistry:
        """Add or replace the codec for `entity_type`. The last call wins."""
        name = utils.format.type_name(entity_type)
        if entity_type in self._codecs:
            log.debug('codec replaced: %s', name)
        else:
            log.debug('codec registered: %s', name)
        self._codecs[entity_type] = Codec(serializer, deserializer)
        return self

    def apply(self, engine: str | Engine) -> Mapper:
        """Return a new mapper for `engine` with every registered codec installed."""
        installed: dict[type, Codec] = {}
        for entity_type, codec in self._codecs.items():
            installed[entity_type] = install(entity_type, codec)
        return Mapper(create_engine(engine), installed)


def install(entity_type: type, codec: Codec) -> Codec:
    """Check that `codec` can serve `entity_type`."""
    name = utils.format.type_name(entity_type)
    if not isinstance(entity_type, type):
        raise errors.ConstructionFailure(f'not a type: {entity_type!r}')
    for role, func in zip(Codec._fields, codec):
        if not callable(func):
            raise errors.ConstructionFailure(f'{role} for {name} is not callable: {func!r}')
    return codec
