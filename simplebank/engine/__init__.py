"""Wire-format engines that turn builtin values into bytes and back."""

from __future__ import annotations

import abc
from typing import Any, ClassVar

from .. import errors, utils
from ..registry import Registry


def create(name: str | Engine, **kwargs: Any) -> Engine:
    """Return an engine by name or pass through existing instances."""
    if isinstance(name, Engine):
        return name
    cls = REGISTRY[name]
    return cls(**kwargs)


def names() -> tuple[str, ...]:
    """Return the names of every engine shipped in this package."""
    REGISTRY.init()
    return REGISTRY.names()


class Engine(abc.ABC):
    """Base class for engines that know how to encode/decode wire payloads.

    Engines only deal in builtin values (dicts, lists, strings, numbers, ...).
    Mapping domain objects to builtins is the job of the `Mapper`.
    """

    NAME: ClassVar[str]
    MEDIA_TYPE: ClassVar[str]

    # types passed through to the engine untouched instead of being
    # converted to a JSON-compatible representation
    BUILTIN_TYPES: ClassVar[tuple[type, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # subclasses without a name of their own are not looked up by name
        if 'NAME' in cls.__dict__:
            REGISTRY[cls.NAME] = cls

    @abc.abstractmethod
    def encode(self, value: Any) -> bytes:
        """Serialize builtin values into bytes."""
        raise NotImplementedError('abstract')

    @abc.abstractmethod
    def decode(self, data: bytes) -> Any:
        """Deserialize bytes into builtin values."""
        raise NotImplementedError('abstract')

    def _encode(self, value: Any) -> bytes:
        """Wrapper that provides encoding error context. Used internally."""
        try:
            return self.encode(value)
        except Exception as exc:
            raise errors.EncodeError(
                f'{exc}: value={utils.format.elide(repr(value))}'
            ) from exc

    def _decode(self, data: bytes) -> Any:
        """Wrapper that provides decoding error context. Used internally."""
        try:
            return self.decode(data)
        except Exception as exc:
            raise errors.MalformedPayload(
                f'{exc}: data={utils.format.elide(repr(data))}'
            ) from exc

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.NAME!r}>'


REGISTRY = Registry(__name__, Engine)
