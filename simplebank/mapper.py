"""The configured mapper shared by everything that reads or writes the wire."""

from __future__ import annotations

import dataclasses
import inspect
import types
import typing
from collections import abc
from collections.abc import Mapping
from typing import TYPE_CHECKING, Annotated, Any, TypeVar, overload

import msgspec

from . import errors, logs, utils

if TYPE_CHECKING:
    from .codec import Codec
    from .engine import Engine

log = logs.get(__name__)

T = TypeVar('T')

NoneType = type(None)
UNION_TYPES = (typing.Union, types.UnionType)
SEQUENCE_TYPES = (list, tuple, set, frozenset)


class Mapper:
    """An engine plus an immutable table of per-type codecs.

    Registered types are (de)serialized by their codec. Everything else falls
    back to structural mapping: fields of dataclasses, structs and plain
    objects map 1:1 to keys of a wire object.
    """

    def __init__(self, engine: Engine, codecs: Mapping[type, Codec]) -> None:
        self._engine = engine
        self._codecs: Mapping[type, Codec] = types.MappingProxyType(dict(codecs))

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def media_type(self) -> str:
        return self._engine.MEDIA_TYPE

    def handles(self, entity_type: type) -> bool:
        """Return `True` if `entity_type` has a codec installed."""
        return entity_type in self._codecs

    def encode(self, obj: Any) -> bytes:
        """Serialize `obj` to wire bytes."""
        return self._engine._encode(self.to_builtins(obj))

    @overload
    def decode(self, data: bytes, type_: type[T]) -> T: ...

    @overload
    def decode(self, data: bytes, type_: Any = ...) -> Any: ...

    def decode(self, data: bytes, type_: Any = Any) -> Any:
        """Deserialize wire bytes into an instance of `type_`."""
        return self.from_builtins(self._engine._decode(data), type_)

    ##
    ## serialization
    ##

    def to_builtins(self, obj: Any) -> Any:
        """Convert `obj` into values the engine can write."""
        codec = self._find_codec(type(obj))
        if codec is not None:
            log.debug('serialize: %s', utils.format.type_name(obj))
            # the serializer's output is already the wire value, only its
            # contents are looked up again
            return self._structural(codec.serializer(obj))
        return self._structural(obj)

    def _structural(self, obj: Any) -> Any:
        if obj is None or isinstance(obj, (str, int, float, bool)):
            return obj
        if isinstance(obj, Mapping):
            return {self.to_builtins(k): self.to_builtins(v) for k, v in obj.items()}
        if isinstance(obj, SEQUENCE_TYPES):
            return [self.to_builtins(v) for v in obj]
        if isinstance(obj, msgspec.Struct):
            return {
                f.encode_name: self.to_builtins(getattr(obj, f.name))
                for f in msgspec.structs.fields(obj)
            }
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {
                f.name: self.to_builtins(getattr(obj, f.name)) for f in dataclasses.fields(obj)
            }
        try:
            return msgspec.to_builtins(
                obj, builtin_types=self._engine.BUILTIN_TYPES or None, enc_hook=self._enc_hook
            )
        except (TypeError, NotImplementedError) as exc:
            raise errors.EncodeError(
                f'cannot map {utils.format.type_name(obj)}: no codec and no fields'
            ) from exc

    def _find_codec(self, cls: type) -> Codec | None:
        codecs = self._codecs
        if not codecs:
            return None
        for base in cls.__mro__:
            codec = codecs.get(base)
            if codec is not None:
                return codec
        return None

    def _enc_hook(self, obj: Any) -> Any:
        try:
            attrs = vars(obj)
        except TypeError:
            raise NotImplementedError from None
        return {k: self.to_builtins(v) for k, v in attrs.items() if not k.startswith('_')}

    ##
    ## deserialization
    ##

    def from_builtins(self, raw: Any, type_: Any) -> Any:
        """Convert engine output `raw` into an instance of `type_`."""
        codec = self._codecs.get(type_)
        if codec is not None:
            log.debug('deserialize: %s', utils.format.type_name(type_))
            return codec.deserializer(raw)

        if type_ is Any or isinstance(type_, TypeVar):
            return raw

        origin = typing.get_origin(type_)
        args = typing.get_args(type_)

        if origin is Annotated:
            return self.from_builtins(raw, args[0])
        if origin in UNION_TYPES:
            return self._from_union(raw, args)
        if isinstance(origin, type) and args:
            if issubclass(origin, abc.Mapping):
                return self._from_mapping(raw, origin, args)
            if issubclass(origin, abc.Iterable):
                return self._from_sequence(raw, origin, args)
        if origin is not None:
            return self._convert(raw, type_)

        if isinstance(type_, type):
            if issubclass(type_, msgspec.Struct):
                return self._from_struct(raw, type_)
            if dataclasses.is_dataclass(type_):
                return self._from_dataclass(raw, type_)
            if typing.is_typeddict(type_):
                return self._from_typeddict(raw, type_)
            if issubclass(type_, tuple) and hasattr(type_, '_fields'):
                return self._from_namedtuple(raw, type_)
        return self._convert(raw, type_)

    def _from_union(self, raw: Any, args: tuple[Any, ...]) -> Any:
        if raw is None and NoneType in args:
            return None
        for arg in args:
            if arg is NoneType:
                continue
            try:
                return self.from_builtins(raw, arg)
            except errors.MalformedPayload:
                continue
        names = ' | '.join(getattr(a, '__name__', repr(a)) for a in args)
        raise errors.MalformedPayload(f'expected `{names}`, got `{type(raw).__name__}`')

    def _from_sequence(self, raw: Any, origin: type, args: tuple[Any, ...]) -> Any:
        if not isinstance(raw, (list, tuple)):
            raise _mismatch('array', raw)
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(self.from_builtins(v, args[0]) for v in raw)
            if len(raw) != len(args):
                raise errors.MalformedPayload(
                    f'expected array of length {len(args)}, got {len(raw)}'
                )
            return tuple(self.from_builtins(v, t) for v, t in zip(raw, args))

        values = [self.from_builtins(v, args[0]) for v in raw]
        if not inspect.isabstract(origin):
            return origin(values)
        if issubclass(origin, abc.MutableSet):
            return set(values)
        if issubclass(origin, abc.Set):
            return frozenset(values)
        return values

    def _from_mapping(self, raw: Any, origin: type, args: tuple[Any, ...]) -> Any:
        if not isinstance(raw, Mapping):
            raise _mismatch('object', raw)
        key_type, value_type = args if len(args) == 2 else (args[0], Any)
        items = {
            self._from_key(k, key_type): self.from_builtins(v, value_type) for k, v in raw.items()
        }
        return dict(items) if inspect.isabstract(origin) else origin(items)

    def _from_struct(self, raw: Any, type_: type[msgspec.Struct]) -> Any:
        if not isinstance(raw, Mapping):
            raise _mismatch('object', raw)
        kwargs = {}
        for f in msgspec.structs.fields(type_):
            if f.encode_name in raw:
                kwargs[f.name] = self.from_builtins(raw[f.encode_name], f.type)
            elif f.required:
                raise _missing(f.encode_name, type_)
        return type_(**kwargs)

    def _from_dataclass(self, raw: Any, type_: type) -> Any:
        if not isinstance(raw, Mapping):
            raise _mismatch('object', raw)
        hints = _type_hints(type_)
        kwargs = {}
        for f in dataclasses.fields(type_):
            if not f.init:
                continue
            if f.name in raw:
                kwargs[f.name] = self.from_builtins(raw[f.name], hints.get(f.name, Any))
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise _missing(f.name, type_)
        return type_(**kwargs)

    def _from_typeddict(self, raw: Any, type_: type) -> Any:
        if not isinstance(raw, Mapping):
            raise _mismatch('object', raw)
        hints = _type_hints(type_)
        for name in type_.__required_keys__:
            if name not in raw:
                raise _missing(name, type_)
        return {
            name: self.from_builtins(value, hints.get(name, Any))
            for name, value in raw.items()
            if name in hints
        }

    def _from_namedtuple(self, raw: Any, type_: type) -> Any:
        hints = _type_hints(type_)
        fields: tuple[str, ...] = type_._fields  # type: ignore[attr-defined]
        if isinstance(raw, Mapping):
            values = {name: raw[name] for name in fields if name in raw}
        elif isinstance(raw, (list, tuple)):
            if len(raw) > len(fields):
                raise errors.MalformedPayload(
                    f'expected array of at most {len(fields)} items, got {len(raw)}'
                )
            values = dict(zip(fields, raw))
        else:
            raise _mismatch('array', raw)

        defaults = type_._field_defaults  # type: ignore[attr-defined]
        for name in fields:
            if name not in values and name not in defaults:
                raise _missing(name, type_)
        return type_(
            **{name: self.from_builtins(v, hints.get(name, Any)) for name, v in values.items()}
        )

    def _from_key(self, raw: Any, type_: Any) -> Any:
        # JSON object keys are always strings
        if isinstance(raw, str) and type_ is not str and not self.handles(type_):
            try:
                return msgspec.convert(raw, type_, strict=False)
            except msgspec.ValidationError as exc:
                raise errors.MalformedPayload(str(exc)) from exc
        return self.from_builtins(raw, type_)

    def _convert(self, raw: Any, type_: Any) -> Any:
        try:
            return msgspec.convert(
                raw,
                type_,
                builtin_types=self._engine.BUILTIN_TYPES or None,
                dec_hook=_dec_hook,
            )
        except msgspec.ValidationError as exc:
            raise errors.MalformedPayload(str(exc)) from exc


def _type_hints(type_: type) -> dict[str, Any]:
    # annotations naming classes local to a function cannot be resolved,
    # those fields are taken as they come off the wire
    try:
        return typing.get_type_hints(type_)
    except NameError:
        log.debug('unresolved annotations: %s', utils.format.type_name(type_))
        return {}


def _dec_hook(type_: type, raw: Any) -> Any:
    # plain classes are built from their wire fields
    if not isinstance(raw, Mapping):
        raise _mismatch('object', raw)
    try:
        return type_(**raw)
    except TypeError as exc:
        raise errors.MalformedPayload(f'{utils.format.type_name(type_)}: {exc}') from exc


def _mismatch(expected: str, raw: Any) -> errors.MalformedPayload:
    return errors.MalformedPayload(f'expected `{expected}`, got `{type(raw).__name__}`')


def _missing(name: str, type_: type) -> errors.MalformedPayload:
    return errors.MalformedPayload(
        f'object missing required field `{name}` for {utils.format.type_name(type_)}'
    )
