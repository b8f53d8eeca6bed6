"""Named class registry that imports implementations on demand."""

from __future__ import annotations

from typing import Generic, TypeVar

from . import errors, logs
from .utils.path import import_module, import_package

log = logs.get(__name__)

T = TypeVar('T')


class Registry(Generic[T]):
    """Keeps a registry of subclasses by name.

    Unknown names are resolved by importing the module of the same name from
    the registry's package, which registers its classes as a side effect.
    """

    def __init__(self, name: str, base_type: type[T]) -> None:
        self._name = name
        self._base_type = base_type
        self._registry: dict[str, type[T]] = {}

    def __getitem__(self, name: str) -> type[T]:
        try:
            return self._registry[name]
        except KeyError:
            pass

        exc = import_module(name, self._name)
        try:
            return self._registry[name]
        except KeyError:
            msg = f'no {self._base_type.__name__.lower()} named {name!r}'
            raise errors.RegistryError(msg) from exc

    def __setitem__(self, name: str, cls: type[T]) -> None:
        if name in self._registry:
            log.debug('%s replaced: %s', self._base_type.__name__.lower(), name)
        self._registry[name] = cls

    def names(self) -> tuple[str, ...]:
        """Return all registered names in insertion order."""
        return tuple(self._registry.keys())

    def init(self) -> None:
        """Eagerly import the registry's package to register every module."""
        for modname, exc in import_package(self._name).items():
            log.debug('cannot load %s.%s: %s', self._name, modname, exc)
