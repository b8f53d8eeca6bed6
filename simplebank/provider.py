from __future__ import annotations

from typing import Any

from . import errors, logs, serde
from .codec import CodecRegistry
from .domain import Customer, CustomerAccount, Finder
from .engine import Engine
from .mapper import Mapper

DEFAULT_ENGINE = 'json'

log = logs.get(__name__)


class MapperProvider:
    """Owns the one mapper handed to every caller.

    The mapper is built once, here, and never changes. Construct the provider
    during startup and pass it to whatever needs to read or write the wire.
    """

    def __init__(
        self,
        codecs: CodecRegistry | None = None,
        engine: str | Engine | None = None,
    ) -> None:
        try:
            self._mapper = (codecs or CodecRegistry()).apply(engine or DEFAULT_ENGINE)
        except errors.ConstructionFailure:
            raise
        except Exception as exc:
            raise errors.ConstructionFailure(exc) from exc
        log.debug('mapper ready: %s', self._mapper.engine.NAME)

    @property
    def mapper(self) -> Mapper:
        return self._mapper

    def get_context(self, type_: Any) -> Mapper:
        """Return the shared mapper. `type_` does not affect the result."""
        return self._mapper

    def get_instance(self, type_: Any = None) -> Mapper:
        return self._mapper


def default_registry(finder: Finder) -> CodecRegistry:
    """Return a registry holding the codecs of the bank's entity types."""
    return (
        CodecRegistry()
        .register(Customer, serde.serialize_customer, serde.customer_deserializer(finder))
        .register(CustomerAccount, serde.serialize_account, serde.account_deserializer(finder))
    )


class SimpleBankMapperProvider(MapperProvider):
    """Provider preloaded with the bank's entity codecs."""

    def __init__(self, finder: Finder, engine: str | Engine | None = None) -> None:
        super().__init__(default_registry(finder), engine)
