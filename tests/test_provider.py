import threading

import pytest

from simplebank import engine, errors
from simplebank.codec import CodecRegistry
from simplebank.domain import Customer, CustomerAccount
from simplebank.engine import Engine
from simplebank.provider import MapperProvider


class Account:
    def __init__(self, id):
        self.id = id


class Lookup:
    """Stands in for persistence, returning a fixed fixture."""

    def __init__(self, fixture):
        self.fixture = fixture
        self.calls = []

    def find(self, account_id):
        self.calls.append(account_id)
        return self.fixture if account_id == self.fixture.id else None


def account_registry(lookup):
    def deserialize(raw):
        try:
            account = lookup.find(raw['id'])
        except (KeyError, TypeError) as exc:
            raise errors.MalformedPayload(f'bad account reference: {raw!r}') from exc
        if account is None:
            raise errors.MalformedPayload(f'unknown account: {raw["id"]}')
        return account

    return CodecRegistry().register(Account, lambda a: {'id': a.id}, deserialize)


def test_same_instance_for_any_type(provider):
    mapper = provider.get_context(Customer)
    for type_ in (CustomerAccount, str, None, list[int], object):
        assert provider.get_context(type_) is mapper
    assert provider.get_instance() is mapper
    assert provider.mapper is mapper


def test_same_instance_across_threads(provider):
    seen = []

    def worker():
        for _ in range(100):
            seen.append(provider.get_context(Customer))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seen) == 400
    assert all(m is provider.mapper for m in seen)


def test_providers_are_independent():
    assert MapperProvider().mapper is not MapperProvider().mapper


def test_default_engine():
    provider = MapperProvider()
    assert provider.mapper.engine.NAME == 'json'
    assert provider.mapper.media_type == 'application/json'


def test_reference_scenario():
    fixture = Account(42)
    lookup = Lookup(fixture)
    mapper = MapperProvider(account_registry(lookup)).get_context(Account)

    assert mapper.encode(fixture) == b'{"id":42}'
    assert mapper.decode(b'{"id": 42}', Account) is fixture
    assert lookup.calls == [42]


def test_reference_scenario_malformed():
    mapper = MapperProvider(account_registry(Lookup(Account(42)))).mapper

    with pytest.raises(errors.MalformedPayload):
        mapper.decode(b'{}', Account)
    with pytest.raises(errors.MalformedPayload):
        mapper.decode(b'{"id": 7}', Account)


def test_unknown_engine():
    with pytest.raises(errors.ConstructionFailure) as exc_info:
        MapperProvider(engine='carrier-pigeon')
    assert isinstance(exc_info.value.__cause__, errors.RegistryError)


def test_engine_creation_fails(monkeypatch):
    class BrokenEngine(Engine):
        MEDIA_TYPE = 'application/x-broken'

        def __init__(self):
            raise RuntimeError('no engine')

        def encode(self, value):
            return b''

        def decode(self, data):
            return None

    assert 'broken' not in engine.REGISTRY.names()
    monkeypatch.setitem(engine.REGISTRY._registry, 'broken', BrokenEngine)

    with pytest.raises(errors.ConstructionFailure, match='no engine'):
        MapperProvider(engine='broken')


def test_malformed_codec():
    registry = CodecRegistry().register(Account, None, None)
    with pytest.raises(errors.ConstructionFailure):
        MapperProvider(registry)


def test_registry_is_applied_once():
    registry = CodecRegistry()
    provider = MapperProvider(registry)
    registry.register(Account, lambda a: 'late', lambda raw: Account(0))

    assert not provider.mapper.handles(Account)
