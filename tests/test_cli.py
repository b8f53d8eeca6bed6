import json

import msgpack
import pytest

from simplebank import __main__ as cli
from simplebank.__main__ import main
from simplebank.provider import SimpleBankMapperProvider

FIXTURES = {
    'customers': [
        {
            'customer_id': 1,
            'first_name': 'Ada',
            'last_name': 'Lovelace',
            'country': 'UK',
            'accounts': [
                {
                    'account_id': 100,
                    'customer_id': 1,
                    'account_name': 'Savings',
                    'account_type': 'savings',
                    'balance': 250.5,
                }
            ],
        }
    ],
}


@pytest.fixture
def fixtures_path(tmp_path):
    path = tmp_path / 'fixtures.json'
    path.write_text(json.dumps(FIXTURES))
    return str(path)


def write_payload(tmp_path, payload):
    path = tmp_path / 'payload.json'
    path.write_text(json.dumps(payload))
    return str(path)


def test_account_reference(tmp_path, fixtures_path, capsys):
    path = write_payload(tmp_path, {'accountId': 100})

    assert main(['account', path, '-f', fixtures_path]) == 0
    assert json.loads(capsys.readouterr().out) == {
        'accountId': 100,
        'customerId': 1,
        'name': 'Savings',
        'type': 'savings',
        'balance': 250.5,
    }


def test_customer(tmp_path, fixtures_path, capsys):
    payload = {
        'customerId': 2,
        'firstName': 'Bo',
        'lastName': 'Li',
        'country': 'CN',
        'accounts': [{'accountId': 100}],
    }
    path = write_payload(tmp_path, payload)

    assert main(['customer', path, '-f', fixtures_path]) == 0
    assert json.loads(capsys.readouterr().out) == payload


def test_msgpack_output(tmp_path, fixtures_path, capsysbinary):
    path = write_payload(tmp_path, {'accountId': 100})

    assert main(['account', path, '-f', fixtures_path, '-e', 'msgpack']) == 0
    assert msgpack.unpackb(capsysbinary.readouterr().out)['accountId'] == 100


def test_malformed(tmp_path, capsys):
    path = write_payload(tmp_path, {'accountId': 100})

    assert main(['account', path]) == 1
    assert 'unknown account: 100' in capsys.readouterr().err


def test_unknown_entity(capsys):
    with pytest.raises(SystemExit):
        main(['branch'])


def test_unknown_engine(tmp_path, capsys):
    path = write_payload(tmp_path, {'accountId': 100})

    with pytest.raises(SystemExit):
        main(['account', path, '-e', 'carrier-pigeon'])
    assert "invalid choice: 'carrier-pigeon'" in capsys.readouterr().err


def test_default_engine_builds_one_provider(tmp_path, fixtures_path, monkeypatch, capsysbinary):
    built = []

    class CountingProvider(SimpleBankMapperProvider):
        def __init__(self, *args, **kwargs):
            built.append(args)
            super().__init__(*args, **kwargs)

    monkeypatch.setattr(cli, 'SimpleBankMapperProvider', CountingProvider)
    path = write_payload(tmp_path, {'accountId': 100})

    assert main(['account', path, '-f', fixtures_path]) == 0
    assert len(built) == 1

    assert main(['account', path, '-f', fixtures_path, '-e', 'msgpack']) == 0
    assert len(built) == 3
