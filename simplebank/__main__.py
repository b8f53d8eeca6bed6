"""Decode bank payloads through the shared mapper and print the wire form."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

import msgspec

from . import engine, errors, logs
from .domain import Customer, CustomerAccount, MemoryFinder
from .provider import DEFAULT_ENGINE, SimpleBankMapperProvider

log = logs.get(__name__)

ENTITY_TYPES = {
    'customer': Customer,
    'account': CustomerAccount,
}


class Fixtures(msgspec.Struct):
    customers: list[Customer] = msgspec.field(default_factory=list)
    accounts: list[CustomerAccount] = msgspec.field(default_factory=list)


def load_fixtures(path: str | None) -> MemoryFinder:
    if not path:
        return MemoryFinder()
    with open(path, 'rb') as f:
        fixtures = msgspec.json.decode(f.read(), type=Fixtures)
    log.debug(
        'fixtures: %d customers, %d accounts', len(fixtures.customers), len(fixtures.accounts)
    )
    return MemoryFinder(fixtures.customers, fixtures.accounts)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser('simplebank')
    parser.add_argument(
        'entity',
        choices=sorted(ENTITY_TYPES),
        help='the entity type of the payload',
    )
    parser.add_argument(
        'path',
        nargs='?',
        help='a file containing a JSON payload. reads STDIN by default',
    )
    parser.add_argument(
        '-f',
        '--fixtures',
        metavar='PATH',
        help='a JSON file of known customers and accounts to resolve references against',
    )
    parser.add_argument(
        '-e',
        '--engine',
        default=DEFAULT_ENGINE,
        choices=engine.names(),
        help=f'the wire format to output (default: {DEFAULT_ENGINE})',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        help='increase logging verbosity',
    )

    args = parser.parse_args(argv)
    logs.init(args.verbose)

    finder = load_fixtures(args.fixtures)
    reader = SimpleBankMapperProvider(finder).mapper
    if args.engine == reader.engine.NAME:
        writer = reader
    else:
        writer = SimpleBankMapperProvider(finder, args.engine).mapper

    if args.path:
        with open(args.path, 'rb') as f:
            data = f.read()
    else:
        data = sys.stdin.buffer.read()

    try:
        obj = reader.decode(data, ENTITY_TYPES[args.entity])
    except errors.MalformedPayload as exc:
        print(f'error: {exc}', file=sys.stderr)
        return 1

    log.debug('decoded: %r', obj)
    out = writer.encode(obj)
    if writer.engine.NAME == 'json':
        print(out.decode())
    else:
        sys.stdout.buffer.write(out)
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
