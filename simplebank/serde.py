"""Wire codecs for the bank's entity types.

Customers reference their accounts by id instead of nesting them:

    {"customerId": 1, "firstName": "Ada", "lastName": "Lovelace",
     "country": "UK", "accounts": [{"accountId": 100}]}

Accounts flatten their customer to an id and shorten field names:

    {"accountId": 100, "customerId": 1, "name": "Savings",
     "type": "savings", "balance": 10.0}

An account payload holding nothing but `accountId` is a reference to an
existing account. References are resolved through a `Finder`; one that cannot
be resolved makes the payload malformed.

Fields preserved by a serialize/deserialize round trip are listed in
`CUSTOMER_PRESERVED` and `ACCOUNT_PRESERVED`. Customer accounts survive only
as far as the finder returns the same accounts for their ids.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import msgspec

from . import errors
from .domain import Customer, CustomerAccount, Finder

S = TypeVar('S', bound=msgspec.Struct)

CUSTOMER_PRESERVED = ('customer_id', 'first_name', 'last_name', 'country', 'accounts')
ACCOUNT_PRESERVED = ('account_id', 'customer_id', 'account_name', 'account_type', 'balance')


class AccountRef(msgspec.Struct, rename='camel'):
    account_id: int


class CustomerWire(msgspec.Struct, rename='camel', kw_only=True):
    customer_id: int
    first_name: str
    last_name: str
    country: str
    accounts: list[AccountRef] = msgspec.field(default_factory=list)


class AccountWire(msgspec.Struct, rename='camel', kw_only=True):
    account_id: int
    customer_id: int
    name: str
    type: str
    balance: float = 0.0


def parse(raw: Any, wire_type: type[S]) -> S:
    """Validate `raw` against `wire_type`."""
    try:
        return msgspec.convert(raw, wire_type)
    except msgspec.ValidationError as exc:
        raise errors.MalformedPayload(f'{wire_type.__name__}: {exc}') from exc


##
## customer
##


def serialize_customer(customer: Customer) -> Any:
    return msgspec.to_builtins(
        CustomerWire(
            customer_id=customer.customer_id,
            first_name=customer.first_name,
            last_name=customer.last_name,
            country=customer.country,
            accounts=[AccountRef(a.account_id) for a in customer.accounts],
        )
    )


def customer_deserializer(finder: Finder) -> Callable[[Any], Customer]:
    def deserialize_customer(raw: Any) -> Customer:
        wire = parse(raw, CustomerWire)
        accounts = [resolve_account(finder, ref.account_id) for ref in wire.accounts]
        return Customer(
            customer_id=wire.customer_id,
            first_name=wire.first_name,
            last_name=wire.last_name,
            country=wire.country,
            accounts=accounts,
        )

    return deserialize_customer


##
## account
##


def serialize_account(account: CustomerAccount) -> Any:
    return msgspec.to_builtins(
        AccountWire(
            account_id=account.account_id,
            customer_id=account.customer_id,
            name=account.account_name,
            type=account.account_type,
            balance=account.balance,
        )
    )


def account_deserializer(finder: Finder) -> Callable[[Any], CustomerAccount]:
    def deserialize_account(raw: Any) -> CustomerAccount:
        if isinstance(raw, dict) and raw.keys() == {'accountId'}:
            return resolve_account(finder, parse(raw, AccountRef).account_id)

        wire = parse(raw, AccountWire)
        if finder.find_customer(wire.customer_id) is None:
            raise errors.MalformedPayload(f'unknown customer: {wire.customer_id}')
        return CustomerAccount(
            account_id=wire.account_id,
            customer_id=wire.customer_id,
            account_name=wire.name,
            account_type=wire.type,
            balance=wire.balance,
        )

    return deserialize_account


def resolve_account(finder: Finder, account_id: int) -> CustomerAccount:
    account = finder.find_account(account_id)
    if account is None:
        raise errors.MalformedPayload(f'unknown account: {account_id}')
    return account
