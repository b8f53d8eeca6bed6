"""Bank entities and the lookups their codecs resolve references with."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

import msgspec


class CustomerAccount(msgspec.Struct, kw_only=True):
    account_id: int
    customer_id: int
    account_name: str
    account_type: str
    balance: float = 0.0


class Customer(msgspec.Struct, kw_only=True):
    customer_id: int
    first_name: str
    last_name: str
    country: str
    accounts: list[CustomerAccount] = msgspec.field(default_factory=list)


class Finder(Protocol):
    def find_customer(self, customer_id: int) -> Customer | None: ...

    def find_account(self, account_id: int) -> CustomerAccount | None: ...


class MemoryFinder:
    """Finder over entities held in memory."""

    def __init__(
        self,
        customers: Iterable[Customer] = (),
        accounts: Iterable[CustomerAccount] = (),
    ) -> None:
        self._customers = {c.customer_id: c for c in customers}
        self._accounts = {a.account_id: a for a in accounts}
        for customer in self._customers.values():
            for account in customer.accounts:
                self._accounts.setdefault(account.account_id, account)

    def find_customer(self, customer_id: int) -> Customer | None:
        return self._customers.get(customer_id)

    def find_account(self, account_id: int) -> CustomerAccount | None:
        return self._accounts.get(account_id)
