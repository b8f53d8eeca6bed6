import pytest

from simplebank.domain import Customer, CustomerAccount, MemoryFinder
from simplebank.provider import SimpleBankMapperProvider


@pytest.fixture
def savings():
    return CustomerAccount(
        account_id=100,
        customer_id=1,
        account_name='Savings',
        account_type='savings',
        balance=250.5,
    )


@pytest.fixture
def checking():
    return CustomerAccount(
        account_id=101,
        customer_id=1,
        account_name='Checking',
        account_type='checking',
        balance=12.0,
    )


@pytest.fixture
def customer(savings, checking):
    return Customer(
        customer_id=1,
        first_name='Ada',
        last_name='Lovelace',
        country='UK',
        accounts=[savings, checking],
    )


@pytest.fixture
def finder(customer):
    return MemoryFinder([customer])


@pytest.fixture
def provider(finder):
    return SimpleBankMapperProvider(finder)


@pytest.fixture
def mapper(provider):
    return provider.mapper
