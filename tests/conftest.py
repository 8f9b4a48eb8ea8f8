"""
Shared pytest fixtures for the ATM withdrawal tests.
"""

from unittest.mock import MagicMock

import pytest

from atm_machine.core.interfaces import Bank, MoneyDeposit
from atm_machine.core.value_objects import AuthorizationToken, Card, Currency, PinCode


@pytest.fixture
def pln():
    return Currency.of("PLN")


@pytest.fixture
def pin():
    return PinCode.create(1, 2, 3, 4)


@pytest.fixture
def card():
    return Card.create("5123456789104444")


@pytest.fixture
def token():
    return AuthorizationToken.create("1234")


@pytest.fixture
def bank(token):
    """Bank double that authorizes every card and accepts every charge."""
    bank = MagicMock(spec=Bank)
    bank.authorize.return_value = token
    return bank


@pytest.fixture
def deposit(pln):
    """Deposit double in PLN with one banknote of every denomination."""
    deposit = MagicMock(spec=MoneyDeposit)
    deposit.currency.return_value = pln
    deposit.available_count_of.return_value = 1
    return deposit


@pytest.fixture
def redis_store():
    return {}


@pytest.fixture
def fake_redis(redis_store):
    """Redis client double backed by a plain dictionary."""
    client = MagicMock()

    def _set(key, value):
        redis_store[key] = str(value)

    def _incrby(key, amount):
        redis_store[key] = str(int(redis_store.get(key, 0)) + amount)
        return int(redis_store[key])

    client.get.side_effect = lambda key: redis_store.get(key)
    client.set.side_effect = _set
    client.incrby.side_effect = _incrby
    return client
