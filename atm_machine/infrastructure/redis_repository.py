"""
Redis Repository implementations.

Provides type-safe access to Redis state storage. The money deposit keeps
its cassette stock in Redis so that the counts survive restarts of the
withdrawal service.
"""

from __future__ import annotations

from typing import Any, Optional

from redis import Redis
from redis.exceptions import ConnectionError as RedisClientConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisClientTimeoutError

from atm_machine.core.exceptions import (
    ConfigurationError,
    InsufficientBanknotesError,
    RedisConnectionError,
    RepositoryError,
)
from atm_machine.core.interfaces import MoneyDeposit
from atm_machine.core.value_objects import Banknote, BanknotesPack, Currency
from atm_machine.loggers import logger


# =============================================================================
# Base Repository
# =============================================================================


class RedisStateRepository:
    """
    Base repository for Redis state operations.

    Provides common Redis operations with error handling.
    """

    def __init__(self, redis: Redis) -> None:
        """
        Initialize the repository.

        Args:
            redis: Redis client instance.
        """
        self._redis = redis

    def get(self, key: str) -> Optional[str]:
        """Get a string value by key."""
        try:
            return self._redis.get(key)
        except (RedisClientConnectionError, RedisClientTimeoutError) as e:
            raise RedisConnectionError(f"Redis connection error: {e}") from e

    def set(self, key: str, value: Any) -> None:
        """Set a key-value pair."""
        try:
            self._redis.set(key, value)
        except (RedisClientConnectionError, RedisClientTimeoutError) as e:
            raise RedisConnectionError(f"Redis connection error: {e}") from e

    def get_int(self, key: str, default: int = 0) -> int:
        """Get an integer value by key."""
        value = self.get(key)
        return int(value) if value else default

    def increment(self, key: str, amount: int = 1) -> int:
        """Increment a value by the specified amount."""
        try:
            return self._redis.incrby(key, amount)
        except (RedisClientConnectionError, RedisClientTimeoutError) as e:
            raise RedisConnectionError(f"Redis connection error: {e}") from e
        except RedisError as e:
            raise RepositoryError(f"Cannot increment {key}: {e}") from e


# =============================================================================
# Money Deposit Repository
# =============================================================================


class RedisMoneyDeposit(RedisStateRepository, MoneyDeposit):
    """
    Money deposit whose cassette stock lives in Redis.

    Keys:
    - <prefix>:currency: Currency code of the stocked banknotes
    - <prefix>:count:<value>: Number of banknotes of a denomination
    """

    def __init__(self, redis: Redis, key_prefix: str = "atm:deposit") -> None:
        super().__init__(redis)
        self._prefix = key_prefix

    @property
    def key_currency(self) -> str:
        return f"{self._prefix}:currency"

    def key_count(self, banknote: Banknote) -> str:
        return f"{self._prefix}:count:{banknote.value}"

    def currency(self) -> Currency:
        code = self.get(self.key_currency)
        if not code:
            raise ConfigurationError(
                "Deposit currency is not set",
                details={"key": self.key_currency},
            )
        return Currency.of(code)

    def set_currency(self, currency: Currency) -> None:
        self.set(self.key_currency, currency.code)

    def available_count_of(self, banknote: Banknote) -> int:
        return max(0, self.get_int(self.key_count(banknote)))

    def release(self, pack: BanknotesPack) -> None:
        """
        Release a pack, decreasing its stock atomically.

        Raises:
            InsufficientBanknotesError: If the stock would drop below zero;
                the decrement is rolled back.
        """
        if pack.count == 0:
            return
        key = self.key_count(pack.banknote)
        remaining = self.increment(key, -pack.count)
        if remaining < 0:
            self.increment(key, pack.count)
            raise InsufficientBanknotesError(
                f"Not enough {pack.banknote} banknotes to release {pack.count}",
                required=pack.count,
                available=remaining + pack.count,
                deposit_name="redis",
            )
        logger.debug(f"Released {pack}, {remaining} left")

    def load(self, banknote: Banknote, count: int) -> int:
        """
        Add banknotes to the cassette (refill).

        Returns:
            New stock of the denomination.
        """
        if count < 0:
            raise ValueError("Cannot load a negative number of banknotes")
        total = self.increment(self.key_count(banknote), count)
        logger.info(f"Loaded {count} x {banknote}, stock now {total}")
        return total

    def stock(self, banknotes: tuple[Banknote, ...]) -> dict[int, int]:
        """Get the stock of the given denominations keyed by face value."""
        return {note.value: self.available_count_of(note) for note in banknotes}

    def reset(self, banknotes: tuple[Banknote, ...]) -> None:
        """Set the stock of the given denominations to zero (cash collection)."""
        for note in banknotes:
            self.set(self.key_count(note), 0)
