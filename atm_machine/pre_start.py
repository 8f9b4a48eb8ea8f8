"""
Load the configured currency and initial banknote stock into Redis.

Run once when a machine is installed or after a cash collection:

    python -m atm_machine.pre_start
"""

from redis import Redis

from atm_machine.core.value_objects import Banknote, Currency
from atm_machine.infrastructure.redis_repository import RedisMoneyDeposit
from atm_machine.infrastructure.settings import Settings, get_settings
from atm_machine.loggers import logger


def seed_deposit(deposit: RedisMoneyDeposit, settings: Settings) -> dict[int, int]:
    """
    Reset the cassettes and load the initial stock.

    Denominations that the machine currency does not have are skipped.

    Returns:
        Resulting stock keyed by face value.
    """
    currency = Currency.of(settings.machine.currency)
    banknotes = Banknote.for_currency(currency)

    deposit.set_currency(currency)
    deposit.reset(banknotes)
    for note in banknotes:
        count = settings.deposit.initial_stock.get(note.value, 0)
        if count:
            deposit.load(note, count)

    stock = deposit.stock(banknotes)
    logger.info(f"Deposit seeded for {currency}: {stock}")
    return stock


def main() -> None:
    settings = get_settings()
    redis = Redis(
        host=settings.redis.host,
        port=settings.redis.port,
        decode_responses=settings.redis.decode_responses,
    )
    seed_deposit(RedisMoneyDeposit(redis, key_prefix=settings.deposit.key_prefix), settings)


if __name__ == "__main__":
    main()
