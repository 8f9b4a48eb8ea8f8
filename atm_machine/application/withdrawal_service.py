"""
Withdrawal Service - Application service for cash withdrawals.

Wires the withdrawal engine to its configured collaborators and turns
withdrawal failures into result objects for the host application.
"""

from __future__ import annotations

from typing import Optional

import httpx
from redis import Redis

from atm_machine.core.exceptions import ATMOperationError
from atm_machine.core.value_objects import Card, Currency, Money, PinCode, WithdrawalResult
from atm_machine.domain.breakdown import get_strategy
from atm_machine.domain.withdrawal_engine import ATMachine
from atm_machine.infrastructure.bank_client import HttpBank
from atm_machine.infrastructure.redis_repository import RedisMoneyDeposit
from atm_machine.infrastructure.settings import Settings, get_settings
from atm_machine.loggers import logger


class WithdrawalService:
    """
    Application service for withdrawal operations.

    Coordinates the machine and reports outcomes as ``WithdrawalResult``.
    """

    def __init__(self, machine: ATMachine) -> None:
        self._machine = machine

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        redis: Optional[Redis] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> WithdrawalService:
        """
        Build a service with the Redis deposit and the HTTP bank.

        Args:
            settings: Settings to use, the singleton when omitted.
            redis: Redis client, created from settings when omitted.
            http_client: httpx client for the bank, created when omitted.
        """
        settings = settings or get_settings()
        if redis is None:
            redis = Redis(
                host=settings.redis.host,
                port=settings.redis.port,
                decode_responses=settings.redis.decode_responses,
            )

        bank = HttpBank(
            settings.bank.base_url,
            timeout=settings.bank.timeout,
            client=http_client,
        )
        machine = ATMachine(
            bank,
            Currency.of(settings.machine.currency),
            breakdown_strategy=get_strategy(settings.machine.breakdown_strategy),
        )
        machine.set_deposit(RedisMoneyDeposit(redis, key_prefix=settings.deposit.key_prefix))

        logger.info(
            f"Withdrawal service ready: currency {settings.machine.currency}, "
            f"strategy {settings.machine.breakdown_strategy}"
        )
        return cls(machine)

    @property
    def machine(self) -> ATMachine:
        return self._machine

    def withdraw(self, pin: PinCode, card: Card, amount: Money) -> WithdrawalResult:
        """
        Withdraw cash for a customer.

        Args:
            pin: PIN entered by the customer.
            card: Inserted card.
            amount: Requested amount.

        Returns:
            Completed result with the banknotes, or failed result with the
            error code.
        """
        try:
            withdrawal = self._machine.withdraw(pin, card, amount)
        except ATMOperationError as e:
            return WithdrawalResult.failed(amount, e.error_code, e.message)
        return WithdrawalResult.completed(amount, withdrawal)

    def stock_report(self) -> dict[int, int]:
        """Get the deposit stock of every denomination, keyed by face value."""
        deposit = self._machine.deposit
        return {note.value: deposit.available_count_of(note) for note in self._machine.banknotes}
