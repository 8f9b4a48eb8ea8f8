"""
Withdrawal Engine - Cash withdrawal pipeline of a teller machine.

Runs one withdrawal as a fixed sequence of phases: currency check,
bank authorization, banknote breakdown, account charge and release of
the banknotes. Every bank failure is translated into exactly one
``ErrorCode`` carried by ``ATMOperationError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from atm_machine.core.exceptions import (
    ATMOperationError,
    AccountError,
    AmountNotRepresentableError,
    AuthorizationError,
    ConfigurationError,
    MachineNotReadyError,
)
from atm_machine.core.interfaces import Bank, BreakdownStrategy, MoneyDeposit
from atm_machine.core.value_objects import (
    AuthorizationToken,
    Banknote,
    BanknotesPack,
    Card,
    Currency,
    ErrorCode,
    Money,
    PinCode,
    Withdrawal,
)
from atm_machine.domain.breakdown import GreedyBreakdown
from atm_machine.loggers import logger


# =============================================================================
# Withdrawal Phases
# =============================================================================


class WithdrawalPhase(Enum):
    """Phases of a single withdrawal."""

    START = auto()
    CURRENCY_CHECKED = auto()
    AUTHORIZED = auto()
    AMOUNT_RESOLVED = auto()
    CHARGED = auto()
    RELEASED = auto()       # Terminal, banknotes handed out
    FAILED = auto()         # Terminal, see error_code


# =============================================================================
# Withdrawal Context
# =============================================================================


@dataclass
class WithdrawalContext:
    """
    State of one withdrawal call.

    Created fresh for every call and discarded afterwards.
    """

    amount: Money
    phase: WithdrawalPhase = WithdrawalPhase.START
    token: Optional[AuthorizationToken] = None
    packs: list[BanknotesPack] = field(default_factory=list)
    error_code: Optional[ErrorCode] = None

    def advance(self, phase: WithdrawalPhase) -> None:
        logger.debug(f"Withdrawal of {self.amount}: {self.phase.name} -> {phase.name}")
        self.phase = phase

    def fail(self, error_code: ErrorCode, message: Optional[str] = None) -> ATMOperationError:
        """Move to FAILED and build the error to raise."""
        logger.warning(
            f"Withdrawal of {self.amount} failed in phase {self.phase.name}: {error_code.value}"
        )
        self.phase = WithdrawalPhase.FAILED
        self.error_code = error_code
        return ATMOperationError(error_code, message, details={"amount": self.amount.amount})


# =============================================================================
# ATM Machine
# =============================================================================


class ATMachine:
    """
    Withdrawal engine of one teller machine.

    Holds the bank, the operating currency and the attached money deposit.
    No state is kept between withdrawals; the deposit's stock is always
    queried live.
    """

    def __init__(
        self,
        bank: Bank,
        currency: Currency,
        deposit: Optional[MoneyDeposit] = None,
        breakdown_strategy: Optional[BreakdownStrategy] = None,
    ) -> None:
        """
        Initialize the machine.

        Args:
            bank: Bank authorizing cards and charging accounts.
            currency: Operating currency; fixes the denomination set.
            deposit: Money deposit, may also be attached later.
            breakdown_strategy: Banknote breakdown algorithm, greedy by default.

        Raises:
            ConfigurationError: If the currency has no known banknotes.
        """
        self._banknotes = Banknote.for_currency(currency)
        if not self._banknotes:
            raise ConfigurationError(
                f"No banknote denominations known for currency {currency}",
                details={"currency": currency.code},
            )
        self._bank = bank
        self._currency = currency
        self._breakdown = breakdown_strategy or GreedyBreakdown()
        self._deposit: Optional[MoneyDeposit] = None
        if deposit is not None:
            self.set_deposit(deposit)

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def breakdown_strategy(self) -> BreakdownStrategy:
        return self._breakdown

    @property
    def banknotes(self) -> tuple[Banknote, ...]:
        """Denominations of the operating currency, largest first."""
        return self._banknotes

    @property
    def deposit(self) -> MoneyDeposit:
        """
        Get the attached money deposit.

        Raises:
            MachineNotReadyError: If no deposit has been attached yet.
        """
        if self._deposit is None:
            raise MachineNotReadyError("No money deposit attached to the machine")
        return self._deposit

    @property
    def has_deposit(self) -> bool:
        return self._deposit is not None

    def set_deposit(self, deposit: MoneyDeposit) -> None:
        """
        Attach or replace the money deposit.

        Must be called before the first withdrawal.

        Raises:
            ConfigurationError: If the deposit stocks another currency.
        """
        deposit_currency = deposit.currency()
        if deposit_currency != self._currency:
            raise ConfigurationError(
                f"Deposit currency {deposit_currency} does not match machine currency {self._currency}",
                details={"machine": self._currency.code, "deposit": deposit_currency.code},
            )
        self._deposit = deposit
        logger.info(f"Money deposit attached ({deposit_currency})")

    def withdraw(self, pin: PinCode, card: Card, amount: Money) -> Withdrawal:
        """
        Pay out an amount to the card holder.

        Args:
            pin: PIN entered by the customer.
            card: Inserted card.
            amount: Requested amount.

        Returns:
            Banknotes released by the deposit, largest first.

        Raises:
            ATMOperationError: With WRONG_CURRENCY, AUTHORIZATION_FAILURE,
                WRONG_AMOUNT or NO_FUNDS_ON_ACCOUNT.
            MachineNotReadyError: If no deposit is attached or the deposit
                no longer stocks the machine currency.
        """
        deposit = self.deposit
        context = WithdrawalContext(amount=amount)
        logger.info(f"Withdrawal requested: {amount} with card {card.masked_number}")

        deposit_currency = deposit.currency()
        if deposit_currency != self._currency:
            logger.error(
                f"Deposit currency changed to {deposit_currency}, machine runs on {self._currency}"
            )
            raise MachineNotReadyError(
                f"Deposit currency {deposit_currency} does not match machine currency {self._currency}",
                details={"machine": self._currency.code, "deposit": deposit_currency.code},
            )

        if amount.currency != deposit_currency:
            raise context.fail(ErrorCode.WRONG_CURRENCY)
        context.advance(WithdrawalPhase.CURRENCY_CHECKED)

        try:
            context.token = self._bank.authorize(str(pin), card.number)
        except AuthorizationError as e:
            raise context.fail(ErrorCode.AUTHORIZATION_FAILURE, e.message) from e
        context.advance(WithdrawalPhase.AUTHORIZED)

        try:
            context.packs = self._resolve_packs(amount.amount, deposit)
        except AmountNotRepresentableError as e:
            raise context.fail(ErrorCode.WRONG_AMOUNT, e.message) from e
        context.advance(WithdrawalPhase.AMOUNT_RESOLVED)

        try:
            self._bank.charge(context.token, amount)
        except AccountError as e:
            raise context.fail(ErrorCode.NO_FUNDS_ON_ACCOUNT, e.message) from e
        context.advance(WithdrawalPhase.CHARGED)

        self._release(context, deposit)
        context.advance(WithdrawalPhase.RELEASED)

        withdrawal = Withdrawal.create(context.packs)
        logger.info(f"Withdrawal completed: {amount} as {', '.join(map(str, withdrawal)) or 'no banknotes'}")
        return withdrawal

    def _resolve_packs(self, amount: int, deposit: MoneyDeposit) -> list[BanknotesPack]:
        if amount == 0:
            return []
        return self._breakdown.compute(amount, self._banknotes, deposit)

    @staticmethod
    def _release(context: WithdrawalContext, deposit: MoneyDeposit) -> None:
        for pack in context.packs:
            try:
                deposit.release(pack)
            except Exception:
                logger.critical(
                    f"Release of {pack} failed after account was charged {context.amount}"
                )
                raise
