"""
Interfaces for the ATM withdrawal system.

Defines the capability contracts of the collaborators the withdrawal
engine depends on: the bank (a Protocol, for structural subtyping) and
the money deposit (an abstract base class for dispenser implementations).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, Sequence, runtime_checkable

from atm_machine.core.value_objects import (
    AuthorizationToken,
    Banknote,
    BanknotesPack,
    Currency,
    Money,
)


# =============================================================================
# Bank Interface
# =============================================================================


@runtime_checkable
class Bank(Protocol):
    """Protocol for the bank that authorizes cards and charges accounts."""

    def authorize(self, pin: str, card_number: str) -> AuthorizationToken:
        """
        Authorize a card with its PIN.

        Args:
            pin: PIN digits.
            card_number: Card number.

        Returns:
            Single-use token for the following charge.

        Raises:
            AuthorizationError: If the credentials are not accepted.
        """
        ...

    def charge(self, token: AuthorizationToken, amount: Money) -> None:
        """
        Debit the authorized account.

        Raises:
            AccountError: If the account cannot cover the amount.
        """
        ...


# =============================================================================
# Money Deposit Interface
# =============================================================================


class MoneyDeposit(ABC):
    """
    Abstract base class for banknote dispensers.

    The deposit owns its stock; only ``release`` changes it.
    """

    @abstractmethod
    def currency(self) -> Currency:
        """Get the currency of the stocked banknotes."""
        ...

    @abstractmethod
    def available_count_of(self, banknote: Banknote) -> int:
        """
        Get the current stock of a denomination.

        Returns:
            Number of notes available, zero or more.
        """
        ...

    @abstractmethod
    def release(self, pack: BanknotesPack) -> None:
        """
        Physically dispense a pack of banknotes, decreasing the stock.

        Args:
            pack: Banknotes to dispense.
        """
        ...


# =============================================================================
# Breakdown Strategy Interface
# =============================================================================


@runtime_checkable
class BreakdownStrategy(Protocol):
    """Protocol for algorithms that split an amount into banknote packs."""

    def compute(
        self,
        amount: int,
        banknotes: Sequence[Banknote],
        deposit: MoneyDeposit,
    ) -> list[BanknotesPack]:
        """
        Split an amount into packs of stocked banknotes.

        Args:
            amount: Amount in currency units.
            banknotes: Denominations to use, largest first.
            deposit: Deposit queried for available stock.

        Returns:
            Non-empty packs, largest denomination first, summing to amount.

        Raises:
            AmountNotRepresentableError: If no such combination exists.
        """
        ...
