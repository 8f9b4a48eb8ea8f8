"""
Value Objects for the ATM withdrawal system.

Immutable objects that represent values in the domain.
Value objects are compared by value, not by identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

from atm_machine.configs import BANKNOTE_DENOMINATIONS, DEFAULT_CURRENCY_CODE


# =============================================================================
# Enums
# =============================================================================


class ErrorCode(str, Enum):
    """Outcome of a failed withdrawal. Exactly one accompanies each failure."""

    WRONG_CURRENCY = "WRONG_CURRENCY"
    AUTHORIZATION_FAILURE = "AUTHORIZATION_FAILURE"
    WRONG_AMOUNT = "WRONG_AMOUNT"
    NO_FUNDS_ON_ACCOUNT = "NO_FUNDS_ON_ACCOUNT"

    @property
    def description(self) -> str:
        """Human-readable description of the failure."""
        return _ERROR_DESCRIPTIONS[self]


_ERROR_DESCRIPTIONS: dict[ErrorCode, str] = {
    ErrorCode.WRONG_CURRENCY: "Requested currency is not dispensed by this machine",
    ErrorCode.AUTHORIZATION_FAILURE: "Card or PIN was not authorized by the bank",
    ErrorCode.WRONG_AMOUNT: "Amount cannot be paid out with available banknotes",
    ErrorCode.NO_FUNDS_ON_ACCOUNT: "Insufficient funds on account",
}


# =============================================================================
# Currency and Money
# =============================================================================


@dataclass(frozen=True)
class Currency:
    """
    Currency identified by its three-letter ISO code.

    Attributes:
        code: Uppercase ISO-4217 code, e.g. ``PLN``.
    """

    code: str

    def __post_init__(self) -> None:
        if len(self.code) != 3 or not self.code.isalpha() or not self.code.isupper():
            raise ValueError(f"Invalid currency code: {self.code!r}")

    @classmethod
    def of(cls, code: str) -> Currency:
        """Create a Currency from a code in any letter case."""
        return cls(code=code.strip().upper())

    def __str__(self) -> str:
        return self.code


DEFAULT_CURRENCY = Currency.of(DEFAULT_CURRENCY_CODE)


@dataclass(frozen=True)
class Money:
    """
    Immutable amount of whole currency units.

    Amounts in different currencies are never equal and cannot be ordered
    or combined.

    Attributes:
        amount: Non-negative number of currency units.
        currency: Currency of the amount.
    """

    amount: int
    currency: Currency = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        """Validate the amount."""
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"Amount must be an integer, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")

    def _require_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Currency mismatch: {self.currency} vs {other.currency}")

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other)
        return self.amount >= other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"


# =============================================================================
# Customer Credentials
# =============================================================================


@dataclass(frozen=True)
class PinCode:
    """
    Four-digit personal identification number.

    ``str()`` gives the digits as sent to the bank; ``repr()`` never
    reveals them.
    """

    digits: tuple[int, int, int, int]

    def __post_init__(self) -> None:
        if len(self.digits) != 4:
            raise ValueError("PIN must have exactly 4 digits")
        for digit in self.digits:
            if isinstance(digit, bool) or not isinstance(digit, int) or not 0 <= digit <= 9:
                raise ValueError(f"Invalid PIN digit: {digit!r}")

    @classmethod
    def create(cls, first: int, second: int, third: int, fourth: int) -> PinCode:
        return cls(digits=(first, second, third, fourth))

    def __str__(self) -> str:
        return "".join(str(digit) for digit in self.digits)

    def __repr__(self) -> str:
        return "PinCode(****)"


@dataclass(frozen=True)
class Card:
    """Payment card identified by its number."""

    number: str

    def __post_init__(self) -> None:
        if not self.number or not self.number.isdigit():
            raise ValueError("Card number must be a non-empty string of digits")

    @classmethod
    def create(cls, number: str) -> Card:
        return cls(number=number.replace(" ", ""))

    @property
    def masked_number(self) -> str:
        """Card number with all but the last four digits hidden."""
        return "*" * max(0, len(self.number) - 4) + self.number[-4:]

    def __repr__(self) -> str:
        return f"Card({self.masked_number})"


@dataclass(frozen=True)
class AuthorizationToken:
    """Single-use proof of a successful bank authorization."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Authorization token cannot be empty")

    @classmethod
    def create(cls, value: str) -> AuthorizationToken:
        return cls(value=value)


# =============================================================================
# Banknotes
# =============================================================================


@dataclass(frozen=True)
class Banknote:
    """
    A banknote denomination of a currency.

    Attributes:
        value: Face value in currency units.
        currency: Currency the banknote belongs to.
    """

    value: int
    currency: Currency = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value <= 0:
            raise ValueError(f"Banknote value must be a positive integer, got {self.value!r}")

    @classmethod
    def for_currency(cls, currency: Currency) -> tuple[Banknote, ...]:
        """
        Get all denominations of a currency, largest first.

        Returns:
            Tuple of banknotes, empty for an unknown currency.
        """
        values = BANKNOTE_DENOMINATIONS.get(currency.code, ())
        return tuple(cls(value, currency) for value in sorted(values, reverse=True))

    def __str__(self) -> str:
        return f"{self.value} {self.currency}"


@dataclass(frozen=True)
class BanknotesPack:
    """
    A number of banknotes of one denomination.

    Attributes:
        count: Number of notes, zero or more.
        banknote: Denomination of every note in the pack.
    """

    count: int
    banknote: Banknote

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 0:
            raise ValueError(f"Pack count must be a non-negative integer, got {self.count!r}")

    @classmethod
    def create(cls, count: int, banknote: Banknote) -> BanknotesPack:
        return cls(count=count, banknote=banknote)

    @property
    def value(self) -> int:
        """Total value of the pack in currency units."""
        return self.count * self.banknote.value

    def __str__(self) -> str:
        return f"{self.count} x {self.banknote}"


@dataclass(frozen=True)
class Withdrawal:
    """
    Banknotes handed out by one withdrawal, largest denomination first.

    Attributes:
        packs: Packs with strictly descending, distinct denominations.
    """

    packs: tuple[BanknotesPack, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for previous, current in zip(self.packs, self.packs[1:]):
            if current.banknote.value >= previous.banknote.value:
                raise ValueError("Withdrawal packs must have distinct, descending denominations")
            if current.banknote.currency != previous.banknote.currency:
                raise ValueError("Withdrawal packs must share one currency")

    @classmethod
    def create(cls, packs: Iterable[BanknotesPack]) -> Withdrawal:
        return cls(packs=tuple(packs))

    @property
    def total(self) -> int:
        """Sum of all packs in currency units."""
        return sum(pack.value for pack in self.packs)

    @property
    def is_empty(self) -> bool:
        return not self.packs

    def __iter__(self) -> Iterator[BanknotesPack]:
        return iter(self.packs)

    def __len__(self) -> int:
        return len(self.packs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "banknotes": [
                {"denomination": pack.banknote.value, "count": pack.count}
                for pack in self.packs
            ],
        }


# =============================================================================
# Withdrawal Result Value Object
# =============================================================================


@dataclass(frozen=True)
class WithdrawalResult:
    """
    Result of a withdrawal request as reported to the host application.

    Attributes:
        success: Whether the withdrawal succeeded.
        amount: Requested amount in currency units.
        currency: Currency code of the request.
        banknotes: Dispensed (denomination, count) pairs, largest first.
        error_code: Error code of a failed withdrawal.
        message: Human-readable message.
    """

    success: bool
    amount: int = 0
    currency: str = ""
    banknotes: tuple[tuple[int, int], ...] = field(default_factory=tuple)
    error_code: Optional[str] = None
    message: str = ""

    @classmethod
    def completed(cls, amount: Money, withdrawal: Withdrawal) -> WithdrawalResult:
        """Create a result for a completed withdrawal."""
        return cls(
            success=True,
            amount=amount.amount,
            currency=amount.currency.code,
            banknotes=tuple((pack.banknote.value, pack.count) for pack in withdrawal),
            message=f"Dispensed {amount}",
        )

    @classmethod
    def failed(cls, amount: Money, error_code: ErrorCode, message: str = "") -> WithdrawalResult:
        """Create a failed result."""
        return cls(
            success=False,
            amount=amount.amount,
            currency=amount.currency.code,
            error_code=error_code.value,
            message=message or error_code.description,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        result: dict[str, Any] = {
            "success": self.success,
            "amount": self.amount,
            "currency": self.currency,
            "message": self.message,
        }
        if self.banknotes:
            result["banknotes"] = [
                {"denomination": value, "count": count} for value, count in self.banknotes
            ]
        if self.error_code:
            result["error"] = self.error_code
        return result
