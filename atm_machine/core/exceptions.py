"""
Custom exceptions for the ATM withdrawal system.

Provides a hierarchy of typed exceptions. Collaborator errors raised by the
bank are translated by the withdrawal engine into a single
``ATMOperationError`` carrying an ``ErrorCode``.
"""

from typing import Any, Optional

from atm_machine.core.value_objects import ErrorCode


class ATMSystemError(Exception):
    """Base exception for all ATM system errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            code: Optional error code for programmatic handling.
            details: Optional additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Withdrawal Errors
# =============================================================================


class ATMOperationError(ATMSystemError):
    """
    A withdrawal failed.

    The only failure ``ATMachine.withdraw`` reports for the four business
    outcomes; ``error_code`` tells them apart.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or error_code.description, code=error_code.value, **kwargs)
        self.error_code = error_code


class AmountNotRepresentableError(ATMSystemError):
    """No combination of stocked banknotes sums exactly to the amount."""

    def __init__(self, message: str, amount: int = 0, remainder: int = 0, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.details["amount"] = amount
        self.details["remainder"] = remainder


# =============================================================================
# Bank Errors
# =============================================================================


class BankError(ATMSystemError):
    """Base exception for errors reported by the bank."""

    pass


class AuthorizationError(BankError):
    """The bank refused to authorize the card and PIN."""

    pass


class AccountError(BankError):
    """The account cannot cover the charged amount."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ATMSystemError):
    """The machine or one of its collaborators is misconfigured."""

    pass


class MachineNotReadyError(ConfigurationError):
    """The machine cannot serve withdrawals with its current money deposit."""

    pass


# =============================================================================
# Deposit Errors
# =============================================================================


class DepositError(ATMSystemError):
    """Base exception for money deposit (dispenser) errors."""

    def __init__(
        self,
        message: str,
        deposit_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.deposit_name = deposit_name
        if deposit_name:
            self.details["deposit"] = deposit_name


class InsufficientBanknotesError(DepositError):
    """Not enough banknotes of a denomination to release a pack."""

    def __init__(
        self,
        message: str,
        required: int = 0,
        available: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.details["required"] = required
        self.details["available"] = available


# =============================================================================
# Repository Errors
# =============================================================================


class RepositoryError(ATMSystemError):
    """Base exception for repository errors."""

    pass


class RedisConnectionError(RepositoryError):
    """Error connecting to Redis."""

    pass
