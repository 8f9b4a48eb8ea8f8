"""
Core module - Foundation layer with no external dependencies.

Contains:
- Exceptions
- Interfaces (Protocols and abstract base classes)
- Value Objects
"""

from .exceptions import (
    ATMSystemError,
    ATMOperationError,
    AmountNotRepresentableError,
    BankError,
    AuthorizationError,
    AccountError,
    ConfigurationError,
    MachineNotReadyError,
    DepositError,
    InsufficientBanknotesError,
    RepositoryError,
    RedisConnectionError,
)
from .interfaces import (
    Bank,
    MoneyDeposit,
    BreakdownStrategy,
)
from .value_objects import (
    DEFAULT_CURRENCY,
    ErrorCode,
    Currency,
    Money,
    PinCode,
    Card,
    AuthorizationToken,
    Banknote,
    BanknotesPack,
    Withdrawal,
    WithdrawalResult,
)


__all__ = [
    # Exceptions
    "ATMSystemError",
    "ATMOperationError",
    "AmountNotRepresentableError",
    "BankError",
    "AuthorizationError",
    "AccountError",
    "ConfigurationError",
    "MachineNotReadyError",
    "DepositError",
    "InsufficientBanknotesError",
    "RepositoryError",
    "RedisConnectionError",
    # Interfaces
    "Bank",
    "MoneyDeposit",
    "BreakdownStrategy",
    # Value Objects
    "DEFAULT_CURRENCY",
    "ErrorCode",
    "Currency",
    "Money",
    "PinCode",
    "Card",
    "AuthorizationToken",
    "Banknote",
    "BanknotesPack",
    "Withdrawal",
    "WithdrawalResult",
]
