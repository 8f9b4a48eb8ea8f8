"""
Application settings.

Type-safe configuration sections built from the defaults in ``configs``,
with environment variable overrides applied there.
"""

from dataclasses import dataclass, field
from typing import Final

from atm_machine.configs import (
    BANK_API_TIMEOUT,
    BANK_API_URL,
    DEFAULT_CURRENCY_CODE,
    REDIS_HOST,
    REDIS_PORT,
)


# =============================================================================
# Default Values
# =============================================================================


INITIAL_STOCK: Final[dict[int, int]] = {
    500: 20,
    200: 50,
    100: 100,
    50: 100,
    20: 200,
    10: 200,
}


# =============================================================================
# Configuration Classes
# =============================================================================


@dataclass(frozen=True)
class MachineSettings:
    """Withdrawal engine settings."""

    currency: str = DEFAULT_CURRENCY_CODE
    breakdown_strategy: str = "greedy"


@dataclass(frozen=True)
class RedisSettings:
    """Redis connection settings."""

    host: str = REDIS_HOST
    port: int = REDIS_PORT
    decode_responses: bool = True


@dataclass(frozen=True)
class BankServiceSettings:
    """Bank API client settings."""

    base_url: str = BANK_API_URL
    timeout: float = BANK_API_TIMEOUT


@dataclass(frozen=True)
class DepositSettings:
    """Money deposit settings."""

    key_prefix: str = "atm:deposit"
    # Banknotes loaded by pre_start, keyed by face value
    initial_stock: dict[int, int] = field(
        default_factory=lambda: dict(INITIAL_STOCK)
    )


# =============================================================================
# Main Settings
# =============================================================================


@dataclass
class Settings:
    """
    Main application settings.

    Aggregates all configuration sections.
    """

    machine: MachineSettings = field(default_factory=MachineSettings)
    redis: RedisSettings = field(default_factory=RedisSettings)
    bank: BankServiceSettings = field(default_factory=BankServiceSettings)
    deposit: DepositSettings = field(default_factory=DepositSettings)


# =============================================================================
# Settings Singleton
# =============================================================================


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call rebuilds them."""
    global _settings
    _settings = None
