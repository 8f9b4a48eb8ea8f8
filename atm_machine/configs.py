"""
Configuration module for the ATM withdrawal system.

This module provides centralized constants for the machine, the banknote
denominations it can stock, and the external services it talks to.
Deployment-specific values can be overridden through ``ATM_*`` environment
variables.
"""

import os
from typing import Final, Optional


# =============================================================================
# Machine Configuration
# =============================================================================

DEFAULT_CURRENCY_CODE: Final[str] = os.environ.get("ATM_CURRENCY", "PLN")


# =============================================================================
# Banknote Denominations
# =============================================================================

# Face values per currency, largest first.
BANKNOTE_DENOMINATIONS: Final[dict[str, tuple[int, ...]]] = {
    "PLN": (500, 200, 100, 50, 20, 10),
    "EUR": (500, 200, 100, 50, 20, 10, 5),
    "USD": (100, 50, 20, 10, 5, 2, 1),
}


# =============================================================================
# Redis Configuration
# =============================================================================

REDIS_HOST: Final[str] = os.environ.get("ATM_REDIS_HOST", "localhost")
REDIS_PORT: Final[int] = int(os.environ.get("ATM_REDIS_PORT", "6379"))


# =============================================================================
# External Services Configuration
# =============================================================================

BANK_API_URL: Final[str] = os.environ.get("ATM_BANK_API_URL", "http://localhost:8010/api/v1")
BANK_API_TIMEOUT: Final[float] = float(os.environ.get("ATM_BANK_API_TIMEOUT", "5.0"))

# Remote logging is disabled unless a Loki push URL is configured.
LOKI_URL: Final[Optional[str]] = os.environ.get("ATM_LOKI_URL") or None


# =============================================================================
# Logging Configuration
# =============================================================================

LOG_FILE: Final[Optional[str]] = os.environ.get("ATM_LOG_FILE") or None
LOG_LEVEL: Final[str] = os.environ.get("ATM_LOG_LEVEL", "DEBUG")
