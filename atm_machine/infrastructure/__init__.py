"""
Infrastructure layer - External dependencies and implementations.

Contains:
- Money deposit implementations (Redis, in-memory)
- Bank API client
- Configuration
"""

from .bank_client import HttpBank
from .memory_deposit import InMemoryMoneyDeposit
from .redis_repository import (
    RedisStateRepository,
    RedisMoneyDeposit,
)
from .settings import (
    Settings,
    get_settings,
    reset_settings,
)


__all__ = [
    # Collaborators
    "HttpBank",
    "InMemoryMoneyDeposit",
    "RedisStateRepository",
    "RedisMoneyDeposit",
    # Settings
    "Settings",
    "get_settings",
    "reset_settings",
]
