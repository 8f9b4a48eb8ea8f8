"""
Application layer - Application services and use cases.

Contains:
- Withdrawal service
"""

from .withdrawal_service import WithdrawalService


__all__ = [
    "WithdrawalService",
]
