"""
Domain layer - Business logic.

Contains:
- Withdrawal engine (ATMachine)
- Banknote breakdown strategies
"""

from .breakdown import (
    GreedyBreakdown,
    MinimalNotesBreakdown,
    get_strategy,
)
from .withdrawal_engine import (
    ATMachine,
    WithdrawalContext,
    WithdrawalPhase,
)


__all__ = [
    # Breakdown
    "GreedyBreakdown",
    "MinimalNotesBreakdown",
    "get_strategy",
    # Engine
    "ATMachine",
    "WithdrawalContext",
    "WithdrawalPhase",
]
