"""
In-memory money deposit.

Cassette stock kept in a dictionary. Used for single-process setups and
as a test double with real release semantics.
"""

from __future__ import annotations

from collections import deque
from typing import Final, Optional

from atm_machine.core.exceptions import InsufficientBanknotesError
from atm_machine.core.interfaces import MoneyDeposit
from atm_machine.core.value_objects import Banknote, BanknotesPack, Currency


RELEASE_HISTORY_SIZE: Final[int] = 100


class InMemoryMoneyDeposit(MoneyDeposit):
    """
    Money deposit backed by a ``{face value: count}`` dictionary.

    ``released`` holds the most recent released packs, oldest first, up to
    ``history_size`` entries.
    """

    def __init__(
        self,
        currency: Currency,
        stock: Optional[dict[int, int]] = None,
        history_size: int = RELEASE_HISTORY_SIZE,
    ) -> None:
        self._currency = currency
        self._stock: dict[int, int] = dict(stock or {})
        self.released: deque[BanknotesPack] = deque(maxlen=history_size)

    def currency(self) -> Currency:
        return self._currency

    def available_count_of(self, banknote: Banknote) -> int:
        return self._stock.get(banknote.value, 0)

    def release(self, pack: BanknotesPack) -> None:
        available = self.available_count_of(pack.banknote)
        if pack.count > available:
            raise InsufficientBanknotesError(
                f"Not enough {pack.banknote} banknotes to release {pack.count}",
                required=pack.count,
                available=available,
                deposit_name="memory",
            )
        self._stock[pack.banknote.value] = available - pack.count
        self.released.append(pack)

    def load(self, banknote: Banknote, count: int) -> int:
        if count < 0:
            raise ValueError("Cannot load a negative number of banknotes")
        self._stock[banknote.value] = self.available_count_of(banknote) + count
        return self._stock[banknote.value]

    def stock(self) -> dict[int, int]:
        return dict(self._stock)
