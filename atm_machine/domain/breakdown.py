"""
Banknote breakdown strategies.

Split a requested amount into packs of stocked banknotes. The greedy
strategy is the machine default; the minimal-notes strategy performs an
exact bounded search and also handles non-canonical denomination sets.
"""

from __future__ import annotations

from collections import deque
from math import gcd
from typing import Final, Sequence

from atm_machine.core.exceptions import AmountNotRepresentableError, ConfigurationError
from atm_machine.core.interfaces import BreakdownStrategy, MoneyDeposit
from atm_machine.core.value_objects import Banknote, BanknotesPack
from atm_machine.loggers import logger


_UNREACHABLE: Final[float] = float("inf")


class GreedyBreakdown:
    """
    Take as many of the largest denomination as fit, then move down.

    Correct for canonical note systems such as the ones the machine is
    stocked with. Every denomination is queried once, largest first.
    """

    name = "greedy"

    def compute(
        self,
        amount: int,
        banknotes: Sequence[Banknote],
        deposit: MoneyDeposit,
    ) -> list[BanknotesPack]:
        packs: list[BanknotesPack] = []
        remaining = amount

        for banknote in banknotes:
            count = min(remaining // banknote.value, deposit.available_count_of(banknote))
            if count > 0:
                packs.append(BanknotesPack.create(count, banknote))
                remaining -= count * banknote.value

        if remaining != 0:
            raise AmountNotRepresentableError(
                f"Cannot pay out {amount} with available banknotes",
                amount=amount,
                remainder=remaining,
            )
        return packs


class MinimalNotesBreakdown:
    """
    Exact search for the combination with the fewest banknotes.

    Bounded knapsack over the amount, one pass per denomination, where each
    pass takes a sliding-window minimum along every residue class so the
    per-denomination stock limit costs nothing extra. Finds a combination
    whenever one exists, including cases greedy misses (60 from 50 and
    20 notes).
    """

    name = "minimal_notes"

    def compute(
        self,
        amount: int,
        banknotes: Sequence[Banknote],
        deposit: MoneyDeposit,
    ) -> list[BanknotesPack]:
        if amount == 0:
            return []

        usable = [note for note in banknotes if note.value <= amount]
        limits = [
            min(deposit.available_count_of(note), amount // note.value) for note in usable
        ]
        values = [note.value for note in usable]

        # Table size follows the amount: reject what the stock cannot cover
        # and search in units of the common divisor.
        unit = gcd(*values) if values else 0
        stocked = sum(limit * value for value, limit in zip(values, limits))
        if not unit or amount % unit or amount > stocked:
            raise self._not_representable(amount)

        counts = self._solve(amount // unit, [value // unit for value in values], limits)
        if counts is None:
            raise self._not_representable(amount)

        return [
            BanknotesPack.create(count, note)
            for note, count in zip(usable, counts)
            if count > 0
        ]

    @staticmethod
    def _not_representable(amount: int) -> AmountNotRepresentableError:
        return AmountNotRepresentableError(
            f"Cannot pay out {amount} with available banknotes",
            amount=amount,
            remainder=amount,
        )

    @staticmethod
    def _solve(amount: int, values: list[int], limits: list[int]) -> list[int] | None:
        # best[v]: fewest notes summing to v using denominations seen so far
        best: list[float] = [0] + [_UNREACHABLE] * amount
        taken_per_note: list[list[int]] = []

        for value, limit in zip(values, limits):
            merged: list[float] = [_UNREACHABLE] * (amount + 1)
            taken = [0] * (amount + 1)

            for residue in range(min(value, amount + 1)):
                # (index along residue class, best[v] - index), increasing keys
                window: deque[tuple[int, float]] = deque()
                for step, total in enumerate(range(residue, amount + 1, value)):
                    if best[total] != _UNREACHABLE:
                        key = best[total] - step
                        while window and window[-1][1] >= key:
                            window.pop()
                        window.append((step, key))
                    while window and window[0][0] < step - limit:
                        window.popleft()
                    if window:
                        start, key = window[0]
                        merged[total] = key + step
                        taken[total] = step - start

            best = merged
            taken_per_note.append(taken)

        if best[amount] == _UNREACHABLE:
            return None

        counts = [0] * len(values)
        remaining = amount
        for index in reversed(range(len(values))):
            count = taken_per_note[index][remaining]
            counts[index] = count
            remaining -= count * values[index]
        return counts


# =============================================================================
# Strategy Registry
# =============================================================================


STRATEGIES: Final[dict[str, type]] = {
    GreedyBreakdown.name: GreedyBreakdown,
    MinimalNotesBreakdown.name: MinimalNotesBreakdown,
}


def get_strategy(name: str) -> BreakdownStrategy:
    """
    Create a breakdown strategy by its configured name.

    Raises:
        ConfigurationError: If the name is unknown.
    """
    try:
        strategy = STRATEGIES[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown breakdown strategy: {name}",
            details={"available": sorted(STRATEGIES)},
        ) from None
    logger.debug(f"Using breakdown strategy: {name}")
    return strategy
