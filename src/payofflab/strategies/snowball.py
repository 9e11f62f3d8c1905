"""
Snowball ordering: smallest balance first.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from payofflab.core.debts import DebtInput
from payofflab.core.interfaces import IOrderingStrategy


class OrderingSnowball(IOrderingStrategy):
    """
    Snowball ordering strategy (method: 'snowball').

    Sorts by remaining balance ascending, then interest rate descending,
    then id ascending.
    """

    def sort_key(self, debt: DebtInput) -> tuple[Decimal, Decimal, str]:
        return (debt.remaining_balance, -debt.interest_rate, debt.id)

    def order(self, debts: Sequence[DebtInput]) -> list[str]:
        return [d.id for d in sorted(debts, key=self.sort_key)]
