"""
Avalanche ordering: highest interest rate first.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from payofflab.core.debts import DebtInput
from payofflab.core.interfaces import IOrderingStrategy


class OrderingAvalanche(IOrderingStrategy):
    """
    Avalanche ordering strategy (method: 'avalanche').

    Sorts by interest rate descending, then remaining balance ascending,
    then id ascending so that equal debts always come out in the same order.
    Paying the most expensive debt first minimizes total interest.
    """

    def sort_key(self, debt: DebtInput) -> tuple[Decimal, Decimal, str]:
        return (-debt.interest_rate, debt.remaining_balance, debt.id)

    def order(self, debts: Sequence[DebtInput]) -> list[str]:
        return [d.id for d in sorted(debts, key=self.sort_key)]
