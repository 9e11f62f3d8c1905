"""
Strategy interface protocols for PayoffLab.
Defines the contract that payoff ordering strategies must satisfy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .debts import DebtInput


@runtime_checkable
class IOrderingStrategy(Protocol):
    """
    Contract for payoff ORDERING strategies.
    Responsibilities: rank active debts once, before the first tick.

    The order is fixed for the whole run; strategies never see balances
    change, so they must be pure functions of the input snapshot.
    """

    def sort_key(self, debt: DebtInput) -> tuple[Any, ...]:
        """Key under which debts sort highest priority first."""
        ...

    def order(self, debts: Sequence[DebtInput]) -> list[str]:
        """Return debt ids, highest priority first."""
        ...


__all__ = ["IOrderingStrategy"]
