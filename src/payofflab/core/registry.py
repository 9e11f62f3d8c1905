"""
Registry mapping payoff methods to ordering strategies.
"""

from __future__ import annotations

from collections.abc import Sequence

from .debts import DebtInput
from .errors import ConfigError
from .interfaces import IOrderingStrategy
from .kinds import PayoffMethod

# Populated by payofflab.strategies.register_defaults() on import
OrderingRegistry: dict[PayoffMethod, IOrderingStrategy] = {}


def get_ordering(method: PayoffMethod) -> IOrderingStrategy:
    """
    Look up the ordering strategy registered for ``method``.

    Raises:
        ConfigError: If no strategy is registered for the method
    """
    try:
        return OrderingRegistry[method]
    except KeyError:
        registered = ", ".join(sorted(m.value for m in OrderingRegistry))
        raise ConfigError(
            f"No ordering strategy registered for '{getattr(method, 'value', method)}'. "
            f"Registered: [{registered}]"
        ) from None


def order_debts(debts: Sequence[DebtInput], method: PayoffMethod) -> list[str]:
    """Priority order of the active debts (ids, highest priority first)."""
    active = [d for d in debts if not d.is_paid_off]
    return get_ordering(method).order(active)
