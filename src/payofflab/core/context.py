"""
Context classes for PayoffLab simulation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from .currency import USD, ZERO, Currency
from .errors import ConfigError
from .kinds import PaymentFrequency, PayoffMethod

# Hard safety horizon: no run advances past this many ticks
MAX_PERIODS = 360


@runtime_checkable
class CancellationToken(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class LumpSumPayment:
    """
    One-off payment added to the rolldown pool on a given period.

    Attributes:
        period: 1-based tick index on which the payment is made
        amount: Payment amount (> 0)
    """

    period: int
    amount: Decimal

    def to_dict(self) -> dict[str, object]:
        return {"period": self.period, "amount": str(self.amount)}


@dataclass(frozen=True)
class StrategySettings:
    """
    A household's saved payoff preferences.

    Mirrors what the strategy settings store hands to the engine; the
    engine treats these as plain run parameters.
    """

    method: PayoffMethod = PayoffMethod.AVALANCHE
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    extra_monthly_payment: Decimal = ZERO


@dataclass(frozen=True)
class SimulationContext:
    """
    Immutable per-run parameters passed to the simulator.

    Attributes:
        start_date: Date the simulation starts from ("today")
        method: Payoff ordering method
        frequency: Payment frequency; one tick per payment
        extra_payment: Run-level extra paid every tick into the rolldown pool
        currency: Reporting currency for rounded totals
        horizon: Safety horizon in ticks (1..MAX_PERIODS)
        lump_sums: One-off payments keyed by tick
        cancel: Optional cooperative cancellation token, checked once per tick

    Note:
        A context is built fresh for every run and never shared, so
        concurrent runs need no coordination.
    """

    start_date: date
    method: PayoffMethod = PayoffMethod.AVALANCHE
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    extra_payment: Decimal = ZERO
    currency: Currency = USD
    horizon: int = MAX_PERIODS
    lump_sums: tuple[LumpSumPayment, ...] = ()
    cancel: CancellationToken | None = field(default=None, compare=False)

    def __post_init__(self):
        if not 1 <= self.horizon <= MAX_PERIODS:
            raise ConfigError(
                f"horizon must be between 1 and {MAX_PERIODS}, got {self.horizon!r}"
            )

    def lump_sum_for(self, period: int) -> Decimal:
        """Total one-off payment scheduled for ``period``."""
        return sum((p.amount for p in self.lump_sums if p.period == period), ZERO)

    def is_cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()
