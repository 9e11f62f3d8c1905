"""
Periodic rate conversion.

A debt compounds on its own convention (daily, monthly, quarterly,
annually, or per billing cycle) while the run advances in ticks of the
chosen payment frequency. This module derives each debt's periodic rate
and the interest factor applied per tick, so that every debt advances in
lockstep with the payment schedule.

Per-tick factor: a tick covers ``n + f`` native periods (``n`` whole, ``f``
fractional). Whole periods compound, the fractional stub accrues simple
interest::

    factor = (1 + r) ** n * (1 + r * f) - 1

When a tick is exactly one native period this is the periodic rate itself;
when a tick is shorter than a native period it is linear pro-rating.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext

from .currency import GUARD_CONTEXT, HUNDRED, ONE, ZERO
from .debts import DebtInput
from .kinds import CompoundingFrequency, LoanType, PaymentFrequency

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class PeriodicRate:
    """
    Rate parameters of one debt for one run.

    Attributes:
        periodic_rate: APR / 100 / periods_per_year
        periods_per_year: Native compounding periods per year (365 / cycle days for billing cycles)
        periods_per_tick: Native periods advanced by one payment tick
        tick_rate: Interest factor applied to the balance once per tick
    """

    periodic_rate: Decimal
    periods_per_year: Decimal
    periods_per_tick: Decimal
    tick_rate: Decimal

    def effective_annual_rate(self, frequency: PaymentFrequency) -> Decimal:
        """Annual growth of an untouched balance under this convention."""
        with localcontext(GUARD_CONTEXT):
            return (ONE + self.tick_rate) ** frequency.periods_per_year - ONE


def periods_per_year(
    compounding: CompoundingFrequency,
    billing_cycle_days: int | None = None,
    loan_type: LoanType = LoanType.REVOLVING,
) -> Decimal:
    """
    Native compounding periods per year.

    A billing cycle only replaces daily compounding for revolving credit;
    elsewhere ``billing_cycle_days`` is ignored.
    """
    if (
        billing_cycle_days is not None
        and compounding is CompoundingFrequency.DAILY
        and loan_type is LoanType.REVOLVING
    ):
        with localcontext(GUARD_CONTEXT):
            return Decimal(DAYS_PER_YEAR) / Decimal(billing_cycle_days)
    return Decimal(compounding.periods_per_year)


def periodic_rate(
    interest_rate: Decimal,
    compounding: CompoundingFrequency,
    billing_cycle_days: int | None,
    frequency: PaymentFrequency,
    loan_type: LoanType = LoanType.REVOLVING,
) -> tuple[Decimal, Decimal]:
    """
    Return ``(periodic_rate, periods_per_year)`` for an APR and convention.

    ``frequency`` does not change the periodic rate; it is accepted so the
    signature matches the per-run conversion in ``convert``.
    """
    ppy = periods_per_year(compounding, billing_cycle_days, loan_type)
    with localcontext(GUARD_CONTEXT):
        rate = interest_rate / HUNDRED / ppy
    return rate, ppy


def tick_factor(rate: Decimal, periods_per_tick: Decimal) -> Decimal:
    """Interest factor for advancing ``periods_per_tick`` native periods."""
    if rate == ZERO:
        return ZERO
    with localcontext(GUARD_CONTEXT):
        whole = int(periods_per_tick)
        stub = periods_per_tick - whole
        return (ONE + rate) ** whole * (ONE + rate * stub) - ONE


def convert(debt: DebtInput, frequency: PaymentFrequency) -> PeriodicRate:
    """Derive the rate parameters of ``debt`` for a run at ``frequency``."""
    rate, ppy = periodic_rate(
        debt.interest_rate,
        debt.compounding_frequency,
        debt.billing_cycle_days,
        frequency,
        debt.loan_type,
    )
    with localcontext(GUARD_CONTEXT):
        per_tick = ppy / Decimal(frequency.periods_per_year)
    return PeriodicRate(
        periodic_rate=rate,
        periods_per_year=ppy,
        periods_per_tick=per_tick,
        tick_rate=tick_factor(rate, per_tick),
    )
