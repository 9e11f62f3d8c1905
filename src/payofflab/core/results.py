"""
Results and output structures for PayoffLab.

``aggregate`` reduces a finished ``SimulationState`` into the immutable
``ProjectionResult`` consumers work with: totals, the debt-free date, the
per-debt payoff milestones and schedules, and the raw trace.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from typing import Any

import pandas as pd

from .context import SimulationContext
from .currency import GUARD_CONTEXT, ZERO, Currency
from .dates import add_periods
from .debts import DebtInput
from .events import Event
from .kinds import PaymentFrequency, PayoffMethod
from .simulator import SimulationState, TickRecord

TRACE_COLUMNS = [
    "period",
    "date",
    "debt_id",
    "opening_balance",
    "interest",
    "scheduled_payment",
    "rolldown_payment",
    "payment",
    "principal",
    "closing_balance",
    "paid_off",
]


@dataclass(frozen=True)
class PeriodPayment:
    """One row of a debt's amortization table (exact amounts)."""

    period: int
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class DebtSchedule:
    """
    Amortization table of a single debt within a run.

    Attributes:
        debt_id: Debt identifier
        name: Display label
        original_balance: Balance at the start of the run
        periods_to_payoff: Tick the debt reached zero (0 if already paid, None if capped)
        total_interest_paid: Interest accrued on this debt, rounded to currency precision
        payoff_date: Calendar date of payoff, None if capped unpaid
        payments: One row per tick the debt was active
    """

    debt_id: str
    name: str
    original_balance: Decimal
    periods_to_payoff: int | None
    total_interest_paid: Decimal
    payoff_date: date | None
    payments: tuple[PeriodPayment, ...]


@dataclass(frozen=True)
class RolldownPayment:
    """
    Payoff milestone of one debt.

    Attributes:
        debt_id: Debt identifier
        order: Priority rank, 0 = first
        payoff_month: 1-based tick of payoff (0 if already paid, None if capped unpaid)
        payoff_date: Start date plus ``payoff_month`` periods
        minimum_only_months: Ticks spent receiving only its own allocation
            before rolldown capacity arrived
    """

    debt_id: str
    order: int
    payoff_month: int | None
    payoff_date: date | None
    minimum_only_months: int
    name: str = ""
    original_balance: Decimal = ZERO
    interest_rate: Decimal = ZERO
    minimum_payment: Decimal = ZERO


@dataclass(frozen=True)
class NextPayment:
    """Recommended payment for the debt the strategy focuses on first."""

    debt_id: str
    name: str
    current_balance: Decimal
    recommended_payment: Decimal
    periods_until_payoff: int | None
    total_interest: Decimal


@dataclass(frozen=True)
class ProjectionResult:
    """
    Outcome of one payoff simulation.

    Attributes:
        total_months: Tick index at termination (counts periods of ``frequency``)
        total_interest_paid: Interest over all debts, rounded to currency precision
        debt_free_date: Start date plus ``total_months`` periods
        rolldown_payments: Payoff milestones, in priority order
        converged: False when the safety horizon was hit with debt remaining
        method: Ordering method of the run
        frequency: Payment frequency of the run
        start_date: Simulation start date
        currency: Reporting currency
        schedules: Per-debt amortization tables, in priority order
        next_payment: Focus debt recommendation (None without active debts)
        events: Payoff, rolldown and cap events
        trace: Exact per-tick, per-debt records

    Note:
        Identical inputs give equal results and identical ``to_json()`` output.
    """

    total_months: int
    total_interest_paid: Decimal
    debt_free_date: date
    rolldown_payments: tuple[RolldownPayment, ...]
    converged: bool
    method: PayoffMethod
    frequency: PaymentFrequency
    start_date: date
    currency: Currency
    schedules: tuple[DebtSchedule, ...] = ()
    next_payment: NextPayment | None = None
    events: tuple[Event, ...] = ()
    trace: tuple[TickRecord, ...] = ()

    def rolldown_for(self, debt_id: str) -> RolldownPayment:
        for item in self.rolldown_payments:
            if item.debt_id == debt_id:
                return item
        raise KeyError(debt_id)

    def schedule_for(self, debt_id: str) -> DebtSchedule:
        for item in self.schedules:
            if item.debt_id == debt_id:
                return item
        raise KeyError(debt_id)

    @property
    def payoff_order(self) -> list[str]:
        return [r.debt_id for r in self.rolldown_payments]

    def summary(self) -> dict[str, Any]:
        """Lightweight summary for API/CLI usage."""
        return {
            "method": self.method.value,
            "frequency": self.frequency.value,
            "total_months": self.total_months,
            "total_interest_paid": str(self.total_interest_paid),
            "debt_free_date": self.debt_free_date.isoformat(),
            "converged": self.converged,
            "payoff_order": self.payoff_order,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (amounts as strings)."""
        cur = self.currency
        data = self.summary()
        data["start_date"] = self.start_date.isoformat()
        data["currency"] = cur.code
        data["rolldown_payments"] = [
            {
                "debt_id": r.debt_id,
                "name": r.name,
                "order": r.order,
                "payoff_month": r.payoff_month,
                "payoff_date": r.payoff_date.isoformat() if r.payoff_date else None,
                "minimum_only_months": r.minimum_only_months,
                "original_balance": str(cur.quantize(r.original_balance)),
                "interest_rate": str(r.interest_rate),
                "minimum_payment": str(cur.quantize(r.minimum_payment)),
            }
            for r in self.rolldown_payments
        ]
        data["schedules"] = [
            {
                "debt_id": s.debt_id,
                "name": s.name,
                "original_balance": str(cur.quantize(s.original_balance)),
                "periods_to_payoff": s.periods_to_payoff,
                "total_interest_paid": str(s.total_interest_paid),
                "payoff_date": s.payoff_date.isoformat() if s.payoff_date else None,
                "payments": [
                    {
                        "period": p.period,
                        "date": p.date.isoformat(),
                        "payment": str(cur.quantize(p.payment)),
                        "principal": str(cur.quantize(p.principal)),
                        "interest": str(cur.quantize(p.interest)),
                        "remaining_balance": str(cur.quantize(p.remaining_balance)),
                    }
                    for p in s.payments
                ],
            }
            for s in self.schedules
        ]
        if self.next_payment is not None:
            n = self.next_payment
            data["next_payment"] = {
                "debt_id": n.debt_id,
                "name": n.name,
                "current_balance": str(cur.quantize(n.current_balance)),
                "recommended_payment": str(cur.quantize(n.recommended_payment)),
                "periods_until_payoff": n.periods_until_payoff,
                "total_interest": str(n.total_interest),
            }
        else:
            data["next_payment"] = None
        data["events"] = [
            {"period": e.period, "kind": e.kind, "debt_id": e.debt_id, "message": e.message}
            for e in self.events
        ]
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_frame(self) -> pd.DataFrame:
        """
        Trace as a tidy DataFrame, one row per (period, debt).

        Amounts are rounded to currency precision and stored as floats for
        analysis and charting; use ``trace`` for exact values. ``paid_off``
        is taken from the exact closing balance.
        """
        cur = self.currency
        rows = [
            {
                "period": r.period,
                "date": pd.Timestamp(add_periods(self.start_date, r.period, self.frequency)),
                "debt_id": r.debt_id,
                "opening_balance": float(cur.quantize(r.opening_balance)),
                "interest": float(cur.quantize(r.interest)),
                "scheduled_payment": float(cur.quantize(r.scheduled_payment)),
                "rolldown_payment": float(cur.quantize(r.rolldown_payment)),
                "payment": float(cur.quantize(r.payment)),
                "principal": float(cur.quantize(r.principal)),
                "closing_balance": float(cur.quantize(r.closing_balance)),
                "paid_off": r.closing_balance == ZERO,
            }
            for r in self.trace
        ]
        return pd.DataFrame(rows, columns=TRACE_COLUMNS)


def aggregate(
    state: SimulationState,
    debts: Sequence[DebtInput],
    ctx: SimulationContext,
) -> ProjectionResult:
    """
    Reduce a terminal simulation state into a ``ProjectionResult``.

    Args:
        state: State returned by ``AmortizationSimulator.run()``
        debts: All normalized debts of the run, including zero-balance ones
        ctx: The run's context

    Returns:
        The projection; zero-balance debts are appended after the active
        ones with ``payoff_month = 0``.
    """
    cur = ctx.currency

    def _date(period: int | None) -> date | None:
        if period is None:
            return None
        return add_periods(ctx.start_date, period, ctx.frequency)

    rows_by_debt: dict[str, list[PeriodPayment]] = {debt_id: [] for debt_id in state.order}
    for record in state.trace:
        rows_by_debt[record.debt_id].append(
            PeriodPayment(
                period=record.period,
                date=_date(record.period),
                payment=record.payment,
                principal=record.principal,
                interest=record.interest,
                remaining_balance=record.closing_balance,
            )
        )

    milestones: list[RolldownPayment] = []
    schedules: list[DebtSchedule] = []
    for rank, debt_id in enumerate(state.order):
        ledger = state.ledgers[debt_id]
        debt = ledger.debt
        milestones.append(
            RolldownPayment(
                debt_id=debt_id,
                order=rank,
                payoff_month=ledger.payoff_period,
                payoff_date=_date(ledger.payoff_period),
                minimum_only_months=ledger.minimum_only_periods,
                name=debt.name,
                original_balance=debt.remaining_balance,
                interest_rate=debt.interest_rate,
                minimum_payment=debt.minimum_payment,
            )
        )
        schedules.append(
            DebtSchedule(
                debt_id=debt_id,
                name=debt.name,
                original_balance=debt.remaining_balance,
                periods_to_payoff=ledger.payoff_period,
                total_interest_paid=cur.quantize(ledger.cumulative_interest),
                payoff_date=_date(ledger.payoff_period),
                payments=tuple(rows_by_debt[debt_id]),
            )
        )

    settled = sorted((d for d in debts if d.is_paid_off), key=lambda d: d.id)
    for rank, debt in enumerate(settled, start=len(state.order)):
        milestones.append(
            RolldownPayment(
                debt_id=debt.id,
                order=rank,
                payoff_month=0,
                payoff_date=ctx.start_date,
                minimum_only_months=0,
                name=debt.name,
                original_balance=ZERO,
                interest_rate=debt.interest_rate,
                minimum_payment=debt.minimum_payment,
            )
        )
        schedules.append(
            DebtSchedule(
                debt_id=debt.id,
                name=debt.name,
                original_balance=ZERO,
                periods_to_payoff=0,
                total_interest_paid=cur.quantize(ZERO),
                payoff_date=ctx.start_date,
                payments=(),
            )
        )

    next_payment = None
    if state.order:
        focus = state.ledgers[state.order[0]]
        next_payment = NextPayment(
            debt_id=focus.debt.id,
            name=focus.debt.name,
            current_balance=focus.debt.remaining_balance,
            recommended_payment=focus.debt.allocation + ctx.extra_payment,
            periods_until_payoff=focus.payoff_period,
            total_interest=cur.quantize(focus.cumulative_interest),
        )

    with localcontext(GUARD_CONTEXT):
        total_interest = sum((lg.cumulative_interest for lg in state.ledgers.values()), ZERO)

    return ProjectionResult(
        total_months=state.period,
        total_interest_paid=cur.quantize(total_interest),
        debt_free_date=add_periods(ctx.start_date, state.period, ctx.frequency),
        rolldown_payments=tuple(milestones),
        converged=state.converged,
        method=ctx.method,
        frequency=ctx.frequency,
        start_date=ctx.start_date,
        currency=cur,
        schedules=tuple(schedules),
        next_payment=next_payment,
        events=tuple(state.events),
        trace=tuple(state.trace),
    )
