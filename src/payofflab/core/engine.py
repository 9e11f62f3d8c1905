"""
Public entry points of the payoff engine.

``normalize`` validates raw debt records; ``simulate`` runs one payoff
projection over them. Both are pure: no I/O, no shared state, and identical
inputs give identical results.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from .context import MAX_PERIODS, CancellationToken, LumpSumPayment, SimulationContext
from .currency import USD, ZERO, Currency, get_currency, to_decimal
from .debts import DebtInput, normalize
from .errors import ValidationError, ValidationIssue
from .kinds import PaymentFrequency, PayoffMethod, all_values
from .registry import order_debts
from .results import ProjectionResult, aggregate
from .simulator import AmortizationSimulator

logger = logging.getLogger(__name__)

RawDebt = Mapping[str, Any] | DebtInput

__all__ = [
    "MethodComparison",
    "compare_methods",
    "focus_debt_id",
    "normalize",
    "parse_lump_sums",
    "simulate",
]


def _parse_enum(enum_cls, value, field: str, issues: list[ValidationIssue]):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        issues.append(
            ValidationIssue(field, f"must be one of {all_values(enum_cls)}, got {value!r}")
        )
        return None


def _parse_amount(value, field: str, issues: list[ValidationIssue]) -> Decimal | None:
    try:
        amount = to_decimal(value)
    except (TypeError, ValueError) as exc:
        issues.append(ValidationIssue(field, f"must be a number ({exc})"))
        return None
    if amount < ZERO:
        issues.append(ValidationIssue(field, f"must be >= 0, got {amount}"))
        return None
    return amount


def parse_lump_sums(
    raw: Iterable[LumpSumPayment | Mapping[str, Any]],
    issues: list[ValidationIssue] | None = None,
) -> tuple[LumpSumPayment, ...]:
    """
    Coerce lump-sum records (``{"period": 3, "amount": "500"}``) into
    ``LumpSumPayment`` objects.

    Problems are appended to ``issues`` when given; otherwise a
    ``ValidationError`` is raised.
    """
    collected: list[ValidationIssue] = [] if issues is None else issues
    before = len(collected)
    payments: list[LumpSumPayment] = []
    for index, item in enumerate(raw):
        field = f"lump_sums[{index}]"
        if isinstance(item, LumpSumPayment):
            period, amount = item.period, item.amount
        elif isinstance(item, Mapping):
            period, amount = item.get("period"), item.get("amount")
        else:
            collected.append(ValidationIssue(field, "expected a mapping with period and amount"))
            continue

        if isinstance(period, bool) or not isinstance(period, int) or period < 1:
            collected.append(
                ValidationIssue(f"{field}.period", f"must be an integer >= 1, got {period!r}")
            )
            continue
        try:
            value = to_decimal(amount)
        except (TypeError, ValueError) as exc:
            collected.append(ValidationIssue(f"{field}.amount", f"must be a number ({exc})"))
            continue
        if value <= ZERO:
            collected.append(ValidationIssue(f"{field}.amount", f"must be > 0, got {value}"))
            continue
        payments.append(LumpSumPayment(period=period, amount=value))

    if issues is None and len(collected) > before:
        raise ValidationError(collected)
    return tuple(payments)


def simulate(
    debts: Sequence[RawDebt],
    extra_monthly_payment: Decimal | int | float | str = ZERO,
    method: PayoffMethod | str = PayoffMethod.AVALANCHE,
    frequency: PaymentFrequency | str = PaymentFrequency.MONTHLY,
    start_date: date | None = None,
    *,
    lump_sums: Iterable[LumpSumPayment | Mapping[str, Any]] = (),
    currency: Currency | str = USD,
    horizon: int = MAX_PERIODS,
    cancel: CancellationToken | None = None,
) -> ProjectionResult:
    """
    Simulate paying off ``debts`` under one strategy.

    Args:
        debts: Raw debt records or ``DebtInput`` objects (normalized here)
        extra_monthly_payment: Run-level extra paid every period into the
            rolldown pool
        method: ``avalanche`` or ``snowball``
        frequency: ``monthly``, ``biweekly`` or ``weekly``
        start_date: "Today"; required so that results are reproducible
        lump_sums: One-off payments keyed by period
        currency: Reporting currency for rounded totals
        horizon: Safety horizon in periods (at most 360)
        cancel: Optional token with ``is_set()``, checked once per period

    Returns:
        ProjectionResult; ``converged`` is False when the horizon was hit

    Raises:
        ValidationError: If debts or run arguments are malformed
        ConfigError: If the horizon is out of range
        SimulationCancelled: If ``cancel`` is set during the run

    **Example Usage:**
        ```python
        from datetime import date
        from payofflab import simulate

        result = simulate(
            [{"id": "visa", "remaining_balance": "1000",
              "minimum_payment": "50", "interest_rate": "24"}],
            extra_monthly_payment="100",
            method="avalanche",
            frequency="monthly",
            start_date=date(2026, 1, 1),
        )
        print(result.total_months, result.total_interest_paid)
        ```
    """
    issues: list[ValidationIssue] = []
    extra = _parse_amount(extra_monthly_payment, "extra_monthly_payment", issues)
    method_ = _parse_enum(PayoffMethod, method, "method", issues)
    frequency_ = _parse_enum(PaymentFrequency, frequency, "frequency", issues)
    if not isinstance(start_date, date):
        issues.append(ValidationIssue("start_date", f"must be a date, got {start_date!r}"))
    payments = parse_lump_sums(lump_sums, issues)

    try:
        normalized = normalize(debts)
    except ValidationError as exc:
        issues.extend(exc.issues)
    if issues:
        raise ValidationError(issues)

    ctx = SimulationContext(
        start_date=start_date,
        method=method_,
        frequency=frequency_,
        extra_payment=extra,
        currency=get_currency(currency),
        horizon=horizon,
        lump_sums=payments,
        cancel=cancel,
    )
    logger.debug(
        "Simulating %d debts: method=%s frequency=%s extra=%s start=%s horizon=%d",
        len(normalized),
        ctx.method.value,
        ctx.frequency.value,
        ctx.extra_payment,
        ctx.start_date.isoformat(),
        ctx.horizon,
    )
    state = AmortizationSimulator(normalized, ctx).run()
    return aggregate(state, normalized, ctx)


def focus_debt_id(debts: Sequence[RawDebt], method: PayoffMethod | str) -> str:
    """Id of the debt the strategy pays down first ("" when nothing is owed)."""
    issues: list[ValidationIssue] = []
    method_ = _parse_enum(PayoffMethod, method, "method", issues)
    if issues:
        raise ValidationError(issues)
    order = order_debts(normalize(debts), method_)
    return order[0] if order else ""


@dataclass(frozen=True)
class MethodComparison:
    """
    Avalanche and snowball run side by side over the same inputs.

    Attributes:
        snowball: Snowball projection
        avalanche: Avalanche projection
        time_savings: Snowball periods minus avalanche periods
        interest_savings: Snowball interest minus avalanche interest
        recommended_method: Avalanche when it saves interest or time, else snowball
    """

    snowball: ProjectionResult
    avalanche: ProjectionResult
    time_savings: int
    interest_savings: Decimal
    recommended_method: PayoffMethod

    def to_dict(self) -> dict[str, Any]:
        return {
            "snowball": self.snowball.summary(),
            "avalanche": self.avalanche.summary(),
            "time_savings": self.time_savings,
            "interest_savings": str(self.interest_savings),
            "recommended_method": self.recommended_method.value,
        }


def compare_methods(
    debts: Sequence[RawDebt],
    extra_monthly_payment: Decimal | int | float | str = ZERO,
    frequency: PaymentFrequency | str = PaymentFrequency.MONTHLY,
    start_date: date | None = None,
    **kwargs: Any,
) -> MethodComparison:
    """Run both strategies; keyword arguments are passed on to ``simulate``."""
    snowball = simulate(
        debts, extra_monthly_payment, PayoffMethod.SNOWBALL, frequency, start_date, **kwargs
    )
    avalanche = simulate(
        debts, extra_monthly_payment, PayoffMethod.AVALANCHE, frequency, start_date, **kwargs
    )
    time_savings = snowball.total_months - avalanche.total_months
    interest_savings = snowball.total_interest_paid - avalanche.total_interest_paid
    recommended = (
        PayoffMethod.AVALANCHE
        if interest_savings > ZERO or time_savings > 0
        else PayoffMethod.SNOWBALL
    )
    return MethodComparison(
        snowball=snowball,
        avalanche=avalanche,
        time_savings=time_savings,
        interest_savings=interest_savings,
        recommended_method=recommended,
    )
