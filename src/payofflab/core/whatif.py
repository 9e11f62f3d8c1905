"""
What-if analysis on top of ``simulate``.

Compares several payment scenarios over one debt snapshot, and measures how
far an adjusted plan (e.g. one driven by actual recorded payments) runs
ahead of or behind the configured one.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from .context import LumpSumPayment
from .currency import ZERO, to_decimal
from .debts import normalize, total_minimums
from .engine import RawDebt, simulate
from .errors import ValidationError, ValidationIssue
from .kinds import PaymentFrequency, PayoffMethod
from .results import ProjectionResult


@dataclass(frozen=True)
class Scenario:
    """
    One payment assumption to compare.

    Attributes:
        id: Scenario identifier, unique within a comparison
        name: Display label
        extra_monthly_payment: Run-level extra per period
        method: Ordering method
        frequency: Payment frequency
        lump_sums: One-off payments
    """

    id: str
    name: str = ""
    extra_monthly_payment: Decimal = ZERO
    method: PayoffMethod | str = PayoffMethod.AVALANCHE
    frequency: PaymentFrequency | str = PaymentFrequency.MONTHLY
    lump_sums: tuple[LumpSumPayment | Mapping[str, Any], ...] = field(default=())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Scenario:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            extra_monthly_payment=data.get(
                "extra_monthly_payment", data.get("extraMonthlyPayment", ZERO)
            ),
            method=data.get("method", PayoffMethod.AVALANCHE),
            frequency=data.get("frequency", PaymentFrequency.MONTHLY),
            lump_sums=tuple(data.get("lump_sums", data.get("lumpSums", ())) or ()),
        )


@dataclass(frozen=True)
class ScenarioOutcome:
    """Result of one scenario; savings are relative to the baseline (first) scenario."""

    scenario: Scenario
    result: ProjectionResult
    months_saved: int | None = None
    interest_saved: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.scenario.id,
            "name": self.scenario.name,
            "result": self.result.summary(),
            "months_saved": self.months_saved,
            "interest_saved": None if self.interest_saved is None else str(self.interest_saved),
        }


@dataclass(frozen=True)
class ScenarioComparison:
    """
    All scenario outcomes plus the winners.

    Attributes:
        outcomes: One outcome per scenario, in input order
        fastest_id: Scenario with the fewest periods
        cheapest_id: Scenario with the least interest
        balanced_id: Scenario with the lowest sum of its time and interest ranks
    """

    outcomes: tuple[ScenarioOutcome, ...]
    fastest_id: str
    cheapest_id: str
    balanced_id: str

    @property
    def baseline(self) -> ScenarioOutcome:
        return self.outcomes[0]

    def outcome(self, scenario_id: str) -> ScenarioOutcome:
        for item in self.outcomes:
            if item.scenario.id == scenario_id:
                return item
        raise KeyError(scenario_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcomes": [o.to_dict() for o in self.outcomes],
            "fastest_id": self.fastest_id,
            "cheapest_id": self.cheapest_id,
            "balanced_id": self.balanced_id,
        }


def _ranks(values: list) -> list[int]:
    """Dense rank per position (0 = best); ties share a rank."""
    distinct = sorted(set(values))
    return [distinct.index(v) for v in values]


def compare_scenarios(
    debts: Sequence[RawDebt],
    scenarios: Iterable[Scenario | Mapping[str, Any]],
    start_date: date,
    **kwargs: Any,
) -> ScenarioComparison:
    """
    Simulate every scenario over the same debts and pick winners.

    The first scenario is the baseline. Ties for fastest, cheapest and
    balanced go to the scenario listed first.

    Raises:
        ValidationError: No scenarios, duplicate scenario ids, or invalid
            inputs to any scenario
    """
    items = [s if isinstance(s, Scenario) else Scenario.from_dict(s) for s in scenarios]
    issues: list[ValidationIssue] = []
    if not items:
        issues.append(ValidationIssue("scenarios", "at least one scenario is required"))
    seen: set[str] = set()
    for index, scenario in enumerate(items):
        if scenario.id in seen:
            issues.append(ValidationIssue(f"scenarios[{index}].id", "is duplicated"))
        seen.add(scenario.id)
    if issues:
        raise ValidationError(issues)

    results = [
        simulate(
            debts,
            s.extra_monthly_payment,
            s.method,
            s.frequency,
            start_date,
            lump_sums=s.lump_sums,
            **kwargs,
        )
        for s in items
    ]

    baseline = results[0]
    outcomes = [ScenarioOutcome(items[0], baseline)]
    for scenario, result in zip(items[1:], results[1:]):
        outcomes.append(
            ScenarioOutcome(
                scenario,
                result,
                months_saved=baseline.total_months - result.total_months,
                interest_saved=baseline.total_interest_paid - result.total_interest_paid,
            )
        )

    months = [r.total_months for r in results]
    interest = [r.total_interest_paid for r in results]
    ids = [s.id for s in items]
    scores = [a + b for a, b in zip(_ranks(months), _ranks(interest))]

    return ScenarioComparison(
        outcomes=tuple(outcomes),
        fastest_id=ids[months.index(min(months))],
        cheapest_id=ids[interest.index(min(interest))],
        balanced_id=ids[scores.index(min(scores))],
    )


@dataclass(frozen=True)
class ProjectionDelta:
    """
    Difference between a configured plan and an adjusted one.

    Attributes:
        months_ahead_or_behind: Original periods minus adjusted periods
            (positive means the adjusted plan finishes earlier)
        interest_difference: Original interest minus adjusted interest
        original_debt_free_date: Debt-free date of the configured plan
        adjusted_debt_free_date: Debt-free date of the adjusted plan
    """

    months_ahead_or_behind: int
    interest_difference: Decimal
    original_debt_free_date: date
    adjusted_debt_free_date: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "months_ahead_or_behind": self.months_ahead_or_behind,
            "interest_difference": str(self.interest_difference),
            "original_debt_free_date": self.original_debt_free_date.isoformat(),
            "adjusted_debt_free_date": self.adjusted_debt_free_date.isoformat(),
        }


def projection_delta(original: ProjectionResult, adjusted: ProjectionResult) -> ProjectionDelta:
    return ProjectionDelta(
        months_ahead_or_behind=original.total_months - adjusted.total_months,
        interest_difference=original.total_interest_paid - adjusted.total_interest_paid,
        original_debt_free_date=original.debt_free_date,
        adjusted_debt_free_date=adjusted.debt_free_date,
    )


def adjusted_extra_payment(
    actual_average: Decimal | int | float | str, debts: Iterable[RawDebt]
) -> Decimal:
    """
    Extra payment implied by an actual average total payment.

    Whatever the household pays on average beyond the sum of minimums is
    treated as the run-level extra; never negative.
    """
    average = to_decimal(actual_average)
    return max(ZERO, average - total_minimums(normalize(debts)))
