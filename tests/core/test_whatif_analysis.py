"""
Tests for method comparison, scenario comparison and projection deltas.
"""

from datetime import date
from decimal import Decimal

import pytest
from payofflab import (
    PayoffMethod,
    Scenario,
    adjusted_extra_payment,
    compare_methods,
    compare_scenarios,
    focus_debt_id,
    projection_delta,
    simulate,
)
from payofflab.core.errors import ValidationError

START = date(2026, 1, 1)

DEBTS = [
    {"id": "card", "name": "Card", "remaining_balance": 2000, "minimum_payment": 50, "interest_rate": 25},
    {"id": "loan", "name": "Loan", "remaining_balance": 500, "minimum_payment": 25, "interest_rate": 5},
]


class TestFocusDebt:
    def test_avalanche_focuses_highest_rate(self):
        assert focus_debt_id(DEBTS, "avalanche") == "card"

    def test_snowball_focuses_smallest_balance(self):
        assert focus_debt_id(DEBTS, PayoffMethod.SNOWBALL) == "loan"

    def test_nothing_owed(self):
        paid = [{"id": "x", "remaining_balance": 0, "minimum_payment": 0, "interest_rate": 9}]
        assert focus_debt_id(paid, "avalanche") == ""

    def test_unknown_method(self):
        with pytest.raises(ValidationError):
            focus_debt_id(DEBTS, "random")


class TestCompareMethods:
    def test_avalanche_saves_interest(self):
        comparison = compare_methods(DEBTS, 200, "monthly", START)

        assert comparison.avalanche.method is PayoffMethod.AVALANCHE
        assert comparison.snowball.method is PayoffMethod.SNOWBALL
        assert comparison.interest_savings > 0
        assert comparison.interest_savings == (
            comparison.snowball.total_interest_paid - comparison.avalanche.total_interest_paid
        )
        assert comparison.time_savings == (
            comparison.snowball.total_months - comparison.avalanche.total_months
        )
        assert comparison.recommended_method is PayoffMethod.AVALANCHE

    def test_no_difference_recommends_snowball(self):
        comparison = compare_methods(DEBTS[:1], 200, "monthly", START)

        assert comparison.time_savings == 0
        assert comparison.interest_savings == 0
        assert comparison.recommended_method is PayoffMethod.SNOWBALL

    def test_to_dict(self):
        payload = compare_methods(DEBTS, 200, "monthly", START).to_dict()
        assert payload["recommended_method"] == "avalanche"
        assert set(payload) == {
            "snowball",
            "avalanche",
            "time_savings",
            "interest_savings",
            "recommended_method",
        }


class TestCompareScenarios:
    SCENARIOS = [
        Scenario(id="base", name="Minimums"),
        Scenario(id="plus200", name="Plus 200", extra_monthly_payment=Decimal("200")),
        {"id": "bonus", "extra_monthly_payment": "50", "lump_sums": [{"period": 2, "amount": 1000}]},
    ]

    def test_savings_relative_to_baseline(self):
        comparison = compare_scenarios(DEBTS, self.SCENARIOS, START)

        assert comparison.baseline.scenario.id == "base"
        assert comparison.baseline.months_saved is None
        plus = comparison.outcome("plus200")
        assert plus.months_saved == (
            comparison.baseline.result.total_months - plus.result.total_months
        )
        assert plus.months_saved > 0
        assert plus.interest_saved > 0

    def test_winners(self):
        comparison = compare_scenarios(DEBTS, self.SCENARIOS, START)

        months = {o.scenario.id: o.result.total_months for o in comparison.outcomes}
        interest = {o.scenario.id: o.result.total_interest_paid for o in comparison.outcomes}
        assert months[comparison.fastest_id] == min(months.values())
        assert interest[comparison.cheapest_id] == min(interest.values())
        assert comparison.balanced_id in months
        assert comparison.fastest_id != "base"

    def test_ties_go_to_first_listed(self):
        comparison = compare_scenarios(
            DEBTS, [Scenario(id="a"), Scenario(id="b")], START
        )
        assert comparison.fastest_id == "a"
        assert comparison.cheapest_id == "a"
        assert comparison.balanced_id == "a"

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            compare_scenarios(DEBTS, [Scenario(id="a"), Scenario(id="a")], START)

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            compare_scenarios(DEBTS, [], START)

    def test_to_dict(self):
        payload = compare_scenarios(DEBTS, self.SCENARIOS, START).to_dict()
        assert [o["id"] for o in payload["outcomes"]] == ["base", "plus200", "bonus"]
        assert payload["outcomes"][0]["interest_saved"] is None


class TestProjectionDelta:
    def test_adjusted_plan_ahead(self):
        original = simulate(DEBTS, 100, "avalanche", "monthly", START)
        adjusted = simulate(DEBTS, 300, "avalanche", "monthly", START)

        delta = projection_delta(original, adjusted)

        assert delta.months_ahead_or_behind == original.total_months - adjusted.total_months
        assert delta.months_ahead_or_behind > 0
        assert delta.interest_difference > 0
        assert delta.original_debt_free_date == original.debt_free_date
        assert delta.adjusted_debt_free_date == adjusted.debt_free_date

    def test_adjusted_plan_behind(self):
        original = simulate(DEBTS, 300, "avalanche", "monthly", START)
        adjusted = simulate(DEBTS, 0, "avalanche", "monthly", START)
        assert projection_delta(original, adjusted).months_ahead_or_behind < 0

    def test_adjusted_extra_payment(self):
        # Minimums total 75
        assert adjusted_extra_payment("200", DEBTS) == Decimal("125")
        assert adjusted_extra_payment(60, DEBTS) == Decimal("0")
