"""
Property-based tests using Hypothesis for payoff simulation invariants.
"""

from datetime import date
from decimal import Decimal, localcontext

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from payofflab import simulate
from payofflab.core.currency import GUARD_CONTEXT

START = date(2026, 1, 1)

money = st.integers(min_value=1, max_value=2_000_000).map(lambda cents: Decimal(cents) / 100)
apr = st.integers(min_value=0, max_value=3500).map(lambda bp: Decimal(bp) / 100)


@st.composite
def debt_records(draw, amortizing=False):
    count = draw(st.integers(min_value=1, max_value=5))
    records = []
    for i in range(count):
        balance = draw(money)
        rate = draw(apr)
        if amortizing:
            # Own allocation clears interest plus at least 1% of the balance
            floor = balance * (rate / 1200 + Decimal("0.01"))
            minimum = (floor + draw(money) / 100).quantize(Decimal("0.01")) + Decimal("0.01")
        else:
            minimum = draw(money)
        records.append(
            {
                "id": f"d{i}",
                "remaining_balance": balance,
                "minimum_payment": minimum,
                "interest_rate": rate,
            }
        )
    return records


property_settings = settings(
    max_examples=40, deadline=None, suppress_health_check=[HealthCheck.too_slow]
)


class TestPayoffProperties:
    """Invariants that hold for every plan."""

    @property_settings
    @given(
        records=debt_records(),
        extra=money,
        method=st.sampled_from(["avalanche", "snowball"]),
        frequency=st.sampled_from(["monthly", "biweekly", "weekly"]),
    )
    def test_monotonic_balances_and_termination(self, records, extra, method, frequency):
        result = simulate(records, extra, method, frequency, START)

        assert 1 <= result.total_months <= 360
        assert result.converged or result.total_months == 360
        for record in result.trace:
            assert record.closing_balance <= record.opening_balance + record.interest
            assert record.closing_balance >= 0

    @property_settings
    @given(records=debt_records(), extra=money, method=st.sampled_from(["avalanche", "snowball"]))
    def test_interest_reconciles_with_trace(self, records, extra, method):
        result = simulate(records, extra, method, "monthly", START)

        with localcontext(GUARD_CONTEXT):
            traced = sum((r.interest for r in result.trace), Decimal(0))
        assert abs(result.total_interest_paid - traced) <= Decimal("0.005")

    @property_settings
    @given(records=debt_records(), extra=money)
    def test_idempotent(self, records, extra):
        first = simulate(records, extra, "snowball", "monthly", START)
        second = simulate(records, extra, "snowball", "monthly", START)
        assert first.to_json() == second.to_json()

    @property_settings
    @given(records=debt_records(amortizing=True), extra=money)
    def test_avalanche_never_costs_more_than_snowball(self, records, extra):
        avalanche = simulate(records, extra, "avalanche", "monthly", START)
        snowball = simulate(records, extra, "snowball", "monthly", START)

        assert avalanche.converged and snowball.converged
        assert avalanche.total_interest_paid <= snowball.total_interest_paid

    @property_settings
    @given(records=debt_records(), extra=money)
    def test_every_debt_reported_once(self, records, extra):
        result = simulate(records, extra, "avalanche", "monthly", START)

        assert sorted(result.payoff_order) == sorted(r["id"] for r in records)
        assert [r.order for r in result.rolldown_payments] == list(range(len(records)))
