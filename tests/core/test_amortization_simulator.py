"""
Tests for the tick-by-tick amortization state machine.
"""

import threading
from datetime import date
from decimal import Decimal, localcontext

import payofflab.strategies  # noqa: F401 - ensure orderings are registered
import pytest
from payofflab.core.context import LumpSumPayment, SimulationContext
from payofflab.core.currency import GUARD_CONTEXT
from payofflab.core.debts import normalize
from payofflab.core.errors import ConfigError, SimulationCancelled
from payofflab.core.kinds import PayoffMethod
from payofflab.core.simulator import AmortizationSimulator, SimulationStatus

START = date(2026, 1, 1)


def _run(records, **ctx_kwargs):
    ctx = SimulationContext(start_date=START, **ctx_kwargs)
    return AmortizationSimulator(normalize(records), ctx).run()


class TestStateMachine:
    def test_no_active_debts_converges_immediately(self):
        state = _run([{"id": "a", "remaining_balance": 0, "minimum_payment": 0, "interest_rate": 5}])

        assert state.status is SimulationStatus.CONVERGED
        assert state.period == 0
        assert state.trace == []

    def test_zero_rate_pays_off_on_schedule(self):
        state = _run([{"id": "a", "remaining_balance": 1000, "minimum_payment": 100, "interest_rate": 0}])

        assert state.converged
        assert state.period == 10
        assert state.ledgers["a"].payoff_period == 10
        assert state.ledgers["a"].cumulative_interest == 0

    def test_capped_at_horizon(self):
        state = _run(
            [{"id": "a", "remaining_balance": 10000, "minimum_payment": 10, "interest_rate": 29.99}]
        )

        assert state.status is SimulationStatus.CAPPED
        assert state.period == 360
        assert state.events[-1].kind == "capped"
        assert state.ledgers["a"].payoff_period is None

    def test_custom_horizon(self):
        state = _run(
            [{"id": "a", "remaining_balance": 1000, "minimum_payment": 10, "interest_rate": 0}],
            horizon=12,
        )
        assert state.status is SimulationStatus.CAPPED
        assert state.period == 12
        assert state.ledgers["a"].balance == Decimal("880")

    @pytest.mark.parametrize("horizon", [0, 361])
    def test_horizon_out_of_range(self, horizon):
        with pytest.raises(ConfigError):
            SimulationContext(start_date=START, horizon=horizon)

    def test_capped_run_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="payofflab.core.simulator"):
            _run(
                [{"id": "a", "remaining_balance": 1000, "minimum_payment": 10, "interest_rate": 0}],
                horizon=3,
            )
        assert "capped at 3 periods" in caplog.text

    def test_cancellation(self):
        token = threading.Event()
        token.set()
        ctx = SimulationContext(start_date=START, cancel=token)
        sim = AmortizationSimulator(
            normalize([{"id": "a", "remaining_balance": 100, "minimum_payment": 10, "interest_rate": 0}]),
            ctx,
        )
        with pytest.raises(SimulationCancelled) as exc:
            sim.run()
        assert exc.value.period == 1


class TestRolldown:
    """Freed allocations move down the fixed priority order."""

    RECORDS = [
        {"id": "small", "remaining_balance": 300, "minimum_payment": 100, "interest_rate": 20},
        {"id": "big", "remaining_balance": 5000, "minimum_payment": 100, "interest_rate": 10},
    ]

    def test_freed_allocation_reaches_next_debt_from_next_tick(self):
        state = _run(self.RECORDS, method=PayoffMethod.AVALANCHE)
        payoff = state.ledgers["small"].payoff_period
        assert payoff == 4

        big = [r for r in state.trace if r.debt_id == "big"]
        for record in big:
            if record.period < payoff:
                assert record.payment == Decimal("100")
                assert record.rolldown_payment == 0
            elif record.period > payoff and record.closing_balance > 0:
                assert record.payment == Decimal("200")

        # The unused part of small's last allocation already helps big on the payoff tick
        at_payoff = next(r for r in big if r.period == payoff)
        assert Decimal("100") < at_payoff.payment < Decimal("200")

    def test_minimum_only_periods(self):
        state = _run(self.RECORDS, method=PayoffMethod.AVALANCHE)

        assert state.ledgers["big"].minimum_only_periods == 3
        assert state.ledgers["big"].first_rolldown_period == 4
        kinds = [(e.kind, e.debt_id) for e in state.events]
        assert ("payoff", "small") in kinds
        assert ("rolldown_start", "big") in kinds

    def test_pool_cascades_within_a_tick(self):
        records = [
            {"id": "a", "remaining_balance": 50, "minimum_payment": 10, "interest_rate": 0},
            {"id": "b", "remaining_balance": 60, "minimum_payment": 10, "interest_rate": 0},
            {"id": "c", "remaining_balance": 1000, "minimum_payment": 10, "interest_rate": 0},
        ]
        state = _run(records, method=PayoffMethod.SNOWBALL, extra_payment=Decimal("200"))

        assert state.ledgers["a"].payoff_period == 1
        assert state.ledgers["b"].payoff_period == 1
        # 30 own allocations + 200 extra - 50 - 60 = 120 of which 10 is c's own
        assert state.ledgers["c"].balance == Decimal("1000") - Decimal("120")

    def test_lump_sum_joins_pool_once(self):
        state = _run(
            [{"id": "a", "remaining_balance": 1000, "minimum_payment": 50, "interest_rate": 0}],
            lump_sums=(LumpSumPayment(period=2, amount=Decimal("500")),),
        )
        rows = {r.period: r for r in state.trace}

        assert rows[1].payment == Decimal("50")
        assert rows[2].payment == Decimal("550")
        assert rows[3].payment == Decimal("50")
        assert state.period == 10


class TestTraceInvariants:
    def test_balances_never_rise_beyond_interest(self):
        state = _run(
            [
                {"id": "a", "remaining_balance": 2500, "minimum_payment": 60, "interest_rate": 22},
                {"id": "b", "remaining_balance": 900, "minimum_payment": 30, "interest_rate": 18},
            ],
            extra_payment=Decimal("75"),
        )
        for record in state.trace:
            assert record.closing_balance <= record.opening_balance + record.interest
            assert record.closing_balance >= 0

    def test_trace_interest_matches_ledgers(self):
        state = _run(
            [
                {"id": "a", "remaining_balance": 2500, "minimum_payment": 60, "interest_rate": 22},
                {"id": "b", "remaining_balance": 900, "minimum_payment": 30, "interest_rate": 18},
            ]
        )
        for debt_id, ledger in state.ledgers.items():
            with localcontext(GUARD_CONTEXT):
                traced = sum(r.interest for r in state.trace if r.debt_id == debt_id)
            assert traced == ledger.cumulative_interest
