"""
Tests for the avalanche and snowball orderings and their registry.
"""

from decimal import Decimal

import payofflab.strategies  # noqa: F401 - ensure orderings are registered
import pytest
from payofflab.core.debts import DebtInput
from payofflab.core.errors import ConfigError
from payofflab.core.interfaces import IOrderingStrategy
from payofflab.core.kinds import PayoffMethod
from payofflab.core.registry import OrderingRegistry, get_ordering, order_debts
from payofflab.strategies import OrderingAvalanche, OrderingSnowball


def _debt(debt_id, balance, rate, minimum="25"):
    return DebtInput(
        id=debt_id,
        name=debt_id,
        remaining_balance=Decimal(balance),
        minimum_payment=Decimal(minimum),
        interest_rate=Decimal(rate),
    )


DEBTS = [
    _debt("mid", "2000", "18"),
    _debt("small", "400", "12"),
    _debt("big", "9000", "24"),
]


class TestAvalanche:
    def test_highest_rate_first(self):
        assert OrderingAvalanche().order(DEBTS) == ["big", "mid", "small"]

    def test_equal_rates_smaller_balance_first(self):
        debts = [_debt("b", "900", "20"), _debt("a", "500", "20")]
        assert OrderingAvalanche().order(debts) == ["a", "b"]

    def test_full_tie_breaks_by_id(self):
        debts = [_debt("z", "500", "20"), _debt("a", "500", "20"), _debt("m", "500", "20")]
        assert OrderingAvalanche().order(debts) == ["a", "m", "z"]


class TestSnowball:
    def test_smallest_balance_first(self):
        assert OrderingSnowball().order(DEBTS) == ["small", "mid", "big"]

    def test_equal_balances_higher_rate_first(self):
        debts = [_debt("low", "500", "9"), _debt("high", "500", "19")]
        assert OrderingSnowball().order(debts) == ["high", "low"]

    def test_full_tie_breaks_by_id(self):
        debts = [_debt("c", "500", "20"), _debt("b", "500", "20")]
        assert OrderingSnowball().order(debts) == ["b", "c"]


class TestOrderingRegistry:
    def test_defaults_registered(self):
        assert isinstance(OrderingRegistry[PayoffMethod.AVALANCHE], OrderingAvalanche)
        assert isinstance(OrderingRegistry[PayoffMethod.SNOWBALL], OrderingSnowball)

    def test_strategies_satisfy_protocol(self):
        for strategy in OrderingRegistry.values():
            assert isinstance(strategy, IOrderingStrategy)

    def test_missing_strategy(self):
        saved = OrderingRegistry.pop(PayoffMethod.SNOWBALL)
        try:
            with pytest.raises(ConfigError, match="snowball"):
                get_ordering(PayoffMethod.SNOWBALL)
        finally:
            OrderingRegistry[PayoffMethod.SNOWBALL] = saved

    def test_order_debts_skips_paid_off(self):
        debts = [*DEBTS, _debt("paid", "0", "30", minimum="0")]
        assert order_debts(debts, PayoffMethod.AVALANCHE) == ["big", "mid", "small"]

    def test_custom_strategy_replaces_default(self):
        class OrderingById:
            def sort_key(self, debt):
                return (debt.id,)

            def order(self, debts):
                return [d.id for d in sorted(debts, key=self.sort_key)]

        saved = OrderingRegistry[PayoffMethod.AVALANCHE]
        OrderingRegistry[PayoffMethod.AVALANCHE] = OrderingById()
        try:
            assert order_debts(DEBTS, PayoffMethod.AVALANCHE) == ["big", "mid", "small"]
            assert isinstance(OrderingRegistry[PayoffMethod.AVALANCHE], IOrderingStrategy)
        finally:
            OrderingRegistry[PayoffMethod.AVALANCHE] = saved
