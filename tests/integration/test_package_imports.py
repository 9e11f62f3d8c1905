"""
Smoke tests to verify basic imports and functionality.
"""

from datetime import date


def test_import_payofflab():
    """Test that we can import the main package."""
    import payofflab

    assert hasattr(payofflab, "__version__")
    assert payofflab.__version__ == "0.1.0"


def test_strategies_registered_on_import():
    from payofflab import OrderingRegistry, PayoffMethod

    assert set(OrderingRegistry) == {PayoffMethod.AVALANCHE, PayoffMethod.SNOWBALL}


def test_public_api_runs_end_to_end():
    from payofflab import load_plan, simulate

    plan = load_plan(
        {
            "settings": {"extra_monthly_payment": 100},
            "debts": [
                {"id": "visa", "remaining_balance": 1500, "minimum_payment": 45, "interest_rate": 21.9},
                {"id": "car", "remaining_balance": 7000, "minimum_payment": 210, "interest_rate": 5.9},
            ],
        }
    )
    result = simulate(
        plan.debts,
        plan.settings.extra_monthly_payment,
        plan.settings.method,
        plan.settings.frequency,
        date(2026, 1, 1),
    )

    assert result.converged
    assert result.payoff_order == ["visa", "car"]
    assert result.debt_free_date > date(2026, 1, 1)
