"""
PayoffLab - Debt Payoff Simulation Engine

PayoffLab projects how a household's debts are paid down under a payment
strategy. Given a snapshot of debts and a plan (avalanche or snowball, a
payment frequency, an extra payment per period) it simulates amortization
period by period, rolls freed-up payments down to the next debt, and
reports the debt-free date, total interest and per-debt milestones.

Key Features:
- **Exact Money**: Balances and interest are ``Decimal`` end to end, rounded only when reported
- **Strategy Registry**: Ordering strategies are looked up by ``PayoffMethod``
- **Bounded**: Every run stops at a 360-period safety horizon; non-amortizing plans come back with ``converged=False``
- **What-if**: Compare methods, scenarios and adherence deltas
- **Plans as Files**: YAML/JSON debt plans and a CLI
- **Charts**: Optional Plotly visualizations

Quick Start:
    ```python
    from datetime import date
    from payofflab import simulate

    result = simulate(
        [
            {"id": "visa", "remaining_balance": "4200", "minimum_payment": "120",
             "interest_rate": "24.99"},
            {"id": "car", "remaining_balance": "11500", "minimum_payment": "310",
             "interest_rate": "6.4", "loan_type": "installment"},
        ],
        extra_monthly_payment="200",
        method="avalanche",
        frequency="monthly",
        start_date=date(2026, 1, 1),
    )
    print(result.debt_free_date, result.total_interest_paid)
    ```

Extending the System:
    To add a payoff ordering, implement ``IOrderingStrategy`` and register
    it in ``OrderingRegistry`` under a ``PayoffMethod``.
"""

# Version information
__version__ = "0.1.0"
__description__ = "Debt payoff simulation engine"

# Import core components for easy access
import payofflab.strategies

from .core import (
    MAX_PERIODS,
    USD,
    CompoundingFrequency,
    ConfigError,
    Currency,
    DebtInput,
    DebtPlan,
    DebtSchedule,
    Event,
    IOrderingStrategy,
    LoanType,
    LumpSumPayment,
    MethodComparison,
    NextPayment,
    OrderingRegistry,
    PaymentFrequency,
    PayoffMethod,
    PayoffWarning,
    PeriodPayment,
    PlanError,
    ProjectionDelta,
    ProjectionResult,
    RolldownPayment,
    Scenario,
    ScenarioComparison,
    ScenarioOutcome,
    SimulationCancelled,
    SimulationContext,
    StrategySettings,
    ValidationError,
    ValidationIssue,
    adjusted_extra_payment,
    compare_methods,
    compare_scenarios,
    focus_debt_id,
    load_plan,
    normalize,
    projection_delta,
    simulate,
)

# Import KPI utilities
from .kpi import (
    interest_paid_cum,
    payment_split,
    percent_complete,
    percent_complete_series,
    principal_paid_cum,
    total_balance,
)

__all__ = [
    "MAX_PERIODS",
    "USD",
    "CompoundingFrequency",
    "ConfigError",
    "Currency",
    "DebtInput",
    "DebtPlan",
    "DebtSchedule",
    "Event",
    "IOrderingStrategy",
    "LoanType",
    "LumpSumPayment",
    "MethodComparison",
    "NextPayment",
    "OrderingRegistry",
    "PaymentFrequency",
    "PayoffMethod",
    "PayoffWarning",
    "PeriodPayment",
    "PlanError",
    "ProjectionDelta",
    "ProjectionResult",
    "RolldownPayment",
    "Scenario",
    "ScenarioComparison",
    "ScenarioOutcome",
    "SimulationCancelled",
    "SimulationContext",
    "StrategySettings",
    "ValidationError",
    "ValidationIssue",
    "adjusted_extra_payment",
    "compare_methods",
    "compare_scenarios",
    "focus_debt_id",
    "interest_paid_cum",
    "load_plan",
    "normalize",
    "payment_split",
    "percent_complete",
    "percent_complete_series",
    "principal_paid_cum",
    "projection_delta",
    "simulate",
    "total_balance",
]
