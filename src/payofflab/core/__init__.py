"""
Core module for PayoffLab.

This module contains the payoff engine: debt inputs and their normalizer,
rate conversion, the amortization simulator, result aggregation and the
what-if helpers built on top of ``simulate``.
"""

from .context import (
    MAX_PERIODS,
    CancellationToken,
    LumpSumPayment,
    SimulationContext,
    StrategySettings,
)
from .currency import (
    EUR,
    GBP,
    JPY,
    USD,
    Currency,
    RoundingPolicy,
    format_money,
    get_currency,
    round_money,
    to_decimal,
)
from .dates import add_months, add_periods, period_dates
from .debts import ALIASES, DebtInput, normalize, total_minimums
from .engine import MethodComparison, compare_methods, focus_debt_id, simulate
from .errors import (
    ConfigError,
    PayoffWarning,
    SimulationCancelled,
    ValidationError,
    ValidationIssue,
)
from .events import Event
from .interfaces import IOrderingStrategy
from .kinds import CompoundingFrequency, LoanType, PaymentFrequency, PayoffMethod
from .plan_loader import DebtPlan, PlanError, dump_plan, load_plan
from .rates import PeriodicRate, convert, periodic_rate
from .registry import OrderingRegistry, get_ordering, order_debts
from .results import (
    DebtSchedule,
    NextPayment,
    PeriodPayment,
    ProjectionResult,
    RolldownPayment,
    aggregate,
)
from .simulator import AmortizationSimulator, SimulationState, SimulationStatus, TickRecord
from .whatif import (
    ProjectionDelta,
    Scenario,
    ScenarioComparison,
    ScenarioOutcome,
    adjusted_extra_payment,
    compare_scenarios,
    projection_delta,
)

__all__ = [
    # Errors
    "ConfigError",
    "PayoffWarning",
    "SimulationCancelled",
    "ValidationError",
    "ValidationIssue",
    # Money
    "Currency",
    "RoundingPolicy",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "format_money",
    "get_currency",
    "round_money",
    "to_decimal",
    # Kinds
    "CompoundingFrequency",
    "LoanType",
    "PaymentFrequency",
    "PayoffMethod",
    # Inputs
    "ALIASES",
    "DebtInput",
    "normalize",
    "total_minimums",
    # Context
    "MAX_PERIODS",
    "CancellationToken",
    "LumpSumPayment",
    "SimulationContext",
    "StrategySettings",
    # Dates and rates
    "add_months",
    "add_periods",
    "period_dates",
    "PeriodicRate",
    "convert",
    "periodic_rate",
    # Strategies
    "IOrderingStrategy",
    "OrderingRegistry",
    "get_ordering",
    "order_debts",
    # Simulation
    "AmortizationSimulator",
    "Event",
    "SimulationState",
    "SimulationStatus",
    "TickRecord",
    # Results
    "DebtSchedule",
    "NextPayment",
    "PeriodPayment",
    "ProjectionResult",
    "RolldownPayment",
    "aggregate",
    # Engine
    "MethodComparison",
    "compare_methods",
    "focus_debt_id",
    "simulate",
    # What-if
    "ProjectionDelta",
    "Scenario",
    "ScenarioComparison",
    "ScenarioOutcome",
    "adjusted_extra_payment",
    "compare_scenarios",
    "projection_delta",
    # Plans
    "DebtPlan",
    "PlanError",
    "dump_plan",
    "load_plan",
]
