"""
Amortization simulator: the tick-by-tick payoff state machine.

One run advances every active debt in lockstep, one tick per payment
period. Per tick:

1. Accrue interest on every debt still owing money.
2. Pay each debt its own allocation (minimum plus its additional payment),
   capped at its balance; any unused allocation joins this tick's pool.
3. Pour the rolldown pool (run-level extra, lump sum for the tick, freed
   allocations of debts paid off in earlier ticks) into the highest-priority
   debt, cascading down the fixed order when a debt reaches zero.
4. Debts that reached zero free their allocation into the pool from the
   next tick on.

The run stops CONVERGED when every debt is paid off, or CAPPED at the
safety horizon. Termination is guaranteed by the horizon alone.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from enum import Enum

from .context import SimulationContext
from .currency import GUARD_CONTEXT, ZERO
from .debts import DebtInput
from .errors import SimulationCancelled
from .events import Event
from .rates import PeriodicRate, convert
from .registry import get_ordering

logger = logging.getLogger(__name__)


class SimulationStatus(Enum):
    """Lifecycle of a run. Terminal states are final."""

    RUNNING = "running"
    CONVERGED = "converged"
    CAPPED = "capped"


@dataclass(frozen=True)
class TickRecord:
    """
    What happened to one debt during one tick (exact, unrounded).

    Attributes:
        period: 1-based tick index
        debt_id: Debt identifier
        opening_balance: Balance before interest
        interest: Interest accrued this tick
        scheduled_payment: Paid from the debt's own allocation
        rolldown_payment: Paid from the rolldown pool
        closing_balance: Balance after all payments
    """

    period: int
    debt_id: str
    opening_balance: Decimal
    interest: Decimal
    scheduled_payment: Decimal
    rolldown_payment: Decimal
    closing_balance: Decimal

    @property
    def payment(self) -> Decimal:
        return self.scheduled_payment + self.rolldown_payment

    @property
    def principal(self) -> Decimal:
        # Negative when the payment does not cover the interest
        return self.payment - self.interest


@dataclass
class DebtLedger:
    """Mutable balance ledger entry for one debt during a run."""

    debt: DebtInput
    rate: PeriodicRate
    balance: Decimal
    cumulative_interest: Decimal = ZERO
    payoff_period: int | None = None
    first_rolldown_period: int | None = None
    minimum_only_periods: int = 0

    @property
    def active(self) -> bool:
        return self.balance > ZERO


@dataclass
class SimulationState:
    """
    State of one run, owned by a single simulator and discarded afterwards.

    Attributes:
        order: Active debt ids, highest priority first (fixed for the run)
        ledgers: Ledger per active debt id
        period: Last completed tick (0 before the first tick)
        rolldown_pool: Freed allocations available from the next tick on
        status: Current lifecycle state
        trace: Tick records in (period, priority) order
        events: Payoff, rolldown and cap events
    """

    order: list[str]
    ledgers: dict[str, DebtLedger]
    period: int = 0
    rolldown_pool: Decimal = ZERO
    status: SimulationStatus = SimulationStatus.RUNNING
    trace: list[TickRecord] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    def active_ledgers(self) -> list[DebtLedger]:
        return [self.ledgers[i] for i in self.order if self.ledgers[i].active]

    @property
    def converged(self) -> bool:
        return self.status is SimulationStatus.CONVERGED


class AmortizationSimulator:
    """
    Runs one payoff simulation over a snapshot of debts.

    **Example Usage:**
        ```python
        from datetime import date
        from payofflab.core.context import SimulationContext
        from payofflab.core.simulator import AmortizationSimulator

        ctx = SimulationContext(start_date=date(2026, 1, 1))
        state = AmortizationSimulator(debts, ctx).run()
        print(state.status, state.period)
        ```

    Note:
        ``debts`` must already be normalized. Zero-balance debts are skipped;
        the aggregator reports them as already paid off.
    """

    def __init__(self, debts: Sequence[DebtInput], ctx: SimulationContext):
        self.ctx = ctx
        active = [d for d in debts if not d.is_paid_off]
        self._order = get_ordering(ctx.method).order(active)
        self._debts = {d.id: d for d in active}

    def _initial_state(self) -> SimulationState:
        ledgers = {
            debt_id: DebtLedger(
                debt=self._debts[debt_id],
                rate=convert(self._debts[debt_id], self.ctx.frequency),
                balance=self._debts[debt_id].remaining_balance,
            )
            for debt_id in self._order
        }
        return SimulationState(order=list(self._order), ledgers=ledgers)

    def run(self) -> SimulationState:
        """
        Advance tick by tick until CONVERGED or CAPPED.

        Raises:
            SimulationCancelled: If the context's cancellation token is set
        """
        state = self._initial_state()
        if not state.order:
            state.status = SimulationStatus.CONVERGED
            return state

        while state.status is SimulationStatus.RUNNING:
            if self.ctx.is_cancelled():
                raise SimulationCancelled(state.period + 1)
            self.step(state)
        return state

    def step(self, state: SimulationState) -> None:
        """Advance ``state`` by exactly one tick."""
        period = state.period + 1
        ctx = self.ctx

        with localcontext(GUARD_CONTEXT):
            ledgers = state.active_ledgers()
            opening: dict[str, Decimal] = {}
            interest: dict[str, Decimal] = {}
            scheduled: dict[str, Decimal] = {}
            rolldown: dict[str, Decimal] = {}

            for ledger in ledgers:
                debt_id = ledger.debt.id
                opening[debt_id] = ledger.balance
                accrued = ledger.balance * ledger.rate.tick_rate
                ledger.balance += accrued
                ledger.cumulative_interest += accrued
                interest[debt_id] = accrued

            pool = ctx.extra_payment + state.rolldown_pool + ctx.lump_sum_for(period)

            for ledger in ledgers:
                allocation = ledger.debt.allocation
                paid = min(allocation, ledger.balance)
                ledger.balance -= paid
                scheduled[ledger.debt.id] = paid
                pool += allocation - paid

            for ledger in ledgers:
                if pool <= ZERO:
                    break
                if not ledger.active:
                    continue
                paid = min(pool, ledger.balance)
                ledger.balance -= paid
                pool -= paid
                rolldown[ledger.debt.id] = paid

            freed = ZERO
            for ledger in ledgers:
                debt_id = ledger.debt.id
                extra = rolldown.get(debt_id, ZERO)
                if extra > ZERO and ledger.first_rolldown_period is None:
                    ledger.first_rolldown_period = period
                    state.events.append(
                        Event(
                            period,
                            "rolldown_start",
                            debt_id,
                            f"{ledger.debt.name} starts receiving rolldown payments",
                            {"amount": str(extra)},
                        )
                    )
                elif ledger.first_rolldown_period is None:
                    ledger.minimum_only_periods += 1

                if ledger.balance == ZERO:
                    ledger.payoff_period = period
                    freed += ledger.debt.allocation
                    state.events.append(
                        Event(
                            period,
                            "payoff",
                            debt_id,
                            f"{ledger.debt.name} paid off",
                            {"interest_paid": str(ledger.cumulative_interest)},
                        )
                    )
                    logger.debug("Debt %s paid off at period %d", debt_id, period)

                state.trace.append(
                    TickRecord(
                        period=period,
                        debt_id=debt_id,
                        opening_balance=opening[debt_id],
                        interest=interest[debt_id],
                        scheduled_payment=scheduled[debt_id],
                        rolldown_payment=extra,
                        closing_balance=ledger.balance,
                    )
                )

            state.rolldown_pool += freed

        state.period = period
        if not state.active_ledgers():
            state.status = SimulationStatus.CONVERGED
        elif period >= ctx.horizon:
            state.status = SimulationStatus.CAPPED
            remaining = [lg.debt.id for lg in state.active_ledgers()]
            state.events.append(
                Event(
                    period,
                    "capped",
                    None,
                    f"Safety horizon of {ctx.horizon} periods reached",
                    {"unpaid": remaining},
                )
            )
            logger.warning(
                "Payoff simulation capped at %d periods; unpaid debts: %s",
                period,
                ", ".join(remaining),
            )
