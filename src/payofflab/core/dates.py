"""
Calendar arithmetic for payment periods.

Pure functions only: the same start date and period count always give the
same date, which keeps simulations deterministic.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

import pandas as pd

from .kinds import PaymentFrequency

_DAYS_PER_TICK = {
    PaymentFrequency.BIWEEKLY: 14,
    PaymentFrequency.WEEKLY: 7,
}


def add_months(start: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the end of the target month.

    **Example:**
        ```python
        add_months(date(2026, 1, 31), 1)  # date(2026, 2, 28)
        ```
    """
    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def add_periods(start: date, periods: int, frequency: PaymentFrequency) -> date:
    """Date reached after ``periods`` payment periods from ``start``."""
    if frequency is PaymentFrequency.MONTHLY:
        return add_months(start, periods)
    return start + timedelta(days=_DAYS_PER_TICK[frequency] * periods)


def period_dates(start: date, periods: int, frequency: PaymentFrequency) -> pd.DatetimeIndex:
    """
    Dates of payment periods ``1..periods`` as a pandas index.

    Used as the time axis of trace frames and charts.
    """
    return pd.DatetimeIndex(
        pd.to_datetime([add_periods(start, i, frequency) for i in range(1, periods + 1)]),
        name="date",
    )
