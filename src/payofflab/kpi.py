"""
KPI calculation utilities for payoff analysis.

This module provides standalone functions over the trace frame returned by
``ProjectionResult.to_frame()`` (one row per period and debt). Functions
return pandas Series indexed by period unless stated otherwise.
"""

from __future__ import annotations

from decimal import Decimal

import numpy as np
import pandas as pd

from .core.currency import ZERO, round_money


def _per_period(df: pd.DataFrame, col: str) -> pd.Series:
    if df.empty:
        return pd.Series(dtype=float, name=col)
    return df.groupby("period")[col].sum().sort_index()


def interest_paid_cum(df: pd.DataFrame, interest_col: str = "interest") -> pd.Series:
    """
    Calculate cumulative interest accrued across all debts.

    Args:
        df: Trace frame
        interest_col: Column name for interest

    Returns:
        Series with cumulative interest per period
    """
    if interest_col not in df.columns:
        return pd.Series(0.0, index=df.index, name="interest_paid_cum")
    return _per_period(df, interest_col).cumsum().rename("interest_paid_cum")


def principal_paid_cum(df: pd.DataFrame, principal_col: str = "principal") -> pd.Series:
    """Cumulative principal repaid across all debts per period."""
    return _per_period(df, principal_col).cumsum().rename("principal_paid_cum")


def total_balance(df: pd.DataFrame, balance_col: str = "closing_balance") -> pd.Series:
    """Total outstanding balance across all debts at the end of each period."""
    if df.empty:
        return pd.Series(dtype=float, name="total_balance")
    # Paid-off debts drop out of the trace; carry their zero forward
    wide = df.pivot(index="period", columns="debt_id", values=balance_col)
    wide = wide.sort_index().ffill().fillna(0.0)
    return wide.sum(axis=1).rename("total_balance")


def payment_split(df: pd.DataFrame) -> pd.DataFrame:
    """
    Interest vs. principal per period.

    Returns:
        DataFrame indexed by period with columns ``interest``, ``principal``
        and ``payment``
    """
    cols = ["interest", "principal", "payment"]
    if df.empty:
        return pd.DataFrame(columns=cols)
    return df.groupby("period")[cols].sum().sort_index()


def percent_complete(
    original_balance: Decimal | float, remaining_balance: Decimal | float
) -> float:
    """
    Share of the original balance already repaid, in [0, 1].

    Returns 0 when nothing was owed.
    """
    original = Decimal(str(original_balance))
    if original <= ZERO:
        return 0.0
    remaining = Decimal(str(remaining_balance))
    share = (original - remaining) / original
    return float(min(max(share, ZERO), Decimal(1)))


def percent_complete_series(df: pd.DataFrame) -> pd.Series:
    """``percent_complete`` of the total balance at the end of every period."""
    if df.empty:
        return pd.Series(dtype=float, name="percent_complete")
    original = df[df["period"] == df["period"].min()]["opening_balance"].sum()
    balance = total_balance(df)
    if original <= 0:
        return pd.Series(0.0, index=balance.index, name="percent_complete")
    pct = np.clip((original - balance.to_numpy()) / original, 0.0, 1.0)
    return pd.Series(pct, index=balance.index, name="percent_complete")


def interest_share(df: pd.DataFrame) -> float:
    """Fraction of everything paid that went to interest (0 when nothing was paid)."""
    if df.empty:
        return 0.0
    paid = df["payment"].sum()
    return float(df["interest"].sum() / paid) if paid > 0 else 0.0


def debt_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-debt totals from the trace.

    Returns:
        DataFrame indexed by debt_id with ``periods``, ``interest``,
        ``payment`` and ``payoff_period`` (NaN when still owing)

    Note:
        Payoff is read from the exact ``paid_off`` column; a balance below
        half a cent rounds to 0.0 in the frame but is still owed.
    """
    cols = ["periods", "interest", "payment", "payoff_period"]
    if df.empty:
        return pd.DataFrame(columns=cols)
    grouped = df.groupby("debt_id", sort=False)
    summary = pd.DataFrame(
        {
            "periods": grouped["period"].count(),
            "interest": grouped["interest"].sum(),
            "payment": grouped["payment"].sum(),
        }
    )
    paid = df[df["paid_off"].astype(bool)].groupby("debt_id")["period"].min()
    summary["payoff_period"] = paid.reindex(summary.index)
    return summary


def rounded_total(values: pd.Series, currency: str = "USD") -> Decimal:
    """Sum a float column back into a currency-rounded ``Decimal``."""
    return round_money(Decimal(str(round(float(values.sum()), 6))), currency)
