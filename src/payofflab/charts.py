"""
Chart functions for visualizing payoff projections.

- Projection level: balance burn-down, payoff timeline, interest vs. principal
- Comparison level: scenario (or method) comparison bars

All chart functions return (figure, tidy_dataframe_used) for consistency.
"""

from __future__ import annotations

import pandas as pd

from .core.results import ProjectionResult
from .core.whatif import ScenarioComparison
from .kpi import payment_split

# Plotly imports with graceful fallback
try:
    import plotly.express as px
    import plotly.graph_objects as go

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False


def _check_plotly() -> None:
    """Check if Plotly is available and raise helpful error if not."""
    if not PLOTLY_AVAILABLE:
        raise ImportError(
            "Plotly is required for chart functions. Install with:\n"
            "pip install plotly\n"
            "or\n"
            "pip install 'payofflab[viz]'"
        )


def _empty_figure(title: str, message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        title=title,
        xaxis={"visible": False, "showticklabels": False},
        yaxis={"visible": False, "showticklabels": False},
        annotations=[
            {
                "text": message,
                "showarrow": False,
                "xref": "paper",
                "yref": "paper",
                "x": 0.5,
                "y": 0.5,
            }
        ],
    )
    return fig


# =============================================================================
# Projection-level charts
# =============================================================================


def balance_burndown(result: ProjectionResult) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot each debt's remaining balance over time as stacked areas.

    **Use Cases:**
    - See when each debt disappears from the stack
    - Spot debts whose balance grows because payments do not cover interest

    **Args:**
        result: Projection from ``simulate``

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)

    **Example:**
        ```python
        from payofflab import simulate
        from payofflab.charts import balance_burndown

        fig, data = balance_burndown(simulate(debts, 100, start_date=today))
        fig.show()
        ```
    """
    _check_plotly()

    tidy = result.to_frame()[["date", "period", "debt_id", "closing_balance"]]
    title = f"Balance Burn-down ({result.method.value})"
    if tidy.empty:
        return _empty_figure(title, "Nothing owed."), tidy

    fig = px.area(
        tidy,
        x="date",
        y="closing_balance",
        color="debt_id",
        title=title,
        labels={"closing_balance": "Balance", "date": "Date", "debt_id": "Debt"},
    )
    fig.update_layout(hovermode="x unified", legend_title="Debt")

    return fig, tidy


def payoff_timeline(result: ProjectionResult) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot payoff milestones: one marker per debt at its payoff date.

    Debts still owing at the safety horizon are left out of the markers and
    listed in the title.

    Args:
        result: Projection from ``simulate``

    Returns:
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    tidy = pd.DataFrame(
        [
            {
                "debt_id": r.debt_id,
                "name": r.name,
                "order": r.order,
                "payoff_month": r.payoff_month,
                "payoff_date": pd.Timestamp(r.payoff_date) if r.payoff_date else pd.NaT,
                "minimum_only_months": r.minimum_only_months,
            }
            for r in result.rolldown_payments
        ],
        columns=["debt_id", "name", "order", "payoff_month", "payoff_date", "minimum_only_months"],
    )

    title = "Payoff Timeline"
    unpaid = tidy[tidy["payoff_date"].isna()]["debt_id"].tolist()
    if unpaid:
        title += f" (unpaid at horizon: {', '.join(unpaid)})"
    paid = tidy.dropna(subset=["payoff_date"])
    if paid.empty:
        return _empty_figure(title, "No debt is paid off within the horizon."), tidy

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=paid["payoff_date"],
            y=paid["name"],
            mode="markers+text",
            marker={"size": 12},
            text=[f"#{o + 1}" for o in paid["order"]],
            textposition="middle right",
            customdata=paid[["payoff_month", "minimum_only_months"]].to_numpy(),
            hovertemplate="<b>%{y}</b><br>"
            + "Paid off: %{x}<br>"
            + "Period: %{customdata[0]}<br>"
            + "Minimum-only periods: %{customdata[1]}<br>"
            + "<extra></extra>",
            name="Payoff",
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="Date",
        yaxis_title="Debt",
        yaxis={"autorange": "reversed"},
        hovermode="closest",
    )

    return fig, tidy


def interest_vs_principal(result: ProjectionResult) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot how each period's payment splits into interest and principal.

    Args:
        result: Projection from ``simulate``

    Returns:
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    split = payment_split(result.to_frame()).reset_index()
    title = "Interest vs. Principal per Period"
    if split.empty:
        return _empty_figure(title, "No payments recorded."), split

    tidy = split.melt(
        id_vars=["period"],
        value_vars=["interest", "principal"],
        var_name="component",
        value_name="amount",
    )
    colors = {"interest": "red", "principal": "green"}

    fig = go.Figure()
    for component in ["interest", "principal"]:
        data = tidy[tidy["component"] == component]
        fig.add_trace(
            go.Bar(
                name=component.title(),
                x=data["period"],
                y=data["amount"],
                marker_color=colors[component],
            )
        )
    fig.update_layout(
        title=title,
        xaxis_title="Period",
        yaxis_title="Amount",
        barmode="stack",
    )

    return fig, tidy


# =============================================================================
# Comparison-level charts
# =============================================================================


def scenario_comparison(comparison: ScenarioComparison) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot periods to debt-free and total interest per scenario, side by side.

    Args:
        comparison: Result of ``compare_scenarios``

    Returns:
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    from plotly.subplots import make_subplots

    tidy = pd.DataFrame(
        [
            {
                "scenario_id": o.scenario.id,
                "scenario_name": o.scenario.name or o.scenario.id,
                "total_months": o.result.total_months,
                "total_interest_paid": float(o.result.total_interest_paid),
                "converged": o.result.converged,
            }
            for o in comparison.outcomes
        ]
    )

    fig = make_subplots(rows=1, cols=2, subplot_titles=("Periods to Debt-Free", "Total Interest"))
    colors = ["green" if c else "gray" for c in tidy["converged"]]
    fig.add_trace(
        go.Bar(x=tidy["scenario_name"], y=tidy["total_months"], marker_color=colors, name="Periods"),
        row=1,
        col=1,
    )
    fig.add_trace(
        go.Bar(
            x=tidy["scenario_name"],
            y=tidy["total_interest_paid"],
            marker_color=colors,
            name="Interest",
        ),
        row=1,
        col=2,
    )
    fig.update_layout(
        title=f"Scenario Comparison (balanced: {comparison.balanced_id})",
        showlegend=False,
    )

    return fig, tidy


def save_chart(fig: go.Figure, filename: str, format: str = "html") -> None:
    """
    Save chart to file.

    Args:
        fig: Plotly figure
        filename: Output filename
        format: Output format ('html', 'png', 'svg')
    """
    _check_plotly()

    if format == "html":
        fig.write_html(filename)
    elif format in {"png", "svg"}:
        fig.write_image(filename, format=format)
    else:
        raise ValueError(f"Unsupported format: {format}")
