"""Plotly figure adapters for the finance tracker's view-models.

Each function accepts a structure produced by the analytics modules
(:mod:`projection`, :mod:`aggregation`, :mod:`flow`) and returns a
`plotly.graph_objects.Figure`.  Amounts are plotted in the base
currency; the caller formats axis labels for the display currency if it
needs to.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .aggregation import MonthSummary
from .flow import FlowGraph
from .projection import CashFlowTrend

TREND_SERIES = {
    "income_cumulative": "Income",
    "expense_cumulative": "Expenses",
    "future_expense": "Future Expenses",
    "future_income": "Future Income",
    "savings": "Savings",
    "projected_income": "Projected Income",
    "projected_expense": "Projected Expenses",
    "projected_savings": "Projected Savings",
}


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_cash_flow_chart(trend: CashFlowTrend, title: str | None = None) -> go.Figure:
    """Line chart of cumulative income, expenses, savings and projections.

    Parameters
    ----------
    trend : CashFlowTrend
        Output of :func:`finance_tracker.projection.project_cash_flow`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        One line per series that has at least one value.
    """
    if not trend.points:
        return _empty_figure()
    df = pd.DataFrame([asdict(point) for point in trend.points])
    present = [col for col in TREND_SERIES if df[col].notna().any()]
    long_df = df.melt(id_vars="date", value_vars=present, var_name="Series", value_name="Amount")
    long_df = long_df.dropna(subset=["Amount"])
    long_df["Amount"] = long_df["Amount"].astype(float)
    long_df["Series"] = long_df["Series"].map(TREND_SERIES)
    fig = px.line(long_df, x="date", y="Amount", color="Series")
    fig.update_layout(
        title=title or "Cash Flow Trend",
        xaxis_title="Date",
        yaxis_title="Amount",
    )
    return fig


def create_monthly_summary_chart(summaries: Sequence[MonthSummary], title: str | None = None) -> go.Figure:
    """Grouped bars of income, expenses, fixed costs and net flow per month.

    Parameters
    ----------
    summaries : sequence of MonthSummary
        Output of :func:`finance_tracker.aggregation.monthly_summary`.
    title : str, optional
        Chart title.
    """
    if not summaries:
        return _empty_figure()
    df = pd.DataFrame([asdict(summary) for summary in summaries]).sort_values("month")
    df = df.rename(columns={
        "total_income": "Income",
        "total_expenses": "Expenses",
        "fixed_expenses_monthly": "Fixed",
        "net_flow": "Net Flow",
    })
    long_df = df.melt(
        id_vars="display_month",
        value_vars=["Income", "Expenses", "Fixed", "Net Flow"],
        var_name="Metric",
        value_name="Amount",
    )
    fig = px.bar(long_df, x="display_month", y="Amount", color="Metric", barmode="group")
    fig.update_layout(
        title=title or "Monthly Summary",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_flow_sankey(graph: FlowGraph, title: str | None = None) -> go.Figure:
    """Sankey diagram of one flow decomposition level.

    Edges whose endpoints are not nodes of the graph, or whose value is not
    positive, are left out.
    """
    if not graph.nodes:
        return _empty_figure()
    index_map = {node.id: idx for idx, node in enumerate(graph.nodes)}
    edges = [
        edge for edge in graph.edges
        if edge.source in index_map and edge.target in index_map and edge.value > 0
    ]
    fig = go.Figure(
        data=[
            go.Sankey(
                node=dict(label=[node.name for node in graph.nodes], pad=20, thickness=18),
                link=dict(
                    source=[index_map[edge.source] for edge in edges],
                    target=[index_map[edge.target] for edge in edges],
                    value=[edge.value for edge in edges],
                ),
            )
        ]
    )
    fig.update_layout(title=title or "Financial Flow")
    return fig
