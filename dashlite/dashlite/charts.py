"""Plotly figures for dashboard widgets.

Every builder reads the chart's frozen configuration snapshot, never the
live dashboard config, and expects the chart's already aggregated data.
"""
from typing import Dict, List
import pandas as pd
import plotly.graph_objects as go

from .constants import (
    FUNNEL_STAGE_LIMIT,
    PALETTES,
    PIE_SLICE_LIMIT,
    TABLE_ROW_LIMIT,
    UNGROUPED,
)
from .core.data_model import ChartMeta, DashboardConfig
from .core.operations import chart_dimension_key, group_label

FIGURE_CHARTS = {
    "line", "area", "bar", "ranking", "pie", "funnel", "waterfall", "boxplot"
}


def categories(df: pd.DataFrame, snapshot: DashboardConfig) -> List[str]:
    key = chart_dimension_key(snapshot)
    if key not in df.columns:
        return [UNGROUPED] * len(df)
    return [group_label(v) for v in df[key].tolist()]


def metric_values(df: pd.DataFrame, metric: str) -> List[float]:
    if metric not in df.columns:
        return [0.0] * len(df)
    return pd.to_numeric(df[metric], errors="coerce").fillna(0.0).tolist()


def metric_totals(df: pd.DataFrame, snapshot: DashboardConfig) -> Dict[str, float]:
    return {m: float(sum(metric_values(df, m))) for m in snapshot.metrics}


def table_frame(
    df: pd.DataFrame, snapshot: DashboardConfig, limit: int = TABLE_ROW_LIMIT
) -> pd.DataFrame:
    key = chart_dimension_key(snapshot)
    head = df.head(limit)
    out = pd.DataFrame({key: categories(head, snapshot)})
    for m in snapshot.metrics:
        out[m] = metric_values(head, m)
    return out


def make_chart(df: pd.DataFrame, chart: ChartMeta) -> go.Figure:
    snapshot = chart.config_snapshot
    chart_type = chart.type
    cats = categories(df, snapshot)
    colors = PALETTES["Neon"]
    metrics = snapshot.metrics
    fig = go.Figure()
    if chart_type in ("line", "area"):
        for i, m in enumerate(metrics):
            fig.add_trace(go.Scatter(
                x=cats, y=metric_values(df, m), name=m, mode="lines",
                line=dict(shape="spline", color=colors[i % len(colors)]),
                fill="tozeroy" if chart_type == "area" else None,
            ))
        fig.update_layout(hovermode="x unified")
    elif chart_type in ("bar", "ranking"):
        horizontal = chart_type == "ranking"
        for i, m in enumerate(metrics):
            vals = metric_values(df, m)
            fig.add_trace(go.Bar(
                x=vals if horizontal else cats,
                y=cats if horizontal else vals,
                name=m,
                orientation="h" if horizontal else "v",
                marker_color=colors[i % len(colors)],
            ))
        if horizontal:
            fig.update_yaxes(autorange="reversed")
    elif chart_type == "pie":
        head = df.head(PIE_SLICE_LIMIT)
        fig.add_trace(go.Pie(
            labels=categories(head, snapshot),
            values=metric_values(head, metrics[0]),
            hole=0.4,
            marker=dict(colors=colors),
        ))
    elif chart_type == "funnel":
        head = df.head(FUNNEL_STAGE_LIMIT)
        fig.add_trace(go.Funnel(
            y=categories(head, snapshot),
            x=metric_values(head, metrics[0]),
        ))
    elif chart_type == "waterfall":
        vals = metric_values(df, metrics[0])
        fig.add_trace(go.Waterfall(
            x=cats, y=vals, measure=["relative"] * len(vals), name=metrics[0],
        ))
    elif chart_type == "boxplot":
        for i, m in enumerate(metrics):
            fig.add_trace(go.Box(
                y=metric_values(df, m), name=m,
                marker_color=colors[i % len(colors)],
            ))
    else:
        raise ValueError(f"Chart type {chart_type!r} is not rendered as a figure")
    fig.update_layout(title=chart.title)
    return fig


__all__ = [
    "FIGURE_CHARTS",
    "categories",
    "metric_values",
    "metric_totals",
    "table_frame",
    "make_chart",
]
