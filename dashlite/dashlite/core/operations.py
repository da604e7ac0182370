"""Pure transformation operations (stateless) + registry.

Each operation is a function(df, **kwargs) -> df and never mutates its input.
``process`` chains them in the fixed order that produces the dataset shared
by every chart; ``aggregate_for_chart`` derives a single chart's view.
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, Mapping, Tuple
import pandas as pd

from ..constants import GLOBAL_GROUP, SUMMARY, UNGROUPED
from .data_model import DashboardConfig, FilterState
from .formula import apply_formulas

Registry: Dict[str, Callable] = {}


def register(name: str):
    def deco(fn: Callable):
        Registry[name] = fn
        return fn
    return deco


@register("formulas")
def op_formulas(df: pd.DataFrame, formulas: str):
    return apply_formulas(df, formulas)


@register("time_range")
def op_time_range(df: pd.DataFrame, column: str, date_range: Tuple[str, str]):
    lower, upper = date_range
    if not column or column == SUMMARY or not lower or not upper:
        return df
    if column not in df.columns:
        return df.iloc[0:0]
    values = df[column].astype(str)
    return df[(values >= lower) & (values <= upper)]


@register("dimension_filter")
def op_dimension_filter(
    df: pd.DataFrame, dimension_filters: Mapping[str, Iterable[str]]
):
    out = df
    for dim, allowed in dimension_filters.items():
        allowed = [str(v) for v in allowed or ()]
        if not allowed:
            continue
        if dim not in out.columns:
            return out.iloc[0:0]
        out = out[out[dim].astype(str).isin(allowed)]
    return out


def group_label(value) -> str:
    if value is None or value == "" or value == 0 or value is False:
        return UNGROUPED
    try:
        if pd.isna(value):
            return UNGROUPED
    except (TypeError, ValueError):
        pass
    return str(value)


@register("summary")
def op_summary(df: pd.DataFrame, metrics: Iterable[str], group_column: str = ""):
    metrics = list(metrics)
    key = group_column or GLOBAL_GROUP
    if key in df.columns:
        labels = df[key].map(group_label)
    else:
        labels = pd.Series(UNGROUPED, index=df.index, dtype="object")
    sums = pd.DataFrame(index=df.index)
    for m in metrics:
        if m in df.columns:
            col = pd.to_numeric(df[m], errors="coerce").fillna(0.0)
        else:
            col = pd.Series(0.0, index=df.index)
        sums[m] = col.astype("float64")
    grouped = sums.groupby(labels.rename(key), sort=False).sum()
    grouped = grouped.reset_index()
    if len(grouped) == 0:
        grouped = pd.DataFrame(columns=[key, *metrics])
    if metrics:
        grouped = grouped.sort_values(
            metrics[0], ascending=False, kind="stable"
        )
    return grouped.reset_index(drop=True)


def apply_filters(
    df: pd.DataFrame, config: DashboardConfig, filters: FilterState
) -> pd.DataFrame:
    out = op_time_range(df, column=config.x_axis, date_range=filters.date_range)
    return op_dimension_filter(out, dimension_filters=filters.dimension_filters)


def process(
    df: pd.DataFrame, config: DashboardConfig, filters: FilterState
) -> pd.DataFrame:
    """Formulas, then time range, then dimension allow-sets."""
    out = op_formulas(df, formulas=config.formulas)
    return apply_filters(out, config, filters)


def aggregate_for_chart(df: pd.DataFrame, snapshot: DashboardConfig) -> pd.DataFrame:
    if not snapshot.is_summary:
        return df
    return op_summary(
        df, metrics=snapshot.metrics, group_column=snapshot.group_column
    )


def chart_dimension_key(snapshot: DashboardConfig) -> str:
    """Column holding a chart's category labels."""
    if snapshot.is_summary:
        return snapshot.group_column or GLOBAL_GROUP
    return snapshot.x_axis


__all__ = [
    "Registry",
    "register",
    "op_formulas",
    "op_time_range",
    "op_dimension_filter",
    "op_summary",
    "group_label",
    "apply_filters",
    "process",
    "aggregate_for_chart",
    "chart_dimension_key",
]
