"""Dashboard state transitions.

Every function takes a ``DashboardState`` and returns a new one; callers keep
whichever state is current (the Streamlit session in the app).
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any, List, Mapping, Optional, Sequence, Union
import pandas as pd

from ..analysis.stats import MetricStats, summary_stats
from ..constants import (
    CHART_TYPES,
    RANKING_KEYWORDS,
    STRUCTURE_KEYWORDS,
)
from .cleaning import clean_data
from .data_model import (
    ChartMeta,
    DashboardConfig,
    DashboardState,
    Dataset,
)
from .inference import identify_column_types
from .operations import aggregate_for_chart, process

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """A user action whose preconditions are not met; state is unchanged."""
    pass


def default_config(dataset: Dataset) -> DashboardConfig:
    times = dataset.time_columns
    dims = dataset.dimension_columns
    return DashboardConfig(
        x_axis=times[0] if times else "",
        metrics=dataset.metric_columns[:2],
        group_column=dims[0] if dims else "",
        formulas="",
    )


def import_records(
    data: Union[pd.DataFrame, Sequence[Mapping[str, Any]]],
) -> DashboardState:
    """Build a fresh state from raw records, replacing any previous import."""
    mappings = identify_column_types(data)
    df = clean_data(data, mappings)
    dataset = Dataset(df.reset_index(drop=True), mappings)
    logger.info(
        "Imported %d rows; time=%s metrics=%s dimensions=%s",
        len(df),
        dataset.time_columns,
        dataset.metric_columns,
        dataset.dimension_columns,
    )
    return DashboardState(dataset=dataset, config=default_config(dataset))


def update_config(state: DashboardState, **changes) -> DashboardState:
    return replace(state, config=replace(state.config, **changes))


def update_filters(state: DashboardState, **changes) -> DashboardState:
    return replace(state, filters=replace(state.filters, **changes))


def infer_description_type(chart_type: str, metrics: Sequence[str]) -> str:
    text = " ".join(metrics)
    lowered = text.lower()

    def mentions(keywords):
        return any(k in text or k in lowered for k in keywords)

    if chart_type == "pie" or mentions(STRUCTURE_KEYWORDS):
        return "structure"
    if chart_type == "ranking" or mentions(RANKING_KEYWORDS):
        return "ranking"
    if chart_type == "funnel":
        return "funnel"
    return "trend"


def chart_title(chart_type: str, metrics: Sequence[str]) -> str:
    if chart_type == "metric_card":
        return f"{'+'.join(metrics)} summary card"
    return f"{' & '.join(metrics)} analysis"


def add_chart(state: DashboardState, chart_type: str) -> DashboardState:
    if chart_type not in CHART_TYPES:
        raise ConfigurationError(f"Unknown chart type: {chart_type}")
    if not state.config.metrics:
        raise ConfigurationError(
            "Select at least one metric in the configuration panel first."
        )
    snapshot = state.config.snapshot()
    chart = ChartMeta(
        id=str(uuid.uuid4()),
        type=chart_type,
        title=chart_title(chart_type, snapshot.metrics),
        config_snapshot=snapshot,
        description_type=infer_description_type(chart_type, snapshot.metrics),
    )
    logger.info("Added %s chart %s (%s)", chart_type, chart.id, chart.title)
    return replace(state, charts=[*state.charts, chart])


def remove_chart(state: DashboardState, chart_id: str) -> DashboardState:
    logger.info("Removed chart %s", chart_id)
    return replace(state, charts=[c for c in state.charts if c.id != chart_id])


def update_chart(state: DashboardState, chart_id: str, **changes) -> DashboardState:
    charts = [
        replace(c, **changes) if c.id == chart_id else c for c in state.charts
    ]
    return replace(state, charts=charts)


def toggle_saved(state: DashboardState, chart_id: str) -> DashboardState:
    """Saving a chart also locks it; unsaving unlocks."""
    for c in state.charts:
        if c.id == chart_id:
            saved = not c.is_saved
            return update_chart(state, chart_id, is_saved=saved, is_locked=saved)
    return state


def saved_charts(state: DashboardState, require: bool = False) -> List[ChartMeta]:
    saved = [c for c in state.charts if c.is_saved]
    if require and not saved:
        raise ConfigurationError("Save and lock at least one chart to export.")
    return saved


def processed_data(state: DashboardState) -> pd.DataFrame:
    return process(state.dataset.df, state.config, state.filters)


def chart_data(processed: pd.DataFrame, chart: ChartMeta) -> pd.DataFrame:
    return aggregate_for_chart(processed, chart.config_snapshot)


def dashboard_stats(
    state: DashboardState, processed: Optional[pd.DataFrame] = None
) -> List[MetricStats]:
    if processed is None:
        processed = processed_data(state)
    return summary_stats(processed, state.config.metrics)


__all__ = [
    "ConfigurationError",
    "default_config",
    "import_records",
    "update_config",
    "update_filters",
    "infer_description_type",
    "chart_title",
    "add_chart",
    "remove_chart",
    "update_chart",
    "toggle_saved",
    "saved_charts",
    "processed_data",
    "chart_data",
    "dashboard_stats",
]
