"""Static HTML snapshot of the saved charts.

The document embeds each saved chart (plotly.js loaded once from the CDN),
renders tables and metric cards as plain HTML and drops every control.
"""
from __future__ import annotations

import html
import logging
import time
from datetime import date
from typing import List, Optional, Sequence
import pandas as pd

from ..charts import FIGURE_CHARTS, make_chart, metric_totals, table_frame
from ..core.dashboard import ConfigurationError
from ..core.data_model import ChartMeta
from ..core.operations import aggregate_for_chart

logger = logging.getLogger(__name__)

PAGE_STYLE = (
    "body{padding:40px;background:#060c1d;color:#fff;font-family:sans-serif;}"
    "h1{text-align:center;color:#00f2ff;margin-bottom:40px;}"
    ".card{max-width:1200px;margin:0 auto 40px auto;padding:24px;"
    "border:1px solid rgba(0,242,255,0.3);background:rgba(10,25,50,0.8);}"
    ".metric{text-align:center;font-size:48px;color:#00f2ff;}"
    "table{width:100%;border-collapse:collapse;}"
    "th,td{padding:8px;border-bottom:1px solid rgba(255,255,255,0.1);}"
)


def export_filename() -> str:
    return f"dashboard_{int(time.time() * 1000)}.html"


def _chart_body(chart: ChartMeta, data: pd.DataFrame, first_figure: bool) -> str:
    snapshot = chart.config_snapshot
    if chart.type == "metric_card":
        parts = [
            f"<p>{html.escape(m)}</p><p class='metric'>{total:,.2f}</p>"
            for m, total in metric_totals(data, snapshot).items()
        ]
        return "".join(parts)
    if chart.type == "table":
        return table_frame(data, snapshot).to_html(index=False, border=0)
    fig = make_chart(data, chart)
    return fig.to_html(
        full_html=False, include_plotlyjs="cdn" if first_figure else False
    )


def export_html(
    charts: Sequence[ChartMeta],
    processed: pd.DataFrame,
    title: Optional[str] = None,
    generated_on: Optional[date] = None,
) -> str:
    saved = [c for c in charts if c.is_saved]
    if not saved:
        raise ConfigurationError("Save and lock at least one chart to export.")
    generated_on = generated_on or date.today()
    title = title or f"Dashboard export - {generated_on.isoformat()}"
    sections: List[str] = []
    plotly_loaded = False
    for chart in saved:
        data = aggregate_for_chart(processed, chart.config_snapshot)
        first_figure = chart.type in FIGURE_CHARTS and not plotly_loaded
        body = _chart_body(chart, data, first_figure)
        plotly_loaded = plotly_loaded or first_figure
        insight = (
            f"<p>{html.escape(chart.insight)}</p>" if chart.insight else ""
        )
        sections.append(
            f"<div class='card' id='{html.escape(chart.id)}'>"
            f"<h2>{html.escape(chart.title)}</h2>{body}{insight}</div>"
        )
    logger.info("Exported %d saved charts", len(saved))
    return (
        "<!DOCTYPE html><html><head><meta charset='utf-8'>"
        f"<title>{html.escape(title)}</title><style>{PAGE_STYLE}</style>"
        f"</head><body><h1>{html.escape(title)}</h1>{''.join(sections)}"
        "</body></html>"
    )


__all__ = ["export_html", "export_filename"]
