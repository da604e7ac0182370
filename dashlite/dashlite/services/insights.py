"""AI-written chart commentary.

``get_chart_insights`` never raises: a missing API key, a failed request or
an empty reply all come back as a readable fallback message so a chart is
always rendered regardless of the insight service.
"""
from __future__ import annotations

import json
import logging
from typing import Optional
import pandas as pd
from openai import OpenAI

from ..charts import categories, metric_values
from ..config import Settings, load_settings
from ..core.data_model import DashboardConfig

logger = logging.getLogger(__name__)

INSIGHT_UNAVAILABLE = "AI insight is unavailable (no API key configured)."
INSIGHT_ERROR = "Could not reach the insight service."
INSIGHT_EMPTY = "The insight service returned no analysis."

FOCUS = {
    "trend": "Analyse how the metrics move over time: trend and volatility.",
    "structure": "Analyse how each dimension contributes to the metrics.",
    "ranking": "Interpret the ranking of dimensions and their contribution.",
    "funnel": "Interpret drop-off between stages and the key funnel steps.",
}

SYSTEM_PROMPT = (
    "You are a senior business data analyst. Answer with at most three "
    "concise bullet points, in a professional and decisive tone."
)


def build_prompt(title: str, data_summary: str, description_type: str) -> str:
    focus = FOCUS.get(description_type, FOCUS["trend"])
    return (
        f'Interpret the chart "{title}". Focus: {focus} '
        f"Data: {data_summary}"
    )


def build_data_summary(
    df: pd.DataFrame, snapshot: DashboardConfig, max_rows: int = 20
) -> str:
    head = df.head(max_rows)
    values = {m: metric_values(head, m) for m in snapshot.metrics}
    rows = []
    for i, label in enumerate(categories(head, snapshot)):
        row = {"label": label}
        row.update({m: vals[i] for m, vals in values.items()})
        rows.append(row)
    summary = json.dumps(rows, ensure_ascii=False, default=str)
    if len(df) > max_rows:
        summary += f" (first {max_rows} of {len(df)} rows)"
    return summary


def get_chart_insights(
    title: str,
    data_summary: str,
    description_type: str = "trend",
    client: Optional[OpenAI] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or load_settings()
    if client is None:
        if not settings.insights_enabled:
            return INSIGHT_UNAVAILABLE
        client = OpenAI(api_key=settings.openai_api_key)
    try:
        resp = client.responses.create(
            model=settings.insight_model,
            instructions=SYSTEM_PROMPT,
            input=build_prompt(title, data_summary, description_type),
            temperature=settings.insight_temperature,
        )
        text = (resp.output_text or "").strip()
    except Exception:
        logger.exception("Insight request failed for chart %r", title)
        return INSIGHT_ERROR
    return text or INSIGHT_EMPTY


__all__ = [
    "INSIGHT_UNAVAILABLE",
    "INSIGHT_ERROR",
    "INSIGHT_EMPTY",
    "build_prompt",
    "build_data_summary",
    "get_chart_insights",
]
