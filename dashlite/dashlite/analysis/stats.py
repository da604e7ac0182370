"""Descriptive statistics for metric columns.

Median and p75 are read at index ``floor(n * q)`` of the ascending values
(no interpolation), so for even counts the median is the upper middle value.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List
import numpy as np
import pandas as pd


@dataclass
class MetricStats:
    name: str
    mean: float = 0.0
    median: float = 0.0
    p75: float = 0.0
    min: float = 0.0
    max: float = 0.0
    sum: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _index_quantile(vals: np.ndarray, q: float) -> float:
    return float(vals[int(np.floor(len(vals) * q))])


def calculate_metric_stats(df: pd.DataFrame, metric: str) -> MetricStats:
    if metric not in df.columns:
        return MetricStats(metric)
    vals = pd.to_numeric(df[metric], errors="coerce").dropna().to_numpy(
        dtype="float64"
    )
    if not len(vals):
        return MetricStats(metric)
    vals = np.sort(vals)
    total = float(vals.sum())
    return MetricStats(
        name=metric,
        mean=total / len(vals),
        median=_index_quantile(vals, 0.5),
        p75=_index_quantile(vals, 0.75),
        min=float(vals[0]),
        max=float(vals[-1]),
        sum=total,
    )


def summary_stats(df: pd.DataFrame, metrics: Iterable[str]) -> List[MetricStats]:
    return [calculate_metric_stats(df, m) for m in metrics]


__all__ = ["MetricStats", "calculate_metric_stats", "summary_stats"]
