"""Core data model abstraction.

A Dataset wraps a canonical pandas DataFrame together with the column
classification derived at import time. The remaining dataclasses describe
dashboard configuration, filters and chart widgets; they are treated as
values and replaced rather than mutated.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
import pandas as pd

from ..constants import SUMMARY


class ColumnType(str, Enum):
    TIME = "TIME"
    METRIC = "METRIC"
    DIMENSION = "DIMENSION"


@dataclass(frozen=True)
class ColumnMapping:
    name: str
    type: ColumnType


@dataclass
class Dataset:
    df: pd.DataFrame = field(default_factory=pd.DataFrame)
    mappings: List[ColumnMapping] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.df.empty

    def columns_of(self, kind: ColumnType) -> List[str]:
        return [m.name for m in self.mappings if m.type == kind]

    @property
    def time_columns(self) -> List[str]:
        return self.columns_of(ColumnType.TIME)

    @property
    def metric_columns(self) -> List[str]:
        return self.columns_of(ColumnType.METRIC)

    @property
    def dimension_columns(self) -> List[str]:
        return self.columns_of(ColumnType.DIMENSION)


@dataclass
class DashboardConfig:
    x_axis: str = ""
    metrics: List[str] = field(default_factory=list)
    group_column: str = ""
    formulas: str = ""

    @property
    def is_summary(self) -> bool:
        return self.x_axis == SUMMARY

    def snapshot(self) -> "DashboardConfig":
        """Detached copy; later edits to this config never reach it."""
        return copy.deepcopy(self)


@dataclass
class FilterState:
    date_range: Tuple[str, str] = ("", "")
    dimension_filters: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def date_range_active(self) -> bool:
        lower, upper = self.date_range
        return bool(lower) and bool(upper)


@dataclass
class ChartMeta:
    id: str
    type: str
    title: str
    config_snapshot: DashboardConfig
    is_locked: bool = False
    is_saved: bool = False
    description_type: str = "trend"
    insight: Optional[str] = None


@dataclass
class DashboardState:
    dataset: Dataset = field(default_factory=Dataset)
    config: DashboardConfig = field(default_factory=DashboardConfig)
    filters: FilterState = field(default_factory=FilterState)
    charts: List[ChartMeta] = field(default_factory=list)


__all__ = [
    "ColumnType",
    "ColumnMapping",
    "Dataset",
    "DashboardConfig",
    "FilterState",
    "ChartMeta",
    "DashboardState",
]
