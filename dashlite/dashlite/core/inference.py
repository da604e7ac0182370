"""Column-type inference from a single sample row.

Only the first record of an import is inspected. A column whose first value
is blank or atypical is classified from that value alone; this matches the
behaviour users of existing dashboards rely on.
"""
from __future__ import annotations

import math
import re
import warnings
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import numpy as np
import pandas as pd

from ..constants import SERIAL_DATE_MAX, SERIAL_DATE_MIN
from .data_model import ColumnMapping, ColumnType

NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_real_number(value: Any) -> bool:
    """True for int/float scalars (numpy included), False for bools."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def parse_number(value: Any) -> Optional[float]:
    """Parse a plain decimal number; ``None`` when not a finite number."""
    if isinstance(value, (bool, np.bool_)):
        return float(value)
    if is_real_number(value):
        out = float(value)
        return out if math.isfinite(out) else None
    if isinstance(value, str):
        text = value.strip()
        if NUMBER_RE.fullmatch(text):
            out = float(text)
            return out if math.isfinite(out) else None
    return None


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """Generic date parse returning a UTC timestamp or ``None``."""
    if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
        ts = pd.Timestamp(value)
    elif isinstance(value, str) and value.strip():
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                ts = pd.to_datetime(value.strip(), errors="coerce", utc=True)
        except (ValueError, TypeError, OverflowError):
            return None
    else:
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def classify_value(value: Any) -> ColumnType:
    if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
        return ColumnType.TIME if not pd.isna(value) else ColumnType.DIMENSION
    if isinstance(value, str):
        if parse_date(value) is not None and parse_number(value) is None:
            return ColumnType.TIME
    elif is_real_number(value) and SERIAL_DATE_MIN < value < SERIAL_DATE_MAX:
        return ColumnType.TIME
    if not is_missing(value) and parse_number(value) is not None:
        return ColumnType.METRIC
    return ColumnType.DIMENSION


def classify(sample_row: Mapping[str, Any]) -> Dict[str, ColumnType]:
    return {k: classify_value(v) for k, v in sample_row.items()}


def first_record(
    data: Union[pd.DataFrame, Sequence[Mapping[str, Any]]],
) -> Optional[Mapping[str, Any]]:
    if isinstance(data, pd.DataFrame):
        if data.empty:
            return None
        return {c: data[c].iloc[0] for c in data.columns}
    return data[0] if len(data) else None


def identify_column_types(
    data: Union[pd.DataFrame, Sequence[Mapping[str, Any]]],
) -> List[ColumnMapping]:
    sample = first_record(data)
    if sample is None:
        return []
    return [ColumnMapping(name, kind) for name, kind in classify(sample).items()]


__all__ = [
    "classify",
    "classify_value",
    "identify_column_types",
    "parse_number",
    "parse_date",
    "is_missing",
    "is_real_number",
]
