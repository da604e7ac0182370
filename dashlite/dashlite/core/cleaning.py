"""Cell coercion into canonical typed values.

``clean_data`` is total: every cell that cannot be parsed is replaced by the
sentinel of its column kind (0, ``UNKNOWN_DATE`` or ``UNKNOWN``).
"""
from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Any, Iterable, Mapping, Sequence, Union
import pandas as pd

from ..constants import EXCEL_EPOCH_OFFSET, SERIAL_DATE_MIN, UNKNOWN, UNKNOWN_DATE
from .data_model import ColumnMapping, ColumnType
from .inference import is_missing, is_real_number, parse_date, parse_number

UNIX_EPOCH = date(1970, 1, 1)


def excel_serial_to_iso(serial: float) -> str:
    try:
        days = math.floor(serial - EXCEL_EPOCH_OFFSET)
        return (UNIX_EPOCH + timedelta(days=days)).isoformat()
    except (OverflowError, ValueError):
        return UNKNOWN_DATE


def clean_metric(value: Any) -> float:
    if is_missing(value):
        return 0.0
    num = parse_number(value)
    return 0.0 if num is None else num


def clean_date(value: Any) -> str:
    if is_real_number(value):
        if not math.isfinite(value):
            return UNKNOWN_DATE
        if value > SERIAL_DATE_MIN:
            return excel_serial_to_iso(value)
        # Small plain numbers are read as milliseconds since the epoch
        try:
            ts = pd.Timestamp(0) + pd.Timedelta(milliseconds=float(value))
        except (OverflowError, ValueError):
            return UNKNOWN_DATE
        return ts.strftime("%Y-%m-%d")
    ts = parse_date(value)
    if ts is None:
        return UNKNOWN_DATE
    return ts.strftime("%Y-%m-%d")


def clean_label(value: Any) -> str:
    if is_missing(value):
        return UNKNOWN
    if is_real_number(value) and float(value).is_integer():
        # pandas up-casts int columns holding blanks to float
        return str(int(value))
    return str(value)


CLEANERS = {
    ColumnType.METRIC: clean_metric,
    ColumnType.TIME: clean_date,
    ColumnType.DIMENSION: clean_label,
}


def _as_frame(data: Union[pd.DataFrame, Sequence[Mapping[str, Any]]]) -> pd.DataFrame:
    if isinstance(data, pd.DataFrame):
        return data
    return pd.DataFrame(list(data))


def clean_data(
    data: Union[pd.DataFrame, Sequence[Mapping[str, Any]]],
    mappings: Iterable[ColumnMapping],
) -> pd.DataFrame:
    """Return a new frame with every column coerced per its classification.

    Columns without a mapping are cleaned as dimensions.
    """
    df = _as_frame(data)
    kinds = {m.name: m.type for m in mappings}
    out = {}
    for col in df.columns:
        fn = CLEANERS[kinds.get(col, ColumnType.DIMENSION)]
        values = [fn(v) for v in df[col].tolist()]
        if fn is clean_metric:
            out[col] = pd.Series(values, index=df.index, dtype="float64")
        else:
            out[col] = pd.Series(values, index=df.index, dtype="object")
    return pd.DataFrame(out, index=df.index, columns=df.columns)


__all__ = [
    "clean_data",
    "clean_metric",
    "clean_date",
    "clean_label",
    "excel_serial_to_iso",
]
