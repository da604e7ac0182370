import math
import re

import pandas as pd

from dashlite.constants import UNKNOWN, UNKNOWN_DATE
from dashlite.core.cleaning import (
    clean_data,
    clean_date,
    clean_label,
    clean_metric,
    excel_serial_to_iso,
)
from dashlite.core.dashboard import import_records
from dashlite.core.data_model import ColumnMapping, ColumnType
from dashlite.core.inference import identify_column_types
from dashlite.utils import df_from_upload

DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def test_excel_serial_conversion():
    assert excel_serial_to_iso(45000) == "2023-03-15"
    assert excel_serial_to_iso(45000.9) == "2023-03-15"
    assert excel_serial_to_iso(25569) == "1970-01-01"


def test_clean_metric_sentinels():
    assert clean_metric("12.5") == 12.5
    assert clean_metric(7) == 7.0
    for bad in ("", None, "abc", float("nan"), float("inf")):
        assert clean_metric(bad) == 0.0


def test_clean_date_variants():
    assert clean_date("2024-02-03") == "2024-02-03"
    assert clean_date(45000) == "2023-03-15"
    assert clean_date(pd.Timestamp("2024-05-06 13:00")) == "2024-05-06"
    # offsets are normalised to UTC
    assert clean_date("2024-01-05T23:30:00-05:00") == "2024-01-06"
    assert clean_date("not a date") == UNKNOWN_DATE
    assert clean_date(None) == UNKNOWN_DATE
    assert clean_date(float("nan")) == UNKNOWN_DATE
    assert clean_date(float("inf")) == UNKNOWN_DATE
    assert clean_date(float("-inf")) == UNKNOWN_DATE
    assert excel_serial_to_iso(float("inf")) == UNKNOWN_DATE


def test_clean_label_variants():
    assert clean_label("North") == "North"
    assert clean_label("") == UNKNOWN
    assert clean_label(None) == UNKNOWN
    assert clean_label(3.0) == "3"
    assert clean_label(2.5) == "2.5"


def test_clean_data_invariants(raw_sales):
    mappings = identify_column_types(raw_sales)
    before = raw_sales.copy()
    out = clean_data(raw_sales, mappings)
    assert list(out.columns) == list(raw_sales.columns)
    assert len(out) == len(raw_sales)
    pd.testing.assert_frame_equal(raw_sales, before)  # input untouched
    for v in out['revenue']:
        assert isinstance(v, float) and math.isfinite(v)
    assert list(out['cost']) == [40.0, 100.0, 0.0, 0.0]
    assert all(DATE_RE.fullmatch(v) or v == UNKNOWN_DATE for v in out['date'])
    assert list(out['region']) == ['North', 'South', 'North', UNKNOWN]


def test_clean_data_is_idempotent(raw_sales):
    mappings = identify_column_types(raw_sales)
    once = clean_data(raw_sales, mappings)
    twice = clean_data(once, mappings)
    pd.testing.assert_frame_equal(once, twice)


def test_unclassified_columns_are_dimensions():
    rows = [{'a': 1, 'extra': None}, {'a': 2, 'extra': 'x'}]
    out = clean_data(rows, [ColumnMapping('a', ColumnType.METRIC)])
    assert list(out['extra']) == [UNKNOWN, 'x']
    assert list(out['a']) == [1.0, 2.0]


def test_infinite_time_cell_from_csv_upload(tmp_path):
    path = tmp_path / 'dates.csv'
    path.write_text("d,v\n45000,1\ninf,2\n")
    state = import_records(df_from_upload(path))
    assert list(state.dataset.df['d']) == ["2023-03-15", UNKNOWN_DATE]
    assert list(state.dataset.df['v']) == [1.0, 2.0]
