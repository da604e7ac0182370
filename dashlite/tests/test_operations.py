import pandas as pd
import pytest

from dashlite.constants import GLOBAL_GROUP, SUMMARY, UNGROUPED
from dashlite.core.data_model import DashboardConfig, FilterState
from dashlite.core.operations import (
    Registry,
    aggregate_for_chart,
    apply_filters,
    chart_dimension_key,
    op_summary,
    process,
)


@pytest.fixture
def daily():
    return pd.DataFrame({
        'd': ['2024-01-01', '2024-01-02', '2024-01-03'],
        'dim': ['A', 'a', 'B'],
        'v': [5.0, 15.0, 20.0],
    })


def test_registry_holds_pipeline_steps():
    assert {'formulas', 'time_range', 'dimension_filter', 'summary'} <= set(Registry)


def test_time_range_is_inclusive():
    df = pd.DataFrame({'d': ['2024-01-01', '2024-01-02'], 'v': [5, 15]})
    out = apply_filters(
        df,
        DashboardConfig(x_axis='d'),
        FilterState(date_range=('2024-01-02', '2024-01-02')),
    )
    assert out['v'].tolist() == [15]


@pytest.mark.parametrize("x_axis,date_range", [
    (SUMMARY, ('2024-01-02', '2024-01-02')),
    ('d', ('2024-01-02', '')),
    ('', ('2024-01-02', '2024-01-03')),
])
def test_time_range_inactive(daily, x_axis, date_range):
    out = apply_filters(
        daily, DashboardConfig(x_axis=x_axis), FilterState(date_range=date_range)
    )
    assert len(out) == 3


def test_time_range_on_missing_column_keeps_nothing(daily):
    out = apply_filters(
        daily,
        DashboardConfig(x_axis='nope'),
        FilterState(date_range=('2024-01-01', '2024-12-31')),
    )
    assert out.empty


def test_dimension_filters(daily):
    cfg = DashboardConfig(x_axis='d')
    assert len(apply_filters(daily, cfg, FilterState(dimension_filters={'dim': []}))) == 3
    out = apply_filters(daily, cfg, FilterState(dimension_filters={'dim': ['A']}))
    assert out['v'].tolist() == [5.0]  # case-sensitive
    out = apply_filters(
        daily, cfg, FilterState(dimension_filters={'dim': ['A', 'B'], 'd': ['2024-01-03']})
    )
    assert out['v'].tolist() == [20.0]


def test_process_runs_formulas_before_filters(daily):
    cfg = DashboardConfig(x_axis='d', formulas='double = [v] * 2')
    out = process(daily, cfg, FilterState(date_range=('2024-01-02', '2024-01-03')))
    assert out['double'].tolist() == [30.0, 40.0]
    assert 'double' not in daily.columns


def test_summary_groups_and_orders_descending():
    df = pd.DataFrame({'dim': ['A', 'A', 'B'], 'm': [10, 5, 20]})
    out = op_summary(df, metrics=['m'], group_column='dim')
    assert out.to_dict(orient='records') == [
        {'dim': 'B', 'm': 20.0},
        {'dim': 'A', 'm': 15.0},
    ]


def test_summary_without_group_column_has_one_bucket(daily):
    out = op_summary(daily, metrics=['v'])
    assert out.to_dict(orient='records') == [{GLOBAL_GROUP: UNGROUPED, 'v': 40.0}]


def test_summary_ties_keep_first_seen_order():
    df = pd.DataFrame({'g': ['x', 'y', 'z'], 'm': [1, 3, 1]})
    out = op_summary(df, metrics=['m'], group_column='g')
    assert out['g'].tolist() == ['y', 'x', 'z']


def test_summary_blank_labels_and_text_metrics():
    df = pd.DataFrame({'g': ['', 'x', None], 'm': ['2', 'oops', 3]})
    out = op_summary(df, metrics=['m', 'absent'], group_column='g')
    rows = {r['g']: r for r in out.to_dict(orient='records')}
    assert rows[UNGROUPED]['m'] == 5.0
    assert rows['x']['m'] == 0.0
    assert rows['x']['absent'] == 0.0


def test_summary_of_empty_frame():
    out = op_summary(pd.DataFrame({'g': [], 'm': []}), metrics=['m'], group_column='g')
    assert out.empty
    assert list(out.columns) == ['g', 'm']


def test_aggregate_for_chart_row_mode_is_passthrough(daily):
    assert aggregate_for_chart(daily, DashboardConfig(x_axis='d', metrics=['v'])) is daily


def test_chart_dimension_key():
    assert chart_dimension_key(DashboardConfig(x_axis='d')) == 'd'
    assert chart_dimension_key(DashboardConfig(x_axis=SUMMARY)) == GLOBAL_GROUP
    assert chart_dimension_key(
        DashboardConfig(x_axis=SUMMARY, group_column='dim')
    ) == 'dim'
