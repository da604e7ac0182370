import pytest

from dashlite.constants import SUMMARY
from dashlite.core.dashboard import (
    ConfigurationError,
    add_chart,
    chart_data,
    dashboard_stats,
    import_records,
    infer_description_type,
    processed_data,
    remove_chart,
    saved_charts,
    toggle_saved,
    update_config,
    update_filters,
)


@pytest.fixture
def state(raw_sales):
    return import_records(raw_sales)


def test_import_builds_default_config(state):
    cfg = state.config
    assert cfg.x_axis == 'date'
    assert cfg.metrics == ['revenue', 'cost']
    assert cfg.group_column == 'region'
    assert cfg.formulas == ''
    assert state.charts == []


def test_add_chart_requires_metrics(state):
    empty = update_config(state, metrics=[])
    with pytest.raises(ConfigurationError):
        add_chart(empty, 'bar')
    assert empty.charts == []


def test_add_chart_rejects_unknown_type(state):
    with pytest.raises(ConfigurationError):
        add_chart(state, 'sparkline')


def test_chart_snapshot_is_frozen(state):
    with_chart = add_chart(state, 'bar')
    chart = with_chart.charts[0]
    edited = update_config(with_chart, x_axis=SUMMARY, metrics=['cost'])
    assert edited.charts[0].config_snapshot.x_axis == 'date'
    assert edited.charts[0].config_snapshot.metrics == ['revenue', 'cost']
    assert chart.title == 'revenue & cost analysis'
    assert state.charts == []  # original state untouched


def test_metric_card_title(state):
    chart = add_chart(state, 'metric_card').charts[0]
    assert chart.title == 'revenue+cost summary card'


@pytest.mark.parametrize("chart_type,metrics,expected", [
    ('pie', ['revenue'], 'structure'),
    ('bar', ['market share'], 'structure'),
    ('bar', ['销售占比'], 'structure'),
    ('ranking', ['revenue'], 'ranking'),
    ('bar', ['TOP sellers'], 'ranking'),
    ('funnel', ['visits'], 'funnel'),
    ('line', ['revenue'], 'trend'),
])
def test_description_type(chart_type, metrics, expected):
    assert infer_description_type(chart_type, metrics) == expected


def test_save_lock_remove_cycle(state):
    s = add_chart(add_chart(state, 'bar'), 'table')
    first, second = s.charts
    with pytest.raises(ConfigurationError):
        saved_charts(s, require=True)
    s = toggle_saved(s, first.id)
    assert s.charts[0].is_saved and s.charts[0].is_locked
    assert [c.id for c in saved_charts(s, require=True)] == [first.id]
    s = toggle_saved(s, first.id)
    assert not s.charts[0].is_saved and not s.charts[0].is_locked
    s = remove_chart(s, second.id)
    assert [c.id for c in s.charts] == [first.id]


def test_chart_data_uses_snapshot(state):
    s = update_config(state, x_axis=SUMMARY, metrics=['revenue'])
    s = add_chart(s, 'bar')
    s = update_config(s, x_axis='date')  # later edits do not affect the chart
    data = chart_data(processed_data(s), s.charts[0])
    assert data.to_dict(orient='records') == [
        {'region': 'North', 'revenue': 275.0},
        {'region': 'South', 'revenue': 250.0},
        {'region': 'Unknown', 'revenue': 50.0},
    ]


def test_dashboard_stats_follow_filters(state):
    s = update_filters(state, dimension_filters={'region': ['North']})
    stats = {m.name: m for m in dashboard_stats(s)}
    assert stats['revenue'].sum == 275.0
    assert stats['cost'].sum == 40.0


def test_new_import_replaces_everything(state, raw_sales):
    s = add_chart(state, 'bar')
    fresh = import_records(raw_sales.head(1))
    assert fresh.charts == []
    assert len(fresh.dataset.df) == 1
    assert len(s.dataset.df) == 4
