import streamlit as st

from dashlite.charts import make_chart, metric_totals, table_frame
from dashlite.constants import CHART_TYPES, SUMMARY
from dashlite.core.dashboard import (
    ConfigurationError,
    add_chart,
    chart_data,
    remove_chart,
    toggle_saved,
    update_chart,
    update_config,
    update_filters,
)
from dashlite.core.data_model import ChartMeta, DashboardState
from dashlite.core.formula import parse_formulas, validate_formulas
from dashlite.core.operations import chart_dimension_key
from dashlite.export import export_filename, export_html
from dashlite.services.insights import build_data_summary, get_chart_insights


def _index(options, value, default=0):
    return options.index(value) if value in options else default


def sidebar_config_section(state: DashboardState, container=st.sidebar):
    """X-axis / metrics / group column / formulas. Returns the new state."""
    ds = state.dataset
    cfg = state.config
    with container.expander("Configuration", expanded=True):
        x_options = [SUMMARY] + list(ds.df.columns)
        x_axis = st.selectbox(
            "X axis / summary mode",
            x_options,
            index=_index(x_options, cfg.x_axis),
            format_func=lambda c: "Summary (group & sum)" if c == SUMMARY else c,
            key="x_axis_sel",
        )
        formulas = st.text_area(
            "Formula columns",
            cfg.formulas,
            key="formulas_text",
            help="One per line: target = [ColumnA] * 2 + [ColumnB]",
        )
        for problem in validate_formulas(formulas):
            st.warning(f"Formula evaluates to 0: {problem}")
        derived = [t for t, _ in parse_formulas(formulas)]
        metric_options = ds.metric_columns + [
            t for t in derived if t not in ds.metric_columns
        ]
        metrics = st.multiselect(
            "Metrics",
            metric_options,
            default=[m for m in cfg.metrics if m in metric_options],
            key="metrics_sel",
        )
        group_options = [""] + ds.dimension_columns
        group_column = st.selectbox(
            "Group by",
            group_options,
            index=_index(group_options, cfg.group_column),
            format_func=lambda c: c or "-- none --",
            key="group_sel",
        )
    return update_config(
        state,
        x_axis=x_axis,
        metrics=list(metrics),
        group_column=group_column,
        formulas=formulas,
    )


def sidebar_filter_section(state: DashboardState, container=st.sidebar):
    ds = state.dataset
    cfg = state.config
    with container.expander("Filters", expanded=False):
        date_range = ("", "")
        if cfg.x_axis and cfg.x_axis != SUMMARY and cfg.x_axis in ds.df.columns:
            values = [""] + sorted(ds.df[cfg.x_axis].astype(str).unique())
            lower = st.selectbox("From", values, key="date_lower_sel")
            upper = st.selectbox("To", values, key="date_upper_sel")
            date_range = (lower, upper)
        else:
            st.caption("Range filter applies to a non-summary x axis.")
        dim_filters = {}
        for dim in ds.dimension_columns:
            options = sorted(ds.df[dim].astype(str).unique())
            chosen = st.multiselect(dim, options, key=f"dimf_{dim}")
            if chosen:
                dim_filters[dim] = list(chosen)
    return update_filters(
        state, date_range=date_range, dimension_filters=dim_filters
    )


def sidebar_chart_section(state: DashboardState, container=st.sidebar):
    with container.expander("Add chart", expanded=True):
        cols = st.columns(3)
        for i, (chart_type, label) in enumerate(CHART_TYPES.items()):
            with cols[i % 3]:
                if st.button(label, key=f"add_{chart_type}"):
                    try:
                        state = add_chart(state, chart_type)
                    except ConfigurationError as ce:
                        st.warning(str(ce))
    return state


def sidebar_export_section(state: DashboardState, processed, container=st.sidebar):
    with container.expander("Export", expanded=False):
        preview = st.toggle("Preview saved layout", key="preview_mode")
        try:
            doc = export_html(state.charts, processed)
        except ConfigurationError as ce:
            st.info(str(ce))
        else:
            st.download_button(
                "Download HTML report",
                data=doc,
                file_name=export_filename(),
                mime="text/html",
            )
    return preview


def stats_cards(stats):
    if not stats:
        return
    cols = st.columns(min(len(stats), 4))
    for i, s in enumerate(stats):
        with cols[i % len(cols)]:
            st.metric(f"{s.name} total", f"{s.sum:,.2f}")
            st.caption(
                f"mean {s.mean:,.2f} | median {s.median:,.2f} | "
                f"p75 {s.p75:,.2f} | min {s.min:,.2f} | max {s.max:,.2f}"
            )


def chart_card(state: DashboardState, chart: ChartMeta, processed):
    """Render one chart widget; returns the (possibly updated) state."""
    snapshot = chart.config_snapshot
    data = chart_data(processed, chart)
    with st.container(border=True):
        st.subheader(chart.title)
        dim = chart_dimension_key(snapshot)
        st.caption(
            f"Summary ({dim})" if snapshot.x_axis == SUMMARY
            else f"Dimension: {dim or '-'}"
        )
        if chart.type == "metric_card":
            for m, total in metric_totals(data, snapshot).items():
                st.metric(m, f"{total:,.2f}")
        elif chart.type == "table":
            st.dataframe(table_frame(data, snapshot), use_container_width=True)
        else:
            st.plotly_chart(
                make_chart(data, chart),
                use_container_width=True,
                key=f"fig_{chart.id}",
            )
        if chart.insight:
            st.markdown(chart.insight)
        c1, c2, c3 = st.columns(3)
        with c1:
            label = "Unlock" if chart.is_saved else "Save & lock"
            if st.button(label, key=f"save_{chart.id}"):
                state = toggle_saved(state, chart.id)
        with c2:
            if st.button("AI insight", key=f"insight_{chart.id}"):
                with st.spinner("Analysing..."):
                    text = get_chart_insights(
                        chart.title,
                        build_data_summary(data, snapshot),
                        chart.description_type,
                    )
                state = update_chart(state, chart.id, insight=text)
        with c3:
            if st.button("Remove", key=f"remove_{chart.id}"):
                state = remove_chart(state, chart.id)
    return state


__all__ = [
    "sidebar_config_section",
    "sidebar_filter_section",
    "sidebar_chart_section",
    "sidebar_export_section",
    "stats_cards",
    "chart_card",
]
