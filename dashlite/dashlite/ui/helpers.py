"""Helper utilities for the Streamlit UI (data loading, session state)."""

import hashlib
import logging

import pandas as pd
import streamlit as st

from dashlite.core.dashboard import import_records
from dashlite.core.data_model import DashboardConfig, DashboardState, FilterState
from dashlite.core.operations import process
from dashlite.utils import df_from_upload

logger = logging.getLogger(__name__)

STATE_KEY = "dashboard_state"

# Session keys that depend on the currently imported dataset
DATA_KEYS = [
    STATE_KEY,
    "upload_digest",
    "x_axis_sel",
    "metrics_sel",
    "group_sel",
    "formulas_text",
    "date_lower_sel",
    "date_upper_sel",
    "preview_mode",
]


def get_state() -> DashboardState:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = DashboardState()
    return st.session_state[STATE_KEY]


def set_state(state: DashboardState) -> None:
    st.session_state[STATE_KEY] = state


def clear_data_state() -> None:
    for k in list(st.session_state.keys()):
        if k in DATA_KEYS or str(k).startswith("dimf_"):
            st.session_state.pop(k, None)


def load_data_sidebar() -> DashboardState:
    """Render the upload widget and return the current dashboard state.

    An upload is fingerprinted with MD5(content); only a new file triggers a
    re-import, which replaces the dataset, config, filters and charts.
    Always returns a state (empty before the first upload).
    """
    with st.sidebar.expander("Data source", expanded=True):
        file_obj = st.file_uploader(
            "Upload CSV / XLSX",
            type=["csv", "xlsx", "xls"],
            key="file_uploader_widget",
        )
        if file_obj is not None:
            digest = hashlib.md5(file_obj.getvalue()).hexdigest()
            if st.session_state.get("upload_digest") != digest:
                raw = df_from_upload(file_obj)
                if raw is None or raw.empty:
                    st.error(f"Could not read any rows from {file_obj.name}.")
                else:
                    clear_data_state()
                    set_state(import_records(raw))
                    st.session_state["upload_digest"] = digest
                    st.success(f"Loaded {len(raw)} rows from {file_obj.name}")
        if st.button("Reset dashboard", key="reset_dashboard"):
            clear_data_state()
    return get_state()


@st.cache_data(show_spinner=False)
def _cached_process(df, formulas, x_axis, date_range, dim_filters):
    config = DashboardConfig(x_axis=x_axis, formulas=formulas)
    filters = FilterState(
        date_range=date_range,
        dimension_filters={k: list(v) for k, v in dim_filters},
    )
    return process(df, config, filters)


def processed_frame(state: DashboardState) -> pd.DataFrame:
    """Memoised global processed dataset for the current state."""
    dim_filters = tuple(
        (k, tuple(v)) for k, v in sorted(state.filters.dimension_filters.items())
    )
    return _cached_process(
        state.dataset.df,
        state.config.formulas,
        state.config.x_axis,
        tuple(state.filters.date_range),
        dim_filters,
    )
