import streamlit as st

from dashlite.config import configure_logging, load_settings
from dashlite.core.dashboard import dashboard_stats
from dashlite.themes import THEMES, set_theme
from dashlite.ui.helpers import load_data_sidebar, processed_frame, set_state
from dashlite.ui.sections import (
    chart_card,
    sidebar_chart_section,
    sidebar_config_section,
    sidebar_export_section,
    sidebar_filter_section,
    stats_cards,
)

st.set_page_config(page_title="DashLite", layout="wide")

settings = load_settings()
configure_logging(settings)

st.sidebar.markdown("## DashLite")
theme = st.sidebar.selectbox("Chart theme", list(THEMES.keys()), key="theme_sel")
set_theme(theme)
if not settings.insights_enabled:
    st.sidebar.caption("AI insight disabled (set OPENAI_API_KEY).")

state = load_data_sidebar()
if state.dataset.empty:
    st.title("Waiting for data")
    st.caption("Upload a CSV or XLSX file in the sidebar to start.")
    st.stop()

state = sidebar_config_section(state)
state = sidebar_filter_section(state)
state = sidebar_chart_section(state)

processed = processed_frame(state)
preview = sidebar_export_section(state, processed)

st.caption(
    f"{len(processed)} of {len(state.dataset.df)} rows after formulas & filters"
)
if not preview:
    stats_cards(dashboard_stats(state, processed))

visible = [c for c in state.charts if c.is_saved or not preview]
if not visible:
    st.info("Add a chart from the sidebar." if not preview else "No saved charts yet.")
grid = st.columns(2)
charts_before = state.charts
for i, chart in enumerate(visible):
    with grid[i % 2]:
        state = chart_card(state, chart, processed)

set_state(state)
# Chart buttons change the chart list; rerun so the grid reflects it
if state.charts is not charts_before:
    st.rerun()
