"""Portfolio page: business project progress and items with missing planning data."""

from __future__ import annotations

import logging

import streamlit as st

from release_app.analytics.missing_data import filter_missing, find_missing_data, missing_data_frame
from release_app.analytics.portfolio import portfolio_frame, project_items_frame
from release_app.app import SERVICE_KEY, register_page
from release_app.core.service import DashboardService
from release_app.visual.charts import portfolio_progress_chart
from release_app.visual.column_metadata import apply_column_metadata
from release_app.visual.progress import ProgressReporter
from release_app.visual.tables import add_ticket_link

logger = logging.getLogger(__name__)


def _show(df, server: str):
    table, cfg = add_ticket_link(df, server)
    cols = [c for c in table.columns if c != "key"]
    if "Ticket" in cols:
        cols.insert(0, cols.pop(cols.index("Ticket")))
    st.dataframe(table[cols], hide_index=True, column_config=apply_column_metadata(cols, cfg))


@register_page("Portfolio")
def portfolio_page():
    st.title("Portfolio")
    st.caption("Story point progress of epics and stories per business project.")
    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    if st.button("Load Portfolio", type="primary"):
        reporter = ProgressReporter("Fetching business project epics and stories")
        try:
            projects = service.portfolio(progress=reporter.callback)
            st.session_state["portfolio_projects"] = projects
            reporter.complete(f"Loaded {len(projects)} business project(s).")
        except Exception as exc:
            logger.exception("Jira request failed while loading the portfolio")
            reporter.error(f"Failed to load portfolio: {exc}")
            return

    projects = st.session_state.get("portfolio_projects")
    if not projects:
        st.info("No portfolio loaded yet.")
        return

    server = st.session_state.get("jira_server", "")
    overview = portfolio_frame(projects)
    chart = portfolio_progress_chart(overview)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    names = list(overview["name"])
    selected = st.selectbox("Business project", names)
    if selected:
        summary = projects[selected]
        pct = summary.progress.percentage
        st.metric(
            "Completion",
            f"{pct}%" if pct is not None else "n/a",
            help=f"{summary.progress.completed_points:g} of {summary.progress.total_points:g} points",
        )
        _show(project_items_frame(summary), server)

    st.markdown("---")
    st.subheader("Missing data")
    kind = st.radio("Show", ["all", "epic", "story"], horizontal=True)
    items = filter_missing(find_missing_data(projects), kind)
    if not items:
        st.success("No missing fields.")
        return
    _show(missing_data_frame(items), server)
