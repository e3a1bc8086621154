"""Dependencies page: cross-team epic dependencies for a planning quarter."""

from __future__ import annotations

import streamlit as st

from release_app.analytics.dependencies import dependency_epics_frame, dependency_links_frame
from release_app.app import SERVICE_KEY, register_page
from release_app.core.config import VAL_TEAM_LABEL
from release_app.core.service import DashboardService
from release_app.visual.charts import dependency_links_chart
from release_app.visual.column_metadata import apply_column_metadata
from release_app.visual.progress import guarded_fetch
from release_app.visual.tables import add_ticket_link


@register_page("Dependencies")
def dependencies_page():
    st.title("Dependencies")
    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    options = guarded_fetch("epic quarters", service.dependency_quarters)
    if options is None:
        return
    if not options["quarters"]:
        st.info("No epics with a quarter found.")
        return
    quarter = st.selectbox("Quarter", options["quarters"])
    result = guarded_fetch(f"dependencies for {quarter}", service.dependencies, quarter)
    if result is None:
        return
    if not result.ok:
        st.error(result.error)
        return
    report = result.payload

    links = dependency_links_frame(report, VAL_TEAM_LABEL)
    chart = dependency_links_chart(links)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)
    else:
        st.info(f"No dependencies recorded for {quarter}.")
        return

    server = st.session_state.get("jira_server", "")
    for direction, title in (("outgoing", "We depend on"), ("incoming", "Depending on us")):
        st.subheader(title)
        df = dependency_epics_frame(report, direction)
        if df.empty:
            st.caption("None.")
            continue
        table, cfg = add_ticket_link(df, server)
        cols = ["Ticket"] + [c for c in df.columns if c != "key"]
        st.dataframe(table[cols], hide_index=True, column_config=apply_column_metadata(cols, cfg))
