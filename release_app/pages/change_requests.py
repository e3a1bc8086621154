"""Change Requests page: the team's recent CM tickets."""

from __future__ import annotations

import streamlit as st

from release_app.app import SERVICE_KEY, register_page
from release_app.core.config import TEAM_CM_LOOKBACK_DAYS
from release_app.core.mappers import change_requests_to_dataframe
from release_app.core.service import DashboardService
from release_app.visual.progress import guarded_fetch
from release_app.visual.tables import render_table


@register_page("Change Requests")
def change_requests_page():
    st.title("Change Requests")
    st.caption(f"Change requests raised by the team in the last {TEAM_CM_LOOKBACK_DAYS} days.")
    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    cms = guarded_fetch("change requests", service.change_requests)
    if cms is None:
        return
    df = change_requests_to_dataframe(cms)
    if df.empty:
        st.info("No change requests found.")
        return
    statuses = sorted(df["status"].dropna().unique())
    picked = st.multiselect("Status", statuses, default=statuses)
    if picked:
        df = df[df["status"].isin(picked)]
    server = st.session_state.get("jira_server", "")
    render_table(df, server, "change_requests", download="Change Requests")
