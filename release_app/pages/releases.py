"""Releases page: stories shipped in a release with a security/client breakdown."""

from __future__ import annotations

import streamlit as st

from release_app.analytics.releases import filter_by_cells, heatmap_long, release_heatmap
from release_app.app import SERVICE_KEY, register_page
from release_app.core.config import RELEASE_VERSION_LIMIT
from release_app.core.mappers import stories_to_dataframe
from release_app.core.service import DashboardService
from release_app.visual.charts import release_heatmap_chart
from release_app.visual.progress import guarded_fetch
from release_app.visual.tables import render_table


@register_page("Releases")
def releases_page():
    st.title("Releases")
    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    versions = guarded_fetch("release versions", service.release_versions, RELEASE_VERSION_LIMIT)
    if versions is None:
        return
    if not versions:
        st.info("No release versions found.")
        return
    target = st.selectbox("Release", versions)
    result = guarded_fetch(f"stories for {target}", service.release_stories, target)
    if result is None:
        return
    if not result.ok:
        st.error(result.error)
        return
    stories = result.payload["stories"]
    st.caption(f"{len(stories)} issue(s) in {result.payload['targetVersion']}.")

    wide = release_heatmap(stories)
    long = heatmap_long(wide)
    chart = release_heatmap_chart(long)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    cells: list[tuple[str, str]] = []
    if not long.empty:
        nonzero = long[long["count"] > 0]
        labels = [f"{s} / {c}" for s, c in zip(nonzero["security_type"], nonzero["client"])]
        picked = st.multiselect("Filter by cell (security type / client)", labels)
        cells = [tuple(label.split(" / ", 1)) for label in picked]

    server = st.session_state.get("jira_server", "")
    df = stories_to_dataframe(filter_by_cells(stories, cells))
    render_table(df, server, "release_stories", download=f"Release {target}")
