"""Missing From Release page: hotfixed stories that never reached a release."""

from __future__ import annotations

import streamlit as st

from release_app.app import SERVICE_KEY, register_page
from release_app.core.config import HOTFIX_CHECK_VERSION_LIMIT
from release_app.core.mappers import stories_to_dataframe
from release_app.core.service import DashboardService
from release_app.visual.progress import guarded_fetch
from release_app.visual.tables import render_table


@register_page("Missing From Release")
def missing_release_page():
    st.title("Missing From Release")
    st.caption(
        "Done stories fixed in an earlier hotfix of the same major version but not tagged on the selected release."
    )
    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    versions = guarded_fetch(
        "release versions", service.release_versions, HOTFIX_CHECK_VERSION_LIMIT, released_only=True
    )
    if versions is None:
        return
    if not versions:
        st.info("No release versions found.")
        return
    target = st.selectbox("Target release", versions)
    if not st.button("Check", type="primary"):
        return
    result = guarded_fetch("released stories", service.missing_from_release, target)
    if result is None:
        return
    if not result.ok:
        st.error(result.error)
        return
    missing = result.payload["missingStories"]
    if not missing:
        st.success(f"Every hotfixed story is in {result.payload['targetVersion']}.")
        return
    st.warning(f"{len(missing)} story(ies) missing from {result.payload['targetVersion']}.")
    server = st.session_state.get("jira_server", "")
    render_table(stories_to_dataframe(missing), server, "missing_stories", download=f"Missing {target}")
