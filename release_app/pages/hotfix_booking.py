"""Hotfix Booking page.

Shows the next free hotfix version, the client/component version matrix,
hotfix history per minor line and the booking ledger, and lets users reserve
a version before its change request is deployed.
"""

from __future__ import annotations

import streamlit as st

from release_app.app import SERVICE_KEY, register_page
from release_app.core.column_config import get_columns
from release_app.core.config import DEFAULT_MAJOR_VERSION
from release_app.core.mappers import records_to_dataframe
from release_app.core.service import DashboardService
from release_app.visual.charts import hotfix_timeline
from release_app.visual.column_metadata import apply_column_metadata
from release_app.visual.progress import guarded_fetch
from release_app.visual.tables import render_table


def _next_version_panel(service: DashboardService) -> str | None:
    result = guarded_fetch("deployed versions", service.next_version)
    if result is None:
        return None
    if result.status >= 500:
        st.error(result.error)
        return None
    if result.error:
        st.info(result.error)
        return None
    info = result.payload
    c1, c2, c3 = st.columns(3)
    c1.metric("Next version", str(info.next_version))
    c2.metric("Current highest", str(info.current_highest))
    c3.metric("Base release", str(info.base_version))
    return str(info.next_version)


def _booking_form(service: DashboardService, suggested: str | None) -> None:
    options = guarded_fetch("components and clients", service.booking_field_options)
    if options is None:
        return
    components = [o["name"] for o in options["components"]]
    clients = [o["value"] for o in options["clients"]]
    with st.form("book_hotfix"):
        version = st.text_input("Version", value=suggested or "")
        picked_components = st.multiselect("Components", components)
        picked_clients = st.multiselect("Client environments", clients)
        booked_by = st.text_input("Booked by", value=st.session_state.get("jira_email") or "")
        submitted = st.form_submit_button("Book version", type="primary")
    if not submitted:
        return
    result = service.book_hotfix(version, picked_components, picked_clients, booked_by)
    if result.ok:
        st.success(f"Booked {result.payload.version} ({result.payload.id}).")
    elif result.status == 409 and result.existing_booking is not None:
        existing = result.existing_booking
        st.error(f"{result.error} by {existing.booked_by} at {existing.booked_at}.")
    else:
        st.error(result.error)


def _client_matrix(service: DashboardService):
    matrix = guarded_fetch("client versions", service.client_versions)
    if matrix is None:
        return
    frame = matrix.to_frame()
    if frame.empty:
        st.info("No deployments in the lookback window.")
        return
    st.dataframe(frame, hide_index=True)


def _history_panel(service: DashboardService, server: str):
    major = int(st.number_input("Major version", min_value=0, value=DEFAULT_MAJOR_VERSION, step=1))
    requested = st.session_state.get("history_minor")
    result = guarded_fetch("hotfix history", service.hotfix_history, major, requested)
    if result is None:
        return
    if not result.ok:
        st.error(result.error)
        return
    view = result.payload
    labels = {line.label: line.minor for line in view.minor_versions}
    if labels:
        current_label = next((k for k, v in labels.items() if v == view.target_minor), None)
        keys = list(labels)
        choice = st.selectbox(
            "Minor line",
            keys,
            index=keys.index(current_label) if current_label in keys else 0,
        )
        if labels[choice] != view.target_minor:
            st.session_state["history_minor"] = labels[choice]
            st.rerun()
    history = view.to_frame()
    chart = hotfix_timeline(history)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)
    if history.empty:
        st.info(f"No hotfixes on {major}.{view.target_minor}.x.")
        return
    render_table(history, server, "hotfix_history", download=f"Hotfix history {major}.{view.target_minor}")


@register_page("Hotfix Booking")
def hotfix_booking_page():
    st.title("Hotfix Booking")
    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    server = st.session_state.get("jira_server", "")

    suggested = _next_version_panel(service)
    st.subheader("Book a version")
    _booking_form(service, suggested)

    st.markdown("---")
    st.subheader("Deployed versions by client")
    _client_matrix(service)

    st.markdown("---")
    st.subheader("Hotfix history")
    _history_panel(service, server)

    st.markdown("---")
    st.subheader("Current bookings")
    bookings = service.list_bookings()
    if not bookings.ok:
        st.error(bookings.error)
    elif not bookings.payload:
        st.info("No active bookings.")
    else:
        df = records_to_dataframe(bookings.payload, list_columns=("components", "client_environments"))
        cols = [c for c in get_columns("bookings") if c in df.columns]
        st.dataframe(df[cols], hide_index=True, column_config=apply_column_metadata(cols))
