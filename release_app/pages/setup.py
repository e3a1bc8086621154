"""Connection setup page: collect Jira credentials and initialize DashboardService."""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from release_app.app import SERVICE_KEY, register_page
from release_app.core.config import DEFAULT_BOOKINGS_FILE
from release_app.core.jira_client import JiraAPI
from release_app.core.service import DashboardService
from release_app.versioning import BookingLedger


def secret_credentials() -> tuple[str | None, str | None, str | None]:
    """Server, email and token from a [jira] secrets section or top-level keys."""
    jira_secrets = st.secrets.get("jira", {})
    server = jira_secrets.get("JIRA_SERVER") or st.secrets.get("JIRA_SERVER")
    email = jira_secrets.get("JIRA_EMAIL") or st.secrets.get("JIRA_EMAIL")
    token = (
        jira_secrets.get("JIRA_API_TOKEN")
        or st.secrets.get("JIRA_API_TOKEN")
        or jira_secrets.get("JIRA_TOKEN")
        or st.secrets.get("JIRA_TOKEN")
    )
    return server, email, token


def bookings_file() -> Path:
    hotfix_secrets = st.secrets.get("hotfix", {})
    configured = hotfix_secrets.get("BOOKINGS_FILE") or st.secrets.get("BOOKINGS_FILE")
    return Path(configured) if configured else DEFAULT_BOOKINGS_FILE


def connect(server: str, email: str, token: str, ttl: float | None = None) -> DashboardService:
    api = JiraAPI(server, email, token)
    if ttl is not None:
        api._cache_ttl = float(ttl)
    service = DashboardService(api, BookingLedger(bookings_file()))
    st.session_state["jira_server"] = server
    st.session_state["jira_email"] = email
    st.session_state[SERVICE_KEY] = service
    return service


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    secret_server, secret_email, secret_token = secret_credentials()
    server = st.text_input(
        "Jira Server URL",
        value=st.session_state.get("jira_server") or secret_server or "",
    )
    email = st.text_input(
        "Email / Username",
        value=st.session_state.get("jira_email") or secret_email or "",
    )
    token = st.text_input("API Token", type="password", value=secret_token or "")
    ttl = st.number_input("Client cache TTL (seconds)", min_value=60, max_value=3600, value=300)
    st.caption(f"Hotfix bookings are stored in `{bookings_file()}`.")
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        if not (server and email and token):
            st.error("All fields required.")
            return
        try:
            connect(server, email, token, ttl)
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover
            st.error(f"Failed to initialize Jira client: {e}")

    service: DashboardService | None = st.session_state.get(SERVICE_KEY)
    if service is not None:
        st.info("DashboardService ready.")
        if st.button("Clear Jira cache"):
            service.api.clear_cache()
            st.success("Cache cleared.")
