"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``release_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from release_app.app import SERVICE_KEY, main

st.set_page_config(layout="wide", page_title="Release & Hotfix Dashboard")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("release_app")

PAGES_DIR = Path(__file__).parent / "release_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"release_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception:  # pragma: no cover
        logger.exception("Failed importing page %s", mod_name)


def _auto_init_service():
    """Initialize DashboardService from Streamlit secrets if available."""
    if SERVICE_KEY in st.session_state:
        return
    from release_app.pages.setup import connect, secret_credentials

    server, email, token = secret_credentials()
    if server and email and token:
        st.sidebar.info("Secrets found, attempting to connect to Jira...")
        try:
            connect(server, email, token)
            st.sidebar.success("Jira connection successful!")
        except Exception as e:
            st.sidebar.error(f"Jira connection failed: {e}")
            st.session_state.pop(SERVICE_KEY, None)
    else:
        st.sidebar.warning("Jira secrets not found. Please use the Setup page.")


_auto_init_service()

if __name__ == "__main__":
    main()
