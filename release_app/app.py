"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}

SERVICE_KEY = "dashboard_service"


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def main():
    st.sidebar.title("Release & Hotfix Dashboard")
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Portfolio",  # business project progress
        "Releases",  # stories per release
        "Missing From Release",  # hotfixes not carried forward
        "Hotfix Booking",  # next version, matrix, history, bookings
        "Change Requests",  # team CM list
        "Dependencies",  # cross-team epics per quarter
        "Setup / Connection",  # configuration
    ]

    ordered = [name for name in preferred_order if name in pages]
    trailing = sorted(name for name in pages if name not in preferred_order)
    pages = ordered + trailing

    missing = [name for name in preferred_order if name not in ordered]
    if missing:
        st.sidebar.caption(f"(Info) Missing expected pages not yet registered: {', '.join(missing)}")
    # Without a service the only useful page is setup
    if "Setup / Connection" in pages and SERVICE_KEY not in st.session_state:
        default = pages.index("Setup / Connection")
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
