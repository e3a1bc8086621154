"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from release_app.core.column_config import get_columns
from release_app.core.config import SETTINGS

from .column_metadata import apply_column_metadata


def add_ticket_link(df: pd.DataFrame, server: str, key_col: str = "key", label: str = "Ticket"):
    if df.empty or key_col not in df.columns:
        return df, {}
    out = df.copy()
    base = server.rstrip("/")
    out[label] = out[key_col].astype(str).apply(
        lambda k: f"{base}/browse/{k}" if k and k not in ("nan", "None") else ""
    )
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"browse/(.*)$",
            help="Open in Jira",
            width="medium",
        )
    }
    return out, cfg


def prepare_table(
    df: pd.DataFrame,
    server: str,
    set_name: str,
    *,
    key_col: str = "key",
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    """Link tickets and pick the display columns configured for ``set_name``."""
    if df.empty:
        return df, [], {}
    table, cfg = add_ticket_link(df, server, key_col=key_col)
    display_cols = [col for col in get_columns(set_name) if col in table.columns]
    if not display_cols:
        display_cols = [col for col in table.columns if col != key_col]
    return table, display_cols, cfg


def render_table(df: pd.DataFrame, server: str, set_name: str, *, key_col: str = "key", download: str | None = None):
    table, cols, cfg = prepare_table(df, server, set_name, key_col=key_col)
    if table.empty:
        st.info("Nothing to show.")
        return
    view = table[cols].head(SETTINGS.max_table_rows)
    st.dataframe(view, hide_index=True, column_config=apply_column_metadata(cols, cfg))
    if download:
        st.download_button(
            f"Download {download} CSV",
            data=table[cols].to_csv(index=False).encode(SETTINGS.download_encoding),
            file_name=f"{download.lower().replace(' ', '_')}.csv",
            mime="text/csv",
        )
