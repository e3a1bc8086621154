"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "float1" -> 1 decimal float, "date" -> date, None -> text
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "summary": ("Summary", "Issue summary from Jira.", None),
    "status": ("Status", "Current Jira workflow status.", None),
    "issue_type": ("Type", "Jira issue type.", None),
    "reporter": ("Reporter", "Who raised the change request.", None),
    "fix_versions": ("Fix Versions", "Release and hotfix versions tagged on the issue.", None),
    "components": ("Components", "Components shipped by the change request.", None),
    "client_environments": ("Client Environments", "Client environments the change targets.", None),
    "security_types": ("Security Types", "Security classification of the change.", None),
    "responsible_for_change": ("Responsible", "Person accountable for the change.", None),
    "target_deployment_date": ("Deployment Date", "Target deployment date of the change request.", "date"),
    "version": ("Version", "Hotfix version (major.minor.patch).", None),
    "type": ("Kind", "Deployed change request or reserved booking.", None),
    "deployed_at": ("Deployed", "Deployment date from the change request.", None),
    "booked_at": ("Booked At", "When the version was reserved (UTC).", None),
    "booked_by": ("Booked By", "Who reserved the version.", None),
    "id": ("Booking", "Booking identifier.", None),
    "story_points": ("Points", "Story points.", "float1"),
    "story_count": ("Stories", "Stories under the epic.", "int"),
    "stories_done": ("Done", "Stories finished.", "int"),
    "progress_pct": ("Progress %", "Point-weighted completion.", "int"),
    "total_points": ("Total Points", "Sum of story points.", "float1"),
    "completed_points": ("Completed Points", "Points on done, ready or partially released stories.", "float1"),
    "missing_fields": ("Missing Fields", "Required fields left empty.", None),
    "due_date": ("Due Date", "Epic due date.", None),
    "teams": ("Teams", "Teams on the other side of the dependency.", None),
    "client": ("Client", "Client environment.", None),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "float1":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.1f")
        elif fmt == "date":
            config[col] = st.column_config.DateColumn(label, help=help_text)
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
