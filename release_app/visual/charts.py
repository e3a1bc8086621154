"""Chart builders (Altair) for portfolio progress, hotfix history and release heatmaps."""

from __future__ import annotations

import altair as alt
import pandas as pd
import pytz

from release_app.core.config import TIMEZONE


def portfolio_progress_chart(frame: pd.DataFrame):
    """Horizontal completion bars, one per business project."""
    if frame.empty:
        return None
    data = frame.copy()
    data["progress"] = data["progressPercentage"].fillna(0).astype(int)
    return (
        alt.Chart(data)
        .mark_bar(color="#2ca02c")
        .encode(
            x=alt.X("progress:Q", title="Completion %", scale=alt.Scale(domain=[0, 100])),
            y=alt.Y("name:N", title="Business Project", sort="ascending"),
            tooltip=[
                alt.Tooltip("name:N", title="Project"),
                alt.Tooltip("itemCount:Q", title="Items"),
                alt.Tooltip("completedPoints:Q", title="Completed Points", format=".1f"),
                alt.Tooltip("totalPoints:Q", title="Total Points", format=".1f"),
                alt.Tooltip("progress:Q", title="Progress %"),
            ],
        )
        .properties(height=max(120, 28 * len(data)))
    )


def hotfix_timeline(history: pd.DataFrame):
    """Deployed hotfixes on a line plotted by deployment date (local time)."""
    if history.empty or "deployed_at" not in history.columns:
        return None
    tz = pytz.timezone(TIMEZONE)
    tmp = history[history["type"] == "deployed"].copy()
    tmp["deployed_dt"] = pd.to_datetime(tmp["deployed_at"], utc=True, errors="coerce").dt.tz_convert(tz)
    tmp = tmp.dropna(subset=["deployed_dt"])
    if tmp.empty:
        return None
    tmp["date"] = tmp["deployed_dt"].dt.tz_localize(None)
    return (
        alt.Chart(tmp)
        .mark_circle(color="#1f77b4", opacity=0.8, size=90)
        .encode(
            x=alt.X("date:T", title="Deployed"),
            y=alt.Y("version:N", title="Version", sort="descending"),
            tooltip=[
                alt.Tooltip("version:N", title="Version"),
                alt.Tooltip("key:N", title="Change Request"),
                alt.Tooltip("date:T", title="Deployed"),
                alt.Tooltip("client_environments:N", title="Clients"),
            ],
        )
        .properties(height=260)
    )


def release_heatmap_chart(long: pd.DataFrame):
    """Story counts per security type and client environment."""
    if long.empty:
        return None
    base = alt.Chart(long).encode(
        x=alt.X("client:N", title="Client Environment"),
        y=alt.Y("security_type:N", title="Security Type"),
    )
    cells = base.mark_rect().encode(
        color=alt.Color("count:Q", title="Stories", scale=alt.Scale(scheme="blues")),
        tooltip=[
            alt.Tooltip("security_type:N", title="Security Type"),
            alt.Tooltip("client:N", title="Client"),
            alt.Tooltip("count:Q", title="Stories"),
        ],
    )
    labels = base.mark_text(baseline="middle").encode(text="count:Q")
    return (cells + labels).properties(height=max(160, 36 * long["security_type"].nunique()))


def dependency_links_chart(links: pd.DataFrame):
    """Epic counts per partner team, split by dependency direction."""
    if links.empty:
        return None
    data = links.copy()
    data["team"] = data.apply(lambda r: r["target"] if r["direction"] == "outgoing" else r["source"], axis=1)
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("epics:Q", title="Epics"),
            y=alt.Y("team:N", title="Team"),
            color=alt.Color(
                "direction:N",
                title="Direction",
                scale=alt.Scale(domain=["outgoing", "incoming"], range=["#ff7f0e", "#1f77b4"]),
            ),
            tooltip=["team:N", "direction:N", "epics:Q"],
        )
        .properties(height=max(120, 28 * data["team"].nunique()))
    )
