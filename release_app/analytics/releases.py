"""Security type x client environment breakdown of the stories in a release."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from release_app.core.models import StoryModel


def release_heatmap(stories: Iterable[StoryModel]) -> pd.DataFrame:
    """Count stories per (security type, client) pair.

    Only stories carrying both security types and client environments
    contribute. Rows and columns are sorted; absent pairs are 0.
    """
    counts: dict[tuple[str, str], int] = {}
    for story in stories:
        if not story.security_types or not story.client_environments:
            continue
        for sec_type in story.security_types:
            for client in story.client_environments:
                counts[(sec_type, client)] = counts.get((sec_type, client), 0) + 1
    if not counts:
        return pd.DataFrame()
    long = pd.DataFrame(
        [{"security_type": s, "client": c, "count": n} for (s, c), n in counts.items()]
    )
    wide = long.pivot_table(index="security_type", columns="client", values="count", aggfunc="sum", fill_value=0)
    wide = wide.sort_index().sort_index(axis=1)
    wide.columns.name = None
    return wide.astype(int)


def heatmap_long(wide: pd.DataFrame) -> pd.DataFrame:
    """Melt the heatmap into (security_type, client, count) rows for charting."""
    if wide.empty:
        return pd.DataFrame(columns=["security_type", "client", "count"])
    long = wide.reset_index().melt(id_vars="security_type", var_name="client", value_name="count")
    return long


def filter_by_cells(stories: Iterable[StoryModel], cells: Iterable[tuple[str, str]]) -> list[StoryModel]:
    """Stories matching any selected (security type, client) cell; all when none selected."""
    selected = set(cells)
    items = list(stories)
    if not selected:
        return items
    out: list[StoryModel] = []
    for story in items:
        pairs = {(s, c) for s in story.security_types for c in story.client_environments}
        if pairs & selected:
            out.append(story)
    return out
