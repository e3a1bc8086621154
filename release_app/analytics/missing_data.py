"""Portfolio items with required planning fields left empty."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import pandas as pd

from release_app.core.models import EpicModel, StoryModel

from .portfolio import ProjectSummary


@dataclass(slots=True)
class MissingDataItem:
    type: str
    key: str
    summary: str | None
    missing_fields: list[str] = field(default_factory=list)
    responsible_for_change: str | None = None


def epic_missing_fields(epic: EpicModel) -> list[str]:
    missing: list[str] = []
    if not epic.due_date:
        missing.append("Due Date")
    if not epic.client_environments:
        missing.append("Client Environment(s)")
    return missing


def story_missing_fields(story: StoryModel) -> list[str]:
    missing: list[str] = []
    # Zero points is a deliberate estimate; only an unset field is missing
    if story.story_points is None:
        missing.append("Story Points")
    if not story.responsible_for_change:
        missing.append("Responsible for Change")
    if not story.parent:
        missing.append("Parent")
    return missing


def find_missing_data(projects: dict[str, ProjectSummary] | Iterable[ProjectSummary]) -> list[MissingDataItem]:
    """Epics and stories (nested or standalone) with missing fields, each listed once."""
    summaries = projects.values() if isinstance(projects, dict) else projects
    seen_epics: set[str] = set()
    seen_stories: set[str] = set()
    out: list[MissingDataItem] = []

    def _check_story(story: StoryModel) -> None:
        if story.key in seen_stories:
            return
        seen_stories.add(story.key)
        missing = story_missing_fields(story)
        if missing:
            out.append(
                MissingDataItem(
                    type="story",
                    key=story.key,
                    summary=story.summary,
                    missing_fields=missing,
                    responsible_for_change=story.responsible_for_change,
                )
            )

    for summary in summaries:
        for item in summary.items:
            if item.epic is not None:
                epic = item.epic
                if epic.key not in seen_epics:
                    seen_epics.add(epic.key)
                    missing = epic_missing_fields(epic)
                    if missing:
                        out.append(
                            MissingDataItem(type="epic", key=epic.key, summary=epic.summary, missing_fields=missing)
                        )
                for story in epic.stories:
                    _check_story(story)
            elif item.story is not None:
                _check_story(item.story)
    return out


def filter_missing(items: list[MissingDataItem], kind: str = "all") -> list[MissingDataItem]:
    if kind == "all":
        return list(items)
    return [item for item in items if item.type == kind]


def missing_data_frame(items: Iterable[MissingDataItem]) -> pd.DataFrame:
    rows = [
        {
            "key": item.key,
            "type": item.type,
            "summary": item.summary,
            "missing_fields": ", ".join(item.missing_fields),
            "responsible_for_change": item.responsible_for_change,
        }
        for item in items
    ]
    return pd.DataFrame(rows)
