"""Business-project portfolio: epics and standalone stories with point progress."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from release_app.core.config import UNCATEGORIZED_PROJECT
from release_app.core.models import EpicModel, StoryModel
from release_app.core.status import is_story_completed


def round_percent(part: float, whole: float) -> int | None:
    if whole <= 0:
        return None
    # half-up, so 12.5 -> 13
    return int(math.floor(part / whole * 100 + 0.5))


@dataclass(slots=True)
class Progress:
    total_points: float = 0.0
    completed_points: float = 0.0

    @property
    def percentage(self) -> int | None:
        return round_percent(self.completed_points, self.total_points)

    def add_story(self, story: StoryModel) -> None:
        # Stories without points (or with zero points) do not count
        points = story.story_points
        if not points or points <= 0:
            return
        self.total_points += points
        if is_story_completed(story.status):
            self.completed_points += points

    def merge(self, other: Progress) -> None:
        self.total_points += other.total_points
        self.completed_points += other.completed_points


def story_progress(stories: Iterable[StoryModel]) -> Progress:
    progress = Progress()
    for story in stories:
        progress.add_story(story)
    return progress


@dataclass(slots=True)
class PortfolioItem:
    type: str  # "epic" | "story"
    key: str
    summary: str | None
    progress: Progress
    epic: EpicModel | None = None
    story: StoryModel | None = None


@dataclass(slots=True)
class ProjectSummary:
    name: str
    items: list[PortfolioItem] = field(default_factory=list)
    progress: Progress = field(default_factory=Progress)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "itemCount": len(self.items),
            "totalPoints": self.progress.total_points,
            "completedPoints": self.progress.completed_points,
            "progressPercentage": self.progress.percentage,
        }


def _project_names(names: list[str]) -> list[str]:
    return names or [UNCATEGORIZED_PROJECT]


def build_portfolio(
    epics: Iterable[EpicModel],
    standalone_stories: Iterable[StoryModel],
) -> dict[str, ProjectSummary]:
    """Group epics and standalone stories under each of their business projects.

    An item tagged with several business projects appears under each one.
    Project progress sums the epics' story points plus the standalone
    stories' own points.
    """
    projects: dict[str, ProjectSummary] = {}

    def _bucket(name: str) -> ProjectSummary:
        summary = projects.get(name)
        if summary is None:
            summary = ProjectSummary(name=name)
            projects[name] = summary
        return summary

    for epic in epics:
        item = PortfolioItem(
            type="epic",
            key=epic.key,
            summary=epic.summary,
            progress=story_progress(epic.stories),
            epic=epic,
        )
        for name in _project_names(epic.business_projects):
            bucket = _bucket(name)
            bucket.items.append(item)
            bucket.progress.merge(item.progress)

    for story in standalone_stories:
        item = PortfolioItem(
            type="story",
            key=story.key,
            summary=story.summary,
            progress=story_progress([story]),
            story=story,
        )
        for name in _project_names(story.business_projects):
            bucket = _bucket(name)
            bucket.items.append(item)
            bucket.progress.merge(item.progress)

    return projects


def portfolio_frame(projects: dict[str, ProjectSummary]) -> pd.DataFrame:
    """One row per business project, sorted by name, for charts and tables."""
    if not projects:
        return pd.DataFrame()
    rows = [projects[name].to_dict() for name in sorted(projects, key=str.lower)]
    return pd.DataFrame(rows)


def project_items_frame(summary: ProjectSummary) -> pd.DataFrame:
    rows = []
    for item in summary.items:
        rows.append(
            {
                "key": item.key,
                "type": item.type,
                "summary": item.summary,
                "due_date": item.epic.due_date if item.epic else None,
                "status": item.story.status if item.story else None,
                "story_count": len(item.epic.stories) if item.epic else None,
                "total_points": item.progress.total_points,
                "completed_points": item.progress.completed_points,
                "progress_pct": item.progress.percentage,
            }
        )
    return pd.DataFrame(rows)
