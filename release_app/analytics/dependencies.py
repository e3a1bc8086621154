"""Cross-team dependency aggregation for one planning quarter.

Outgoing dependencies are our epics that depend on other teams; incoming are
other teams' epics that depend on us. Layout of the flow diagram is left to
the page; this module only shapes the data.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from release_app.core.models import DependencyEpicModel, StoryModel
from release_app.core.status import is_dependency_story_done

from .portfolio import round_percent


@dataclass(slots=True)
class EpicProgress:
    story_count: int = 0
    stories_done: int = 0
    total_points: float = 0.0
    done_points: float = 0.0

    @property
    def progress_percent(self) -> int:
        """Point-weighted completion, falling back to story counts without points."""
        if self.total_points > 0:
            return round_percent(self.done_points, self.total_points) or 0
        if self.story_count > 0:
            return round_percent(self.stories_done, self.story_count) or 0
        return 0

    def to_dict(self) -> dict[str, int]:
        return {
            "storyCount": self.story_count,
            "storiesDone": self.stories_done,
            "progressPercent": self.progress_percent,
        }


@dataclass(slots=True)
class DependencyReport:
    quarter: str
    outgoing: list[DependencyEpicModel] = field(default_factory=list)
    incoming: list[DependencyEpicModel] = field(default_factory=list)
    outgoing_by_team: dict[str, list[DependencyEpicModel]] = field(default_factory=dict)
    incoming_by_team: dict[str, list[DependencyEpicModel]] = field(default_factory=dict)
    progress: dict[str, EpicProgress] = field(default_factory=dict)

    def progress_for(self, key: str) -> EpicProgress:
        return self.progress.get(key) or EpicProgress()


def summarize_epic_progress(stories: Iterable[StoryModel]) -> dict[str, EpicProgress]:
    out: dict[str, EpicProgress] = {}
    for story in stories:
        if not story.parent:
            continue
        progress = out.setdefault(story.parent, EpicProgress())
        points = story.story_points or 0.0
        progress.story_count += 1
        progress.total_points += points
        if is_dependency_story_done(story.status):
            progress.stories_done += 1
            progress.done_points += points
    return out


def group_outgoing(epics: Iterable[DependencyEpicModel]) -> dict[str, list[DependencyEpicModel]]:
    grouped: dict[str, list[DependencyEpicModel]] = {}
    for epic in epics:
        for team in epic.depends_on:
            grouped.setdefault(team, []).append(epic)
    return grouped


def group_incoming(epics: Iterable[DependencyEpicModel]) -> dict[str, list[DependencyEpicModel]]:
    grouped: dict[str, list[DependencyEpicModel]] = {}
    for epic in epics:
        grouped.setdefault(epic.from_team or "Unknown", []).append(epic)
    return grouped


def build_dependency_report(
    quarter: str,
    outgoing: list[DependencyEpicModel],
    incoming: list[DependencyEpicModel],
    stories: Iterable[StoryModel] = (),
) -> DependencyReport:
    return DependencyReport(
        quarter=quarter,
        outgoing=list(outgoing),
        incoming=list(incoming),
        outgoing_by_team=group_outgoing(outgoing),
        incoming_by_team=group_incoming(incoming),
        progress=summarize_epic_progress(stories),
    )


def dependency_field_options(raw_values: Iterable[tuple[Any, Iterable[Any]]]) -> dict[str, list[str]]:
    """Distinct quarters (newest first) and teams (alphabetical).

    ``raw_values`` yields ``(quarter, teams)`` pairs already reduced to names.
    """
    quarters: set[str] = set()
    teams: set[str] = set()
    for quarter, epic_teams in raw_values:
        if quarter:
            quarters.add(str(quarter))
        teams.update(str(t) for t in epic_teams if t)
    return {"quarters": sorted(quarters, reverse=True), "teams": sorted(teams)}


def dependency_links_frame(report: DependencyReport, home_team: str) -> pd.DataFrame:
    """Team-to-team link counts (source, target, epics) in both directions."""
    rows = []
    for team, epics in sorted(report.outgoing_by_team.items()):
        rows.append({"source": home_team, "target": team, "epics": len(epics), "direction": "outgoing"})
    for team, epics in sorted(report.incoming_by_team.items()):
        rows.append({"source": team, "target": home_team, "epics": len(epics), "direction": "incoming"})
    return pd.DataFrame(rows, columns=["source", "target", "epics", "direction"])


def dependency_epics_frame(report: DependencyReport, direction: str) -> pd.DataFrame:
    epics = report.outgoing if direction == "outgoing" else report.incoming
    rows = []
    for epic in epics:
        progress = report.progress_for(epic.key)
        rows.append(
            {
                "key": epic.key,
                "summary": epic.summary,
                "status": epic.status,
                "due_date": epic.due_date,
                "teams": ", ".join(epic.depends_on) if direction == "outgoing" else epic.from_team,
                "story_count": progress.story_count,
                "stories_done": progress.stories_done,
                "progress_pct": progress.progress_percent,
            }
        )
    return pd.DataFrame(rows)
