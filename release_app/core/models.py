"""Domain data models for delivery issues, change requests, and dependency epics."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class StoryModel:
    key: str
    summary: str | None
    status: str | None
    issue_type: str | None = None
    fix_versions: list[str] = field(default_factory=list)
    responsible_for_change: str | None = None
    security_types: list[str] = field(default_factory=list)
    client_environments: list[str] = field(default_factory=list)
    story_points: float | None = None
    parent: str | None = None
    business_projects: list[str] = field(default_factory=list)


@dataclass(slots=True)
class EpicModel:
    key: str
    summary: str | None
    due_date: str | None
    client_environments: list[str] = field(default_factory=list)
    business_projects: list[str] = field(default_factory=list)
    stories: list[StoryModel] = field(default_factory=list)


@dataclass(slots=True)
class ChangeRequestModel:
    """A change-management ticket; deployed ones are the deployment records."""

    key: str
    summary: str | None
    status: str
    components: list[str] = field(default_factory=list)
    fix_versions: list[str] = field(default_factory=list)
    client_environments: list[str] = field(default_factory=list)
    target_deployment_date: str | None = None
    reporter: str | None = None
    issue_type: str | None = None

    @property
    def source_key(self) -> str:
        return self.key

    @property
    def deployed_at(self) -> str | None:
        return self.target_deployment_date


@dataclass(slots=True)
class DependencyEpicModel:
    key: str
    summary: str | None
    status: str
    due_date: str | None
    depends_on: list[str] = field(default_factory=list)
    from_team: str | None = None
