"""Mapping raw Jira issue JSON into domain models and display DataFrames."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

import pandas as pd

from .config import FIELD_IDS
from .models import ChangeRequestModel, DependencyEpicModel, EpicModel, StoryModel


def _display_name(value: Any) -> str | None:
    if isinstance(value, dict):
        return value.get("displayName") or value.get("name")
    return None


def _option_values(value: Any) -> list[str]:
    """Flatten a Jira multi-select / version / component list into names."""
    if not value:
        return []
    if not isinstance(value, list):
        value = [value]
    out: list[str] = []
    for item in value:
        if isinstance(item, dict):
            name = item.get("value") or item.get("name")
        else:
            name = item
        if name is None:
            continue
        text = str(name).strip()
        if text:
            out.append(text)
    return out


def _version_names(value: Any) -> list[str]:
    """Fix-version names exactly as Jira returns them; padded names are not versions."""
    if not value:
        return []
    if not isinstance(value, list):
        value = [value]
    out: list[str] = []
    for item in value:
        name = item.get("name") if isinstance(item, dict) else item
        if isinstance(name, str) and name:
            out.append(name)
    return out


def _named(fields: dict[str, Any], name: str) -> str | None:
    block = fields.get(name)
    if isinstance(block, dict):
        return block.get("name")
    return None


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def map_story(raw: dict[str, Any]) -> StoryModel:
    fields = raw.get("fields") or {}
    parent = fields.get("parent")
    parent_key = parent.get("key") if isinstance(parent, dict) else None
    return StoryModel(
        key=raw.get("key"),
        summary=fields.get("summary"),
        status=_named(fields, "status"),
        issue_type=_named(fields, "issuetype"),
        fix_versions=_version_names(fields.get("fixVersions")),
        responsible_for_change=_display_name(fields.get(FIELD_IDS["responsible_for_change"])),
        security_types=_option_values(fields.get(FIELD_IDS["security_types"])),
        client_environments=_option_values(fields.get(FIELD_IDS["client_environments"])),
        story_points=_number(fields.get(FIELD_IDS["story_points"])),
        parent=parent_key or fields.get(FIELD_IDS["epic_link"]),
        business_projects=_option_values(fields.get(FIELD_IDS["business_projects"])),
    )


def map_epic(raw: dict[str, Any]) -> EpicModel:
    fields = raw.get("fields") or {}
    return EpicModel(
        key=raw.get("key"),
        summary=fields.get("summary"),
        due_date=fields.get("duedate"),
        client_environments=_option_values(fields.get(FIELD_IDS["client_environments"])),
        business_projects=_option_values(fields.get(FIELD_IDS["business_projects"])),
    )


def map_change_request(raw: dict[str, Any]) -> ChangeRequestModel:
    fields = raw.get("fields") or {}
    return ChangeRequestModel(
        key=raw.get("key"),
        summary=fields.get("summary"),
        status=_named(fields, "status") or "Unknown",
        components=_option_values(fields.get("components")),
        fix_versions=_version_names(fields.get("fixVersions")),
        client_environments=_option_values(fields.get(FIELD_IDS["client_environments"])),
        target_deployment_date=fields.get(FIELD_IDS["target_deployment_date"]) or None,
        reporter=_display_name(fields.get("reporter")),
        issue_type=_named(fields, "issuetype"),
    )


def map_dependency_epic(raw: dict[str, Any]) -> DependencyEpicModel:
    fields = raw.get("fields") or {}
    project = fields.get("project")
    return DependencyEpicModel(
        key=raw.get("key"),
        summary=fields.get("summary"),
        status=_named(fields, "status") or "Unknown",
        due_date=fields.get("duedate"),
        depends_on=_option_values(fields.get(FIELD_IDS["cross_team_dependencies"])),
        from_team=(project.get("name") if isinstance(project, dict) else None) or "Unknown",
    )


def map_dependency_story(raw: dict[str, Any]) -> StoryModel:
    """Stories under dependency epics carry points in a different field."""
    fields = raw.get("fields") or {}
    parent = fields.get("parent")
    parent_key = parent.get("key") if isinstance(parent, dict) else None
    return StoryModel(
        key=raw.get("key"),
        summary=fields.get("summary"),
        status=_named(fields, "status"),
        story_points=_number(fields.get(FIELD_IDS["dependency_story_points"])),
        parent=parent_key or fields.get(FIELD_IDS["epic_link"]),
    )


def _join(values: Any) -> str:
    if not values:
        return ""
    return ", ".join(str(v) for v in values)


def records_to_dataframe(records: Iterable[Any], list_columns: Iterable[str] = ()) -> pd.DataFrame:
    """Flatten dataclass records into a DataFrame for tables.

    List-valued columns named in ``list_columns`` are joined into a stable
    comma-separated string for display and CSV export.
    """
    rows = [asdict(r) for r in records]
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    for col in list_columns:
        if col in df.columns:
            df[col] = df[col].apply(_join)
    return df


def stories_to_dataframe(stories: Iterable[StoryModel]) -> pd.DataFrame:
    return records_to_dataframe(
        stories,
        list_columns=("fix_versions", "security_types", "client_environments", "business_projects"),
    )


def change_requests_to_dataframe(cms: Iterable[ChangeRequestModel]) -> pd.DataFrame:
    df = records_to_dataframe(cms, list_columns=("components", "fix_versions", "client_environments"))
    if df.empty:
        return df
    df["target_deployment_date"] = pd.to_datetime(df["target_deployment_date"], errors="coerce")
    return df.sort_values(by="target_deployment_date", ascending=False, na_position="last")
