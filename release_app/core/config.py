"""Central configuration, constants, Jira field ids, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# Jira Connection Settings
# =============================================================================
JIRA_DEFAULT_SERVER = "https://your-domain.atlassian.net"
TIMEZONE = "Europe/London"

# Delivery project (epics, stories, bugs) and change-management project
DELIVERY_PROJECT_KEY = "VT"
CM_PROJECT_KEY = "CM"

# Atlassian team id of the VAL team (owner of the CM list and dependency views)
VAL_TEAM_ID = "6494989f-c283-4c5b-bcec-fe03915d63de"
VAL_TEAM_LABEL = "Val Team"

# =============================================================================
# Jira Custom Field IDs
# =============================================================================
FIELD_IDS = {
    "client_environments": "customfield_13235",
    "target_deployment_date": "customfield_10751",
    "responsible_for_change": "customfield_10400",
    "business_projects": "customfield_16369",
    "story_points": "customfield_10115",
    "security_types": "customfield_16068",
    "epic_quarter": "customfield_10552",
    "cross_team_dependencies": "customfield_12805",
    "dependency_story_points": "customfield_10016",
    "epic_link": "customfield_10014",
}

# Context id of the client-environment select list (option lookup endpoint)
CLIENT_ENVIRONMENT_CONTEXT_ID = 14042

# =============================================================================
# Workflow Status Configuration
# =============================================================================
# CM statuses that count as "deployed" for version arithmetic
DEPLOYED_CM_STATUSES: Sequence[str] = ("Deployment Completed", "Done")

# Story statuses whose points count as delivered (lowercase for matching)
COMPLETED_STORY_STATUSES: frozenset[str] = frozenset({"done", "ready", "partial release"})

# Story statuses eligible for the missing-from-release check
RELEASED_STORY_STATUSES: Sequence[str] = ("Done", "Ready", "Partial Release")

# Substrings marking a dependency story as finished (lowercase)
DEPENDENCY_DONE_MARKERS: Sequence[str] = ("done", "closed", "resolved")

# =============================================================================
# Version / Hotfix Settings
# =============================================================================
DEFAULT_MAJOR_VERSION: int = 9
HISTORY_MINOR_WINDOW: int = 5  # Number of minor lines offered in the history picker
RELEASE_VERSION_LIMIT: int = 10  # Release picker on the Releases page
HOTFIX_CHECK_VERSION_LIMIT: int = 5  # Release picker on the Missing From Release page

DEPLOYED_CM_LOOKBACK_DAYS: int = 100
TEAM_CM_LOOKBACK_DAYS: int = 30

# Booking ledger location (overridable through the [hotfix] secrets section)
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_BOOKINGS_FILE = PROJECT_ROOT / "data" / "hotfix-bookings.json"

UNCATEGORIZED_PROJECT = "Uncategorized"

# =============================================================================
# Fetch field lists
# =============================================================================
CM_FETCH_FIELDS = [
    "summary",
    "status",
    "components",
    "fixVersions",
    FIELD_IDS["client_environments"],
    FIELD_IDS["target_deployment_date"],
    "reporter",
]

TEAM_CM_FETCH_FIELDS = CM_FETCH_FIELDS + ["issuetype"]

STORY_VERSION_FETCH_FIELDS = [
    "summary",
    "status",
    "fixVersions",
    "issuetype",
    FIELD_IDS["responsible_for_change"],
    FIELD_IDS["security_types"],
    FIELD_IDS["client_environments"],
]

EPIC_FETCH_FIELDS = [
    "summary",
    "duedate",
    FIELD_IDS["business_projects"],
    FIELD_IDS["client_environments"],
]

STORY_FETCH_FIELDS = [
    "summary",
    "status",
    "parent",
    FIELD_IDS["story_points"],
    FIELD_IDS["responsible_for_change"],
    FIELD_IDS["business_projects"],
    FIELD_IDS["epic_link"],
]

DEPENDENCY_EPIC_FIELDS = [
    "summary",
    "status",
    "duedate",
    "project",
    FIELD_IDS["epic_quarter"],
    FIELD_IDS["cross_team_dependencies"],
]

DEPENDENCY_STORY_FIELDS = [
    "parent",
    "status",
    FIELD_IDS["epic_link"],
    FIELD_IDS["dependency_story_points"],
]

# =============================================================================
# Table column sets (overridable through columns.yaml)
# =============================================================================
RELEASE_STORY_COLUMNS: Sequence[str] = (
    "Ticket",
    "summary",
    "issue_type",
    "status",
    "fix_versions",
    "security_types",
    "client_environments",
    "responsible_for_change",
)

MISSING_STORY_COLUMNS: Sequence[str] = (
    "Ticket",
    "summary",
    "status",
    "fix_versions",
    "responsible_for_change",
)

CM_COLUMNS: Sequence[str] = (
    "Ticket",
    "summary",
    "status",
    "reporter",
    "components",
    "fix_versions",
    "client_environments",
    "target_deployment_date",
)

HISTORY_COLUMNS: Sequence[str] = (
    "version",
    "type",
    "Ticket",
    "summary",
    "status",
    "components",
    "client_environments",
    "deployed_at",
    "booked_at",
    "reporter",
)

BOOKING_COLUMNS: Sequence[str] = (
    "id",
    "version",
    "components",
    "client_environments",
    "booked_by",
    "booked_at",
    "status",
)


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()
