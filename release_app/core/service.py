"""DashboardService: fetches Jira data and runs version arithmetic for the pages.

This is the boundary of the version-lineage core. Core functions raise the
typed errors in :mod:`release_app.core.errors`; the methods here translate
them into :class:`ServiceResult` values with HTTP-like status codes so pages
never see those exceptions. Jira transport failures still propagate as
``RuntimeError`` from :class:`JiraAPI`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from release_app.analytics.dependencies import (
    DependencyReport,
    build_dependency_report,
    dependency_field_options,
)
from release_app.analytics.portfolio import ProjectSummary, build_portfolio
from release_app.versioning import (
    Booking,
    BookingLedger,
    HistoryView,
    VersionMatrix,
    available_release_versions,
    build_history_view,
    build_matrix,
    compute_next,
    deployed_versions_from,
    find_missing_issues,
    issues_in_release,
    require_release_target,
)

from .config import (
    CLIENT_ENVIRONMENT_CONTEXT_ID,
    CM_FETCH_FIELDS,
    CM_PROJECT_KEY,
    DEFAULT_MAJOR_VERSION,
    DELIVERY_PROJECT_KEY,
    DEPENDENCY_EPIC_FIELDS,
    DEPENDENCY_STORY_FIELDS,
    DEPLOYED_CM_LOOKBACK_DAYS,
    DEPLOYED_CM_STATUSES,
    EPIC_FETCH_FIELDS,
    FIELD_IDS,
    HOTFIX_CHECK_VERSION_LIMIT,
    RELEASED_STORY_STATUSES,
    STORY_FETCH_FIELDS,
    STORY_VERSION_FETCH_FIELDS,
    TEAM_CM_FETCH_FIELDS,
    TEAM_CM_LOOKBACK_DAYS,
    VAL_TEAM_ID,
    VAL_TEAM_LABEL,
)
from .errors import DuplicateVersionError, LedgerIOError, NoDataError, ValidationError
from .jira_client import JiraAPI
from .mappers import (
    _option_values,
    map_change_request,
    map_dependency_epic,
    map_dependency_story,
    map_epic,
    map_story,
)
from .models import ChangeRequestModel, EpicModel, StoryModel

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]

# JQL "in (...)" lists are chunked to keep query strings bounded
KEY_CHUNK_SIZE = 50


@dataclass(slots=True)
class ServiceResult:
    """Outcome of a service call.

    ``status`` follows HTTP conventions: 200 success (possibly a soft
    "not available" carrying ``error``), 400 validation, 409 booking conflict
    (``existing_booking`` set), 500 ledger storage failure.
    """

    payload: Any = None
    error: str | None = None
    status: int = 200
    existing_booking: Booking | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status < 400


def _quote_list(values: Iterable[str]) -> str:
    return ", ".join(f'"{v}"' for v in values)


def _chunks(items: Sequence[str], size: int = KEY_CHUNK_SIZE):
    for start in range(0, len(items), size):
        yield items[start : start + size]


class DashboardService:
    def __init__(self, api: JiraAPI, ledger: BookingLedger):
        self.api = api
        self.ledger = ledger

    # ------------------ Fetch Methods ------------------
    def fetch_versioned_stories(self, *, released_only: bool = False) -> list[StoryModel]:
        """Stories and bugs with at least one fix version.

        ``released_only`` restricts to done/ready/partially released work, the
        population checked for missing-from-release flags.
        """
        status_clause = ""
        if released_only:
            status_clause = f" AND status in ({_quote_list(RELEASED_STORY_STATUSES)})"
        jql = (
            f"project = {DELIVERY_PROJECT_KEY} AND issuetype in (Story, Bug)"
            f"{status_clause} AND fixVersion is not EMPTY"
        )
        raw = self.api.search_enhanced(jql, fields=list(STORY_VERSION_FETCH_FIELDS))
        return [map_story(r) for r in raw]

    def fetch_deployed_cms(self, *, deployed_only: bool = True) -> list[ChangeRequestModel]:
        """Change requests created in the lookback window, newest first."""
        status_clause = f" AND status in ({_quote_list(DEPLOYED_CM_STATUSES)})" if deployed_only else ""
        jql = (
            f"project = {CM_PROJECT_KEY}{status_clause} AND created >= -{DEPLOYED_CM_LOOKBACK_DAYS}d "
            "ORDER BY created DESC"
        )
        raw = self.api.search_enhanced(jql, fields=list(CM_FETCH_FIELDS))
        return [map_change_request(r) for r in raw]

    def fetch_cms_by_version(self, major: int, minor: int) -> list[ChangeRequestModel]:
        """Change requests tagged on ``major.minor.*`` with no date limit."""
        jql = f'project = {CM_PROJECT_KEY} AND fixVersion ~ "{major}.{minor}.*" ORDER BY created DESC'
        raw = self.api.search_enhanced(jql, fields=list(CM_FETCH_FIELDS))
        return [map_change_request(r) for r in raw]

    def fetch_team_cms(self) -> list[ChangeRequestModel]:
        jql = (
            f'project = {CM_PROJECT_KEY} AND "team[team]" = {VAL_TEAM_ID} '
            f"AND created >= -{TEAM_CM_LOOKBACK_DAYS}d ORDER BY created DESC"
        )
        raw = self.api.search_enhanced(jql, fields=list(TEAM_CM_FETCH_FIELDS))
        return [map_change_request(r) for r in raw]

    def fetch_epics_with_stories(self, *, progress: ProgressCallback | None = None) -> list[EpicModel]:
        if progress:
            progress("Querying epics with business projects", None, None)
        epic_jql = (
            f"project = {DELIVERY_PROJECT_KEY} AND issuetype = Epic AND "
            '"Business Projects[Select List (multiple choices)]" is not empty'
        )
        epics = [map_epic(r) for r in self.api.search_enhanced(epic_jql, fields=list(EPIC_FETCH_FIELDS))]
        by_key = {epic.key: epic for epic in epics}
        keys = list(by_key)
        chunks = list(_chunks(keys))
        for idx, chunk in enumerate(chunks, start=1):
            if progress:
                progress("Loading stories for epics", idx, len(chunks))
            story_jql = (
                f"project = {DELIVERY_PROJECT_KEY} AND issuetype = Story AND "
                f'"Epic Link" in ({", ".join(chunk)})'
            )
            for raw in self.api.search_enhanced(story_jql, fields=list(STORY_FETCH_FIELDS)):
                story = map_story(raw)
                epic_key = (raw.get("fields") or {}).get(FIELD_IDS["epic_link"]) or story.parent
                epic = by_key.get(epic_key)
                if epic is not None:
                    epic.stories.append(story)
        return epics

    def fetch_standalone_stories(self) -> list[StoryModel]:
        jql = (
            f"project = {DELIVERY_PROJECT_KEY} AND issuetype = Story AND "
            '"Business Projects[Select List (multiple choices)]" is not empty'
        )
        return [map_story(r) for r in self.api.search_enhanced(jql, fields=list(STORY_FETCH_FIELDS))]

    # ------------------ Releases ------------------
    def release_versions(self, limit: int = HOTFIX_CHECK_VERSION_LIMIT, *, released_only: bool = False) -> list[str]:
        """Latest release points seen on delivery issues, for target pickers."""
        stories = self.fetch_versioned_stories(released_only=released_only)
        names = {name for story in stories for name in story.fix_versions}
        return available_release_versions(names, limit)

    def missing_from_release(self, target_version: str | None) -> ServiceResult:
        """Released stories that were hotfixed but never reached ``target_version``."""
        try:
            target = require_release_target(target_version)
        except ValidationError as exc:
            return ServiceResult(error=str(exc), status=400)
        stories = self.fetch_versioned_stories(released_only=True)
        missing = find_missing_issues(stories, target)
        return ServiceResult(payload={"targetVersion": str(target), "missingStories": missing})

    def release_stories(self, target_version: str | None) -> ServiceResult:
        """Stories and bugs shipped in ``target_version``."""
        try:
            target = require_release_target(target_version)
        except ValidationError as exc:
            return ServiceResult(error=str(exc), status=400)
        stories = self.fetch_versioned_stories()
        return ServiceResult(payload={"targetVersion": str(target), "stories": issues_in_release(stories, target)})

    # ------------------ Hotfix Booking ------------------
    def next_version(self) -> ServiceResult:
        """Next free hotfix slot; reconciles the ledger against deployed CMs first."""
        cms = self.fetch_deployed_cms(deployed_only=True)
        try:
            result = compute_next(deployed_versions_from(cms), self.ledger)
        except NoDataError as exc:
            return ServiceResult(payload={"nextVersion": None}, error=str(exc), status=200)
        except LedgerIOError as exc:
            logger.exception("Booking ledger unavailable while computing next version")
            return ServiceResult(error=str(exc), status=500)
        return ServiceResult(payload=result)

    def client_versions(self) -> VersionMatrix:
        return build_matrix(self.fetch_deployed_cms(deployed_only=True))

    def list_bookings(self) -> ServiceResult:
        try:
            return ServiceResult(payload=self.ledger.sorted_for_display())
        except LedgerIOError as exc:
            logger.exception("Booking ledger unavailable while listing bookings")
            return ServiceResult(error=str(exc), status=500)

    def book_hotfix(
        self,
        version: str | None,
        components: Iterable[str] | None,
        client_environments: Iterable[str] | None,
        booked_by: str | None = None,
    ) -> ServiceResult:
        if not version or components is None or client_environments is None:
            return ServiceResult(
                error="Missing required fields: version, components, clientEnvironments",
                status=400,
            )
        try:
            booking = self.ledger.book(version, components, client_environments, booked_by)
        except ValidationError as exc:
            return ServiceResult(error=str(exc), status=400)
        except DuplicateVersionError as exc:
            return ServiceResult(error=str(exc), status=409, existing_booking=exc.existing_booking)
        except LedgerIOError as exc:
            logger.exception("Booking ledger unavailable while booking %s", version)
            return ServiceResult(error=str(exc), status=500)
        return ServiceResult(payload=booking)

    def hotfix_history(self, major: int | None = None, minor: int | None = None) -> ServiceResult:
        """Hotfix history for one minor line; defaults to the current line."""
        target_major = DEFAULT_MAJOR_VERSION if major is None else major
        if minor is not None and minor < 0:
            return ServiceResult(error="minor must be a non-negative integer", status=400)
        recent = self.fetch_deployed_cms(deployed_only=False)
        try:
            bookings = self.ledger.list()
        except LedgerIOError as exc:
            logger.exception("Booking ledger unavailable while building hotfix history")
            return ServiceResult(error=str(exc), status=500)
        view: HistoryView = build_history_view(
            target_major,
            minor,
            recent,
            bookings,
            load_line_records=self.fetch_cms_by_version,
        )
        return ServiceResult(payload=view)

    def booking_field_options(self) -> dict[str, list[dict[str, str]]]:
        return {
            "components": self.api.project_components(CM_PROJECT_KEY),
            "clients": self.api.field_options(FIELD_IDS["client_environments"], CLIENT_ENVIRONMENT_CONTEXT_ID),
        }

    # ------------------ Change Requests ------------------
    def change_requests(self) -> list[ChangeRequestModel]:
        return self.fetch_team_cms()

    # ------------------ Portfolio ------------------
    def portfolio(self, *, progress: ProgressCallback | None = None) -> dict[str, ProjectSummary]:
        epics = self.fetch_epics_with_stories(progress=progress)
        if progress:
            progress("Querying standalone stories", None, None)
        stories = self.fetch_standalone_stories()
        return build_portfolio(epics, stories)

    # ------------------ Dependencies ------------------
    def dependency_quarters(self) -> dict[str, list[str]]:
        epic_quarter = FIELD_IDS["epic_quarter"]
        deps = FIELD_IDS["cross_team_dependencies"]
        jql = 'type = Epic AND "Epic Quarter[Dropdown]" is not EMPTY'
        raw = self.api.search_enhanced(jql, fields=[epic_quarter, deps])
        pairs = []
        for issue in raw:
            fields = issue.get("fields") or {}
            quarter_values = _option_values(fields.get(epic_quarter))
            pairs.append((quarter_values[0] if quarter_values else None, _option_values(fields.get(deps))))
        return dependency_field_options(pairs)

    def dependencies(self, quarter: str | None) -> ServiceResult:
        if not quarter:
            return ServiceResult(error="quarter is required", status=400)
        base = f'type = Epic AND "Epic Quarter[Dropdown]" = "{quarter}"'
        outgoing_jql = (
            f'"team[team]" = {VAL_TEAM_ID} AND {base} AND '
            '"Cross Team Dependencies[Select List (multiple choices)]" is not EMPTY'
        )
        incoming_jql = (
            f'"team[team]" != {VAL_TEAM_ID} AND {base} AND '
            f'"Cross Team Dependencies[Select List (multiple choices)]" = "{VAL_TEAM_LABEL}"'
        )
        outgoing = [map_dependency_epic(r) for r in self.api.search_enhanced(outgoing_jql, fields=DEPENDENCY_EPIC_FIELDS)]
        incoming = [map_dependency_epic(r) for r in self.api.search_enhanced(incoming_jql, fields=DEPENDENCY_EPIC_FIELDS)]

        keys = [e.key for e in outgoing] + [e.key for e in incoming]
        stories: list[StoryModel] = []
        for chunk in _chunks(keys):
            joined = ", ".join(chunk)
            story_jql = f'"Epic Link" in ({joined}) OR parent in ({joined})'
            raw = self.api.search_enhanced(story_jql, fields=DEPENDENCY_STORY_FIELDS)
            stories.extend(map_dependency_story(r) for r in raw)
        report: DependencyReport = build_dependency_report(quarter, outgoing, incoming, stories)
        return ServiceResult(payload=report)
