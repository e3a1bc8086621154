"""Version lineage: parsing, release flagging, booking ledger, matrix and history."""

from release_app.versioning.flagging import (
    find_missing_issues,
    issues_in_release,
    require_release_target,
    should_flag,
)
from release_app.versioning.history import (
    HistoryEntry,
    HistoryView,
    MinorLine,
    build_history_view,
    current_minor,
    history_window,
    recent_minor_lines,
)
from release_app.versioning.ledger import Booking, BookingLedger
from release_app.versioning.matrix import MatrixCell, VersionMatrix, build_matrix
from release_app.versioning.next_version import NextVersion, compute_next, deployed_versions_from
from release_app.versioning.version import (
    Version,
    available_release_versions,
    compare_versions,
    is_release_point,
    parse_version,
    parse_versions,
)

__all__ = [
    "Booking",
    "BookingLedger",
    "HistoryEntry",
    "HistoryView",
    "MatrixCell",
    "MinorLine",
    "NextVersion",
    "Version",
    "VersionMatrix",
    "available_release_versions",
    "build_history_view",
    "build_matrix",
    "compare_versions",
    "compute_next",
    "current_minor",
    "deployed_versions_from",
    "find_missing_issues",
    "history_window",
    "is_release_point",
    "issues_in_release",
    "parse_version",
    "parse_versions",
    "recent_minor_lines",
    "require_release_target",
    "should_flag",
]
