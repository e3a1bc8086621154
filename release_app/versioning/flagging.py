"""Missing-from-release detection over issue fix versions.

An issue is flagged when it was hotfixed into an earlier minor line than the
target release, no later release on or before the target carried it forward,
and the target release itself is not among its fix versions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from release_app.core.errors import ValidationError
from release_app.core.models import StoryModel

from .version import Version, parse_version


def require_release_target(text: Any) -> Version:
    """Parse a user-supplied target and insist on a release point (patch 0)."""
    if not text:
        raise ValidationError("targetVersion is required")
    target = parse_version(text)
    if target is None:
        raise ValidationError("Invalid version format. Expected X.Y.Z")
    if not target.is_release_point:
        raise ValidationError("Target version must be a release version (patch must be 0)")
    return target


def should_flag(version_tags: Iterable[Any] | None, target: Version) -> bool:
    """Return True when an issue with ``version_tags`` is missing from ``target``.

    Parameters
    ----------
    version_tags : iterable of str
        Raw fix-version names; unparseable ones are skipped.
    target : Version
        Release point being checked.

    Raises
    ------
    ValidationError
        If ``target`` is a hotfix point.

    Examples
    --------
    >>> should_flag({"9.91.0", "9.92.3"}, Version(9, 93, 0))
    True
    >>> should_flag({"9.91.0", "9.92.3", "9.93.0"}, Version(9, 93, 0))
    False
    """
    if not target.is_release_point:
        raise ValidationError("Target version must be a release version (patch must be 0)")
    if not version_tags:
        return False

    has_target = False
    max_release_minor: int | None = None
    max_hotfix_minor: int | None = None

    for tag in version_tags:
        parsed = parse_version(tag)
        if parsed is None:
            continue
        # Older major lines never count; newer ones are weighed by minor alone
        if parsed.major < target.major:
            continue
        if parsed == target:
            has_target = True
        if parsed.is_release_point:
            if parsed.minor <= target.minor and (
                max_release_minor is None or parsed.minor > max_release_minor
            ):
                max_release_minor = parsed.minor
        elif parsed.minor < target.minor and (max_hotfix_minor is None or parsed.minor > max_hotfix_minor):
            max_hotfix_minor = parsed.minor

    if max_hotfix_minor is None or has_target:
        return False
    return max_release_minor is None or max_hotfix_minor > max_release_minor


def find_missing_issues(issues: Iterable[StoryModel], target: Version) -> list[StoryModel]:
    """Issues that should be flagged as missing from ``target``, in input order."""
    if not target.is_release_point:
        raise ValidationError("Target version must be a release version (patch must be 0)")
    return [issue for issue in issues if should_flag(issue.fix_versions, target)]


def issues_in_release(issues: Iterable[StoryModel], target: Version) -> list[StoryModel]:
    """Issues whose fix versions include ``target`` exactly."""
    out: list[StoryModel] = []
    for issue in issues:
        if any(parse_version(tag) == target for tag in issue.fix_versions):
            out.append(issue)
    return out
