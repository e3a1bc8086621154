"""Dotted three-component version values (major.minor.patch).

Jira fix-version fields are free text, so anything that is not exactly three
dot-separated integers ("Backlog", "9.92", "") is simply not a version.
Parsing returns ``None`` for those and every caller skips them.

Leading zeros are accepted and normalised: ``"9.092.1"`` parses to the same
value as ``"9.92.1"``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)", re.ASCII)


@dataclass(frozen=True, order=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def is_release_point(self) -> bool:
        return self.patch == 0

    @property
    def is_hotfix_point(self) -> bool:
        return self.patch != 0

    @property
    def line(self) -> tuple[int, int]:
        """The (major, minor) pair identifying this version's minor line."""
        return self.major, self.minor

    def next_patch(self) -> Version:
        return Version(self.major, self.minor, self.patch + 1)

    def base_release(self) -> Version:
        return Version(self.major, self.minor, 0)


def parse_version(text: Any) -> Version | None:
    """Parse ``text`` into a :class:`Version`, or return ``None``.

    Never raises; non-string input is treated like any other non-version.

    Examples
    --------
    >>> parse_version("9.92.3")
    Version(major=9, minor=92, patch=3)
    >>> parse_version("Backlog") is None
    True
    """
    if not isinstance(text, str):
        return None
    match = VERSION_PATTERN.fullmatch(text)
    if match is None:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return Version(major, minor, patch)


def compare_versions(a: Version, b: Version) -> int:
    """Return -1, 0 or 1 comparing by (major, minor, patch)."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def is_release_point(version: Version) -> bool:
    return version.is_release_point


def parse_versions(tags: Iterable[Any] | None) -> list[Version]:
    """Parse every tag, silently dropping the ones that are not versions."""
    if not tags:
        return []
    out: list[Version] = []
    for tag in tags:
        parsed = parse_version(tag)
        if parsed is not None:
            out.append(parsed)
    return out


def available_release_versions(tags: Iterable[Any], limit: int = 5) -> list[str]:
    """Distinct release points among ``tags``, newest first, capped at ``limit``.

    Feeds the target-version pickers; hotfix points and junk tags are ignored.
    """
    releases = {v for v in parse_versions(tags) if v.is_release_point}
    ordered = sorted(releases, reverse=True)
    return [str(v) for v in ordered[: max(limit, 0)]]
