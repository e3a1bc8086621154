"""Hotfix history for one minor line: deployed change requests plus bookings."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from release_app.core.config import HISTORY_MINOR_WINDOW
from release_app.core.models import ChangeRequestModel

from .ledger import Booking
from .version import Version, parse_version, parse_versions

DEPLOYED = "deployed"
BOOKED = "booked"


@dataclass(frozen=True, slots=True)
class MinorLine:
    major: int
    minor: int

    @property
    def label(self) -> str:
        return f"{self.major}.{self.minor}.x"

    def to_dict(self) -> dict[str, Any]:
        return {"major": self.major, "minor": self.minor, "label": self.label}


@dataclass(slots=True)
class HistoryEntry:
    type: str
    version: Version
    cm_key: str | None = None
    summary: str | None = None
    status: str | None = None
    components: list[str] = field(default_factory=list)
    client_environments: list[str] = field(default_factory=list)
    deployed_at: str | None = None
    reporter: str | None = None
    booked_at: str | None = None
    booked_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "version": str(self.version),
            "type": self.type,
            "cmKey": self.cm_key,
            "summary": self.summary,
            "status": self.status,
            "components": list(self.components),
            "clientEnvironments": list(self.client_environments),
            "reporter": self.reporter,
        }
        if self.type == DEPLOYED:
            out["deployedAt"] = self.deployed_at
        else:
            out["bookedAt"] = self.booked_at
            out["bookedBy"] = self.booked_by
        return out


@dataclass(slots=True)
class HistoryView:
    minor_versions: list[MinorLine]
    current_minor: int
    target_minor: int
    hotfixes: list[HistoryEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            "minorVersions": [line.to_dict() for line in self.minor_versions],
            "currentMinor": self.current_minor,
            "targetMinor": self.target_minor,
            "hotfixes": [entry.to_dict() for entry in self.hotfixes],
        }

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "version": str(entry.version),
                "type": entry.type,
                "key": entry.cm_key,
                "summary": entry.summary,
                "status": entry.status,
                "components": ", ".join(entry.components),
                "client_environments": ", ".join(entry.client_environments),
                "deployed_at": entry.deployed_at,
                "booked_at": entry.booked_at,
                "booked_by": entry.booked_by,
                "reporter": entry.reporter,
            }
            for entry in self.hotfixes
        ]
        return pd.DataFrame(rows)


def current_minor(records: Iterable[ChangeRequestModel], major: int) -> int:
    """Highest minor seen on ``major`` across the records' fix versions (0 if none)."""
    best = 0
    for record in records:
        for version in parse_versions(record.fix_versions):
            if version.major == major and version.minor > best:
                best = version.minor
    return best


def recent_minor_lines(major: int, current: int, count: int = HISTORY_MINOR_WINDOW) -> list[MinorLine]:
    """``current``, ``current - 1`` ... down to ``count`` lines, never below 0."""
    return [MinorLine(major, current - offset) for offset in range(count) if current - offset >= 0]


def history_window(
    major: int,
    minor: int,
    records: Iterable[ChangeRequestModel],
    bookings: Iterable[Booking],
) -> list[HistoryEntry]:
    """Deployed and booked hotfixes on ``major.minor.*``, highest version first.

    Each matching fix version on each record yields one deployed entry. A
    booking is only listed when its version is not already deployed.
    """
    entries: list[HistoryEntry] = []
    for record in records:
        for version in parse_versions(record.fix_versions):
            if version.line != (major, minor):
                continue
            entries.append(
                HistoryEntry(
                    type=DEPLOYED,
                    version=version,
                    cm_key=record.key,
                    summary=record.summary,
                    status=record.status,
                    components=list(record.components),
                    client_environments=list(record.client_environments),
                    deployed_at=record.target_deployment_date,
                    reporter=record.reporter,
                )
            )

    deployed_versions = {entry.version for entry in entries}
    for booking in bookings:
        version = parse_version(booking.version)
        if version is None or version.line != (major, minor) or version in deployed_versions:
            continue
        entries.append(
            HistoryEntry(
                type=BOOKED,
                version=version,
                status="Booked",
                components=list(booking.components),
                client_environments=list(booking.client_environments),
                reporter=booking.booked_by,
                booked_at=booking.booked_at,
                booked_by=booking.booked_by,
            )
        )

    entries.sort(key=lambda entry: entry.version, reverse=True)
    return entries


def build_history_view(
    major: int,
    requested_minor: int | None,
    recent_records: Iterable[ChangeRequestModel],
    bookings: Iterable[Booking],
    load_line_records: Callable[[int, int], Iterable[ChangeRequestModel]] | None = None,
) -> HistoryView:
    """Assemble the minor-line picker and the window for the requested line.

    ``recent_records`` decide the current minor, which is the default target
    when ``requested_minor`` is None. ``load_line_records(major, minor)``
    supplies the change requests tagged on the target line; without it the
    recent records are windowed instead.
    """
    recent = list(recent_records)
    current = current_minor(recent, major)
    target = requested_minor if requested_minor is not None else current
    line_records = load_line_records(major, target) if load_line_records else recent
    return HistoryView(
        minor_versions=recent_minor_lines(major, current),
        current_minor=current,
        target_minor=target,
        hotfixes=history_window(major, target, line_records, bookings),
    )
