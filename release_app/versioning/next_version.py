"""Next bookable hotfix version from deployed versions plus the booking ledger."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from release_app.core.errors import NoDataError
from release_app.core.models import ChangeRequestModel

from .ledger import BookingLedger
from .version import Version, parse_versions


@dataclass(frozen=True, slots=True)
class NextVersion:
    current_highest: Version
    next_version: Version
    base_version: Version

    def to_dict(self) -> dict[str, str]:
        return {
            "currentHighest": str(self.current_highest),
            "nextVersion": str(self.next_version),
            "baseVersion": str(self.base_version),
        }


def deployed_versions_from(records: Iterable[ChangeRequestModel]) -> set[Version]:
    """Every parseable fix version across the given deployment records."""
    out: set[Version] = set()
    for record in records:
        out.update(parse_versions(record.fix_versions))
    return out


def compute_next(deployed_versions: Iterable[Version], ledger: BookingLedger) -> NextVersion:
    """Highest known version (deployed or booked) and the patch slot after it.

    The ledger is reconciled against ``deployed_versions`` before it is read,
    so bookings that have since been deployed are evicted first.

    Raises
    ------
    NoDataError
        Neither deployed versions nor remaining bookings exist.
    """
    deployed = set(deployed_versions)
    ledger.reconcile(deployed)
    candidates = deployed | ledger.versions()
    if not candidates:
        raise NoDataError("No deployed versions found.")
    highest = max(candidates)
    return NextVersion(
        current_highest=highest,
        next_version=highest.next_patch(),
        base_version=highest.base_release(),
    )
