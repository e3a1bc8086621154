"""Error types raised by version arithmetic and the booking ledger.

Unparseable version strings are not errors; every caller skips them.
"""

from __future__ import annotations

from typing import Any


class DashboardError(Exception):
    """Base class for failures the service layer translates into responses."""


class ValidationError(DashboardError):
    """Malformed or missing input to a public operation."""


class DuplicateVersionError(DashboardError):
    """A booking already exists for the requested version."""

    def __init__(self, version: str, existing_booking: Any):
        super().__init__(f"Version {version} is already booked")
        self.version = version
        self.existing_booking = existing_booking


class NoDataError(DashboardError):
    """No candidate versions were available for a computation."""


class LedgerIOError(DashboardError):
    """The booking ledger could not be read or written."""
