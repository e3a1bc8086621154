"""Persisted ledger of booked (reserved but not yet deployed) hotfix versions.

The ledger is a single JSON document ``{"bookings": [...]}`` that is loaded in
full and rewritten in full on every mutation. Writes go through a temporary
file in the same directory followed by ``os.replace`` so the previous ledger
stays intact until the new one is completely on disk. Every
load -> mutate -> persist sequence runs under a lock shared by all ledger
instances pointing at the same file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from release_app.core.errors import DuplicateVersionError, LedgerIOError, ValidationError

from .version import Version, parse_version

logger = logging.getLogger(__name__)

BOOKING_STATUS = "booked"

_PATH_LOCKS: dict[Path, threading.RLock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = threading.RLock()
            _PATH_LOCKS[key] = lock
        return lock


def _clean_names(values: Iterable[Any] | None) -> list[str]:
    if not values or isinstance(values, str):
        return []
    out: list[str] = []
    for value in values:
        text = str(value).strip() if value is not None else ""
        if text and text not in out:
            out.append(text)
    return out


def _utc_timestamp() -> str:
    # Millisecond ISO-8601 with a Z suffix, the format already present in ledgers
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class Booking:
    id: str
    version: str
    components: list[str] = field(default_factory=list)
    client_environments: list[str] = field(default_factory=list)
    booked_by: str = "Unknown"
    booked_at: str = ""
    status: str = BOOKING_STATUS

    @property
    def parsed_version(self) -> Version | None:
        return parse_version(self.version)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "version": self.version,
            "components": list(self.components),
            "clientEnvironments": list(self.client_environments),
            "bookedBy": self.booked_by,
            "bookedAt": self.booked_at,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Booking:
        if not isinstance(raw, dict):
            raise TypeError(f"booking entry must be an object, got {type(raw).__name__}")
        booking_id = raw["id"]
        version = raw["version"]
        if not isinstance(booking_id, str) or not isinstance(version, str):
            raise ValueError("booking id and version must be strings")
        return cls(
            id=booking_id,
            version=version,
            components=_clean_names(raw.get("components")),
            client_environments=_clean_names(raw.get("clientEnvironments")),
            booked_by=raw.get("bookedBy") or "Unknown",
            booked_at=raw.get("bookedAt") or "",
            status=raw.get("status") or BOOKING_STATUS,
        )


class BookingLedger:
    """File-backed set of provisional hotfix versions.

    A missing file is an empty ledger. A file that cannot be read or parsed
    raises :class:`LedgerIOError` rather than being treated as empty, so a
    later write can never wipe bookings that merely failed to load.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    # ------------------ Public API ------------------
    def list(self) -> list[Booking]:
        with self._lock:
            return self._load()

    def sorted_for_display(self) -> list[Booking]:
        """Bookings newest first by ``booked_at``."""
        return sorted(self.list(), key=lambda b: b.booked_at, reverse=True)

    def versions(self) -> set[Version]:
        """Parsed versions of all current bookings (junk entries skipped)."""
        return {v for v in (b.parsed_version for b in self.list()) if v is not None}

    def book(
        self,
        version: Version | str,
        components: Iterable[str],
        client_environments: Iterable[str],
        booked_by: str | None = None,
    ) -> Booking:
        """Reserve ``version`` for the given components and client environments.

        Raises
        ------
        ValidationError
            Unparseable version, or no components / client environments.
        DuplicateVersionError
            The version already has an active booking; the existing booking
            is attached to the exception.
        LedgerIOError
            The ledger could not be read or written.
        """
        parsed = version if isinstance(version, Version) else parse_version(version)
        if parsed is None:
            raise ValidationError("Invalid version format. Expected X.Y.Z")
        component_names = _clean_names(components)
        client_names = _clean_names(client_environments)
        if not component_names:
            raise ValidationError("At least one component is required")
        if not client_names:
            raise ValidationError("At least one client environment is required")

        with self._lock:
            bookings = self._load()
            for existing in bookings:
                if existing.parsed_version == parsed:
                    raise DuplicateVersionError(str(parsed), existing)
            booking = Booking(
                id=self._new_id({b.id for b in bookings}),
                version=str(parsed),
                components=component_names,
                client_environments=client_names,
                booked_by=(booked_by or "").strip() or "Unknown",
                booked_at=_utc_timestamp(),
            )
            bookings.append(booking)
            self._save(bookings)
        logger.info("Booked hotfix version %s for %s", booking.version, booking.booked_by)
        return booking

    def reconcile(self, deployed_versions: Iterable[Version]) -> int:
        """Evict bookings whose version now appears among deployed versions.

        Returns the number of evicted bookings; a second call with the same
        deployed set evicts nothing.
        """
        deployed = set(deployed_versions)
        with self._lock:
            bookings = self._load()
            keep: list[Booking] = []
            evicted: list[Booking] = []
            for booking in bookings:
                if booking.parsed_version in deployed:
                    evicted.append(booking)
                else:
                    keep.append(booking)
            if not evicted:
                return 0
            self._save(keep)
        for booking in evicted:
            logger.info("Auto-cleanup: removed booking %s (now deployed)", booking.version)
        logger.info("Auto-cleanup: removed %d deployed booking(s)", len(evicted))
        return len(evicted)

    # ------------------ Internal Helpers ------------------
    @staticmethod
    def _new_id(taken: set[str]) -> str:
        stamp = int(time.time() * 1000)
        candidate = f"HB-{stamp}"
        while candidate in taken:
            stamp += 1
            candidate = f"HB-{stamp}"
        return candidate

    def _load(self) -> list[Booking]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LedgerIOError(f"Failed to read booking ledger {self.path}: {exc}") from exc
        rows = data.get("bookings") if isinstance(data, dict) else None
        if rows is None:
            rows = []
        if not isinstance(data, dict) or not isinstance(rows, list):
            raise LedgerIOError(f"Booking ledger {self.path} is not a {{'bookings': [...]}} document")
        try:
            return [Booking.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise LedgerIOError(f"Malformed booking entry in {self.path}: {exc}") from exc

    def _save(self, bookings: list[Booking]) -> None:
        payload = {"bookings": [b.to_dict() for b in bookings]}
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise LedgerIOError(f"Failed to write booking ledger {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
