from release_app.core.models import ChangeRequestModel
from release_app.versioning.history import (
    build_history_view,
    current_minor,
    history_window,
    recent_minor_lines,
)
from release_app.versioning.ledger import Booking


def _cm(key, versions, date="2025-01-01"):
    return ChangeRequestModel(
        key=key,
        summary=f"Deploy {key}",
        status="Done",
        components=["Core"],
        fix_versions=list(versions),
        client_environments=["Acme"],
        target_deployment_date=date,
        reporter="Rae",
    )


def _booking(version, booked_at="2025-03-01T09:00:00.000Z"):
    return Booking(
        id=f"HB-{version}",
        version=version,
        components=["Core"],
        client_environments=["Acme"],
        booked_by="Sam",
        booked_at=booked_at,
    )


def test_window_merges_and_sorts_descending():
    records = [_cm("CM-1", ["9.92.1", "9.92.3", "9.91.4"]), _cm("CM-2", ["9.92.2", "Backlog"])]
    bookings = [_booking("9.92.4"), _booking("9.92.3"), _booking("9.91.9")]
    entries = history_window(9, 92, records, bookings)
    assert [(str(e.version), e.type) for e in entries] == [
        ("9.92.4", "booked"),
        ("9.92.3", "deployed"),
        ("9.92.2", "deployed"),
        ("9.92.1", "deployed"),
    ]
    booked = entries[0].to_dict()
    assert booked["status"] == "Booked"
    assert booked["bookedBy"] == "Sam" and "deployedAt" not in booked
    deployed = entries[1].to_dict()
    assert deployed["cmKey"] == "CM-1" and deployed["deployedAt"] == "2025-01-01"


def test_one_entry_per_matching_tag_per_record():
    entries = history_window(9, 92, [_cm("CM-1", ["9.92.1"]), _cm("CM-2", ["9.92.1"])], [])
    assert [e.cm_key for e in entries] == ["CM-1", "CM-2"]


def test_current_minor_and_lines():
    records = [_cm("CM-1", ["9.92.1"]), _cm("CM-2", ["9.94.0", "10.1.0"])]
    assert current_minor(records, 9) == 94
    assert current_minor([], 9) == 0
    assert [line.label for line in recent_minor_lines(9, 94)] == ["9.94.x", "9.93.x", "9.92.x", "9.91.x", "9.90.x"]
    assert [line.minor for line in recent_minor_lines(9, 2)] == [2, 1, 0]


def test_view_defaults_to_current_line():
    recent = [_cm("CM-1", ["9.92.1"]), _cm("CM-2", ["9.93.2"])]
    view = build_history_view(9, None, recent, [_booking("9.93.3")])
    payload = view.to_dict()
    assert payload["currentMinor"] == 93 and payload["targetMinor"] == 93
    assert [h["version"] for h in payload["hotfixes"]] == ["9.93.3", "9.93.2"]
    assert payload["minorVersions"][0] == {"major": 9, "minor": 93, "label": "9.93.x"}


def test_view_loads_requested_line():
    calls = []

    def loader(major, minor):
        calls.append((major, minor))
        return [_cm("CM-9", ["9.90.5"])]

    view = build_history_view(9, 90, [_cm("CM-2", ["9.93.2"])], [], load_line_records=loader)
    assert calls == [(9, 90)]
    assert view.current_minor == 93
    assert view.target_minor == 90
    frame = view.to_frame()
    assert list(frame["version"]) == ["9.90.5"]
    assert frame.loc[0, "key"] == "CM-9"
