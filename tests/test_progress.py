import logging

from release_app.visual import progress
from release_app.visual.progress import guarded_fetch


def _capture_errors(monkeypatch):
    shown = []
    monkeypatch.setattr(progress.st, "error", shown.append)
    return shown


def test_failed_fetch_is_reported_and_returns_none(monkeypatch, caplog):
    shown = _capture_errors(monkeypatch)

    def fetch():
        raise RuntimeError("Failed to fetch issues from Jira: 503 Service Unavailable")

    with caplog.at_level(logging.ERROR, logger="release_app.visual.progress"):
        assert guarded_fetch("release versions", fetch) is None
    assert shown == ["Failed to load release versions from Jira: Failed to fetch issues from Jira: 503 Service Unavailable"]
    assert "Jira request failed while loading release versions" in caplog.text


def test_successful_fetch_passes_arguments_through(monkeypatch):
    shown = _capture_errors(monkeypatch)

    def fetch(limit, released_only=False):
        return [limit, released_only]

    assert guarded_fetch("release versions", fetch, 5, released_only=True) == [5, True]
    assert shown == []
