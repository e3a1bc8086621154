from release_app.analytics.releases import filter_by_cells, heatmap_long, release_heatmap
from release_app.core.models import StoryModel


def _story(key, sec, clients):
    return StoryModel(key=key, summary=key, status="Done", security_types=list(sec), client_environments=list(clients))


STORIES = [
    _story("VT-1", ["Internal"], ["Acme", "Globex"]),
    _story("VT-2", ["Internal", "Public"], ["Acme"]),
    _story("VT-3", [], ["Acme"]),
]


def test_heatmap_counts():
    wide = release_heatmap(STORIES)
    assert list(wide.index) == ["Internal", "Public"]
    assert list(wide.columns) == ["Acme", "Globex"]
    assert wide.loc["Internal", "Acme"] == 2
    assert wide.loc["Public", "Globex"] == 0

    long = heatmap_long(wide)
    assert len(long) == 4
    assert set(long.columns) == {"security_type", "client", "count"}


def test_empty_heatmap():
    assert release_heatmap([STORIES[2]]).empty
    assert heatmap_long(release_heatmap([])).empty


def test_filter_by_cells():
    assert [s.key for s in filter_by_cells(STORIES, [("Public", "Acme")])] == ["VT-2"]
    assert len(filter_by_cells(STORIES, [])) == 3
