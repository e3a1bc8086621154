from release_app.core.column_config import default_column_sets, get_columns, load_column_sets


def test_column_sets_load():
    sets = load_column_sets(refresh=True)
    assert {"release_stories", "missing_stories", "change_requests", "hotfix_history", "bookings"} <= set(sets)
    assert get_columns("bookings")[0] == "id"
    assert get_columns("nope") == []


def test_yaml_overrides_and_fallbacks(tmp_path):
    (tmp_path / "columns.yaml").write_text("sets:\n  bookings: [version, booked_by]\n")
    try:
        sets = load_column_sets(tmp_path, refresh=True)
        assert sets["bookings"] == ["version", "booked_by"]
        assert sets["release_stories"] == default_column_sets()["release_stories"]
    finally:
        load_column_sets(refresh=True)


def test_unreadable_yaml_falls_back(tmp_path):
    (tmp_path / "columns.yaml").write_text("sets: [unclosed\n")
    try:
        assert load_column_sets(tmp_path, refresh=True) == default_column_sets()
    finally:
        load_column_sets(refresh=True)
