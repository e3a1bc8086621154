from release_app.core.mappers import (
    change_requests_to_dataframe,
    map_change_request,
    map_dependency_epic,
    map_dependency_story,
    map_epic,
    map_story,
    stories_to_dataframe,
)
from release_app.versioning.flagging import should_flag
from release_app.versioning.version import Version


def test_map_story_flattens_fields():
    raw = {
        "key": "VT-1",
        "fields": {
            "summary": "Fix login",
            "status": {"name": "Done"},
            "issuetype": {"name": "Bug"},
            "fixVersions": [{"name": "9.92.3"}, {"name": "9.93.0"}],
            "customfield_10400": {"displayName": "Rae"},
            "customfield_16068": [{"value": "Internal"}],
            "customfield_13235": [{"value": "Acme"}, {"value": " "}],
            "customfield_10115": 3,
            "customfield_10014": "VT-100",
            "customfield_16369": [{"value": "Payments"}],
        },
    }
    story = map_story(raw)
    assert story.fix_versions == ["9.92.3", "9.93.0"]
    assert story.responsible_for_change == "Rae"
    assert story.client_environments == ["Acme"]
    assert story.story_points == 3.0
    assert story.parent == "VT-100"
    assert story.business_projects == ["Payments"]


def test_map_story_tolerates_missing_fields():
    story = map_story({"key": "VT-2", "fields": {}})
    assert story.status is None
    assert story.fix_versions == []
    assert story.story_points is None


def test_map_epic_and_change_request():
    epic = map_epic({"key": "VT-100", "fields": {"summary": "E", "duedate": "2025-06-30"}})
    assert epic.due_date == "2025-06-30"
    assert epic.stories == []

    cm = map_change_request(
        {
            "key": "CM-7",
            "fields": {
                "summary": "Deploy",
                "components": [{"name": "Core"}],
                "fixVersions": [{"name": "9.92.11"}],
                "customfield_13235": [{"value": "Acme"}],
                "customfield_10751": "2025-02-01",
                "reporter": {"displayName": "Sam"},
            },
        }
    )
    assert cm.status == "Unknown"
    assert cm.source_key == "CM-7"
    assert cm.deployed_at == "2025-02-01"
    assert cm.reporter == "Sam"


def test_dependency_mappers():
    epic = map_dependency_epic(
        {
            "key": "OT-1",
            "fields": {
                "status": {"name": "In Progress"},
                "project": {"name": "Other Team"},
                "customfield_12805": [{"value": "Val Team"}],
            },
        }
    )
    assert epic.from_team == "Other Team"
    assert epic.depends_on == ["Val Team"]

    story = map_dependency_story(
        {"key": "OT-2", "fields": {"parent": {"key": "OT-1"}, "customfield_10016": 5, "status": {"name": "Closed"}}}
    )
    assert story.parent == "OT-1"
    assert story.story_points == 5.0


def test_frames_join_lists_and_sort_by_date():
    stories = stories_to_dataframe([map_story({"key": "VT-1", "fields": {"fixVersions": [{"name": "1.0.0"}, {"name": "1.0.1"}]}})])
    assert stories.loc[0, "fix_versions"] == "1.0.0, 1.0.1"

    cms = change_requests_to_dataframe(
        [
            map_change_request({"key": "CM-1", "fields": {"customfield_10751": "2025-01-01"}}),
            map_change_request({"key": "CM-2", "fields": {"customfield_10751": "2025-03-01"}}),
            map_change_request({"key": "CM-3", "fields": {}}),
        ]
    )
    assert list(cms["key"]) == ["CM-2", "CM-1", "CM-3"]


def test_fix_version_names_are_not_trimmed():
    raw = {
        "key": "VT-3",
        "fields": {"fixVersions": [{"name": "9.92.3 "}, {"name": "9.93.0"}, {"name": ""}, {"id": "1"}]},
    }
    story = map_story(raw)
    assert story.fix_versions == ["9.92.3 ", "9.93.0"]
    cm = map_change_request({"key": "CM-1", "fields": {"fixVersions": [{"name": " 9.92.11"}]}})
    assert cm.fix_versions == [" 9.92.11"]


def test_padded_fix_version_does_not_count_as_hotfix():
    story = map_story({"key": "VT-4", "fields": {"fixVersions": [{"name": "9.92.3 "}]}})
    assert should_flag(story.fix_versions, Version(9, 93, 0)) is False
