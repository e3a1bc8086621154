import pytest

from release_app.core.errors import ValidationError
from release_app.core.models import StoryModel
from release_app.versioning.flagging import (
    find_missing_issues,
    issues_in_release,
    require_release_target,
    should_flag,
)
from release_app.versioning.version import Version

TARGET = Version(9, 93, 0)


def _story(key, versions):
    return StoryModel(key=key, summary=key, status="Done", fix_versions=list(versions))


def test_hotfixed_into_earlier_line_is_flagged():
    assert should_flag({"9.91.0", "9.92.3"}, TARGET) is True


def test_target_tag_present_is_not_flagged():
    assert should_flag({"9.91.0", "9.92.3", "9.93.0"}, TARGET) is False


def test_release_only_is_not_flagged():
    assert should_flag({"9.93.0"}, TARGET) is False
    assert should_flag({"9.90.0", "9.91.0"}, TARGET) is False


def test_later_release_carries_hotfix_forward():
    # 9.92.0 release on or after the hotfix line clears it
    assert should_flag({"9.92.3", "9.92.0"}, TARGET) is False
    # a release older than the hotfix line does not
    assert should_flag({"9.92.3", "9.90.0"}, TARGET) is True


def test_hotfix_on_target_line_or_later_is_ignored():
    assert should_flag({"9.93.2"}, TARGET) is False
    assert should_flag({"9.94.1"}, TARGET) is False


def test_lower_majors_are_ignored():
    assert should_flag({"8.92.3"}, TARGET) is False
    assert should_flag({"8.92.3", "8.90.0"}, TARGET) is False
    # an older major release does not clear a hotfix on the target major
    assert should_flag({"9.92.3", "8.99.0"}, TARGET) is True


def test_higher_majors_count_by_minor():
    assert should_flag({"10.50.3"}, TARGET) is True
    assert should_flag({"10.1.1"}, TARGET) is True
    assert should_flag({"9.92.3", "10.92.0"}, TARGET) is False
    assert should_flag({"9.92.3", "10.0.0"}, TARGET) is True
    assert should_flag({"10.95.2"}, TARGET) is False


FLAGGED_SETS = [
    {"9.92.3"},
    {"9.91.0", "9.92.3"},
    {"9.90.2", "9.89.0", "Backlog"},
    {"10.50.3"},
    {"9.92.3", "8.99.0"},
]


@pytest.mark.parametrize("tags", FLAGGED_SETS)
def test_target_tag_always_clears_flag(tags):
    assert should_flag(tags, TARGET) is True
    assert should_flag(tags | {str(TARGET)}, TARGET) is False


def test_junk_and_empty_tags():
    assert should_flag(set(), TARGET) is False
    assert should_flag(None, TARGET) is False
    assert should_flag({"Backlog", "", "9.92.3"}, TARGET) is True


def test_hotfix_target_rejected():
    with pytest.raises(ValidationError):
        should_flag({"9.92.3"}, Version(9, 93, 1))


@pytest.mark.parametrize(
    "raw, message",
    [
        (None, "targetVersion is required"),
        ("", "targetVersion is required"),
        ("9.93", "Invalid version format. Expected X.Y.Z"),
        ("9.93.2", "Target version must be a release version (patch must be 0)"),
    ],
)
def test_require_release_target_errors(raw, message):
    with pytest.raises(ValidationError) as exc:
        require_release_target(raw)
    assert str(exc.value) == message


def test_find_missing_issues_keeps_input_order():
    issues = [
        _story("VT-1", ["9.91.0", "9.92.3"]),
        _story("VT-2", ["9.93.0", "9.92.1"]),
        _story("VT-3", ["9.90.2"]),
    ]
    missing = find_missing_issues(issues, TARGET)
    assert [s.key for s in missing] == ["VT-1", "VT-3"]
    assert missing[0].fix_versions == ["9.91.0", "9.92.3"]


def test_issues_in_release_matches_by_value():
    issues = [_story("VT-1", ["9.093.0"]), _story("VT-2", ["9.93.1"]), _story("VT-3", ["9.93.0", "x"])]
    assert [s.key for s in issues_in_release(issues, TARGET)] == ["VT-1", "VT-3"]
