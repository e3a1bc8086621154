from release_app.analytics.dependencies import (
    build_dependency_report,
    dependency_epics_frame,
    dependency_field_options,
    dependency_links_frame,
)
from release_app.core.models import DependencyEpicModel, StoryModel


def _epic(key, depends_on=(), from_team="Val Team"):
    return DependencyEpicModel(
        key=key, summary=key, status="In Progress", due_date=None, depends_on=list(depends_on), from_team=from_team
    )


def test_report_groups_and_progress():
    outgoing = [_epic("VT-1", ["Data", "Infra"]), _epic("VT-2", ["Data"])]
    incoming = [_epic("DT-1", from_team="Data")]
    stories = [
        StoryModel(key="s1", summary=None, status="Done", story_points=3, parent="VT-1"),
        StoryModel(key="s2", summary=None, status="In Progress", story_points=1, parent="VT-1"),
        StoryModel(key="s3", summary=None, status="Closed", story_points=None, parent="DT-1"),
        StoryModel(key="s4", summary=None, status="Open", story_points=None, parent="DT-1"),
    ]
    report = build_dependency_report("2025 Q3", outgoing, incoming, stories)

    assert {k: [e.key for e in v] for k, v in report.outgoing_by_team.items()} == {
        "Data": ["VT-1", "VT-2"],
        "Infra": ["VT-1"],
    }
    assert list(report.incoming_by_team) == ["Data"]
    assert report.progress_for("VT-1").progress_percent == 75
    assert report.progress_for("DT-1").to_dict() == {"storyCount": 2, "storiesDone": 1, "progressPercent": 50}
    assert report.progress_for("VT-2").progress_percent == 0

    links = dependency_links_frame(report, "Val Team")
    assert links.to_dict("records") == [
        {"source": "Val Team", "target": "Data", "epics": 2, "direction": "outgoing"},
        {"source": "Val Team", "target": "Infra", "epics": 1, "direction": "outgoing"},
        {"source": "Data", "target": "Val Team", "epics": 1, "direction": "incoming"},
    ]
    epics = dependency_epics_frame(report, "outgoing")
    assert list(epics["teams"]) == ["Data, Infra", "Data"]


def test_field_options():
    options = dependency_field_options([("2025 Q1", ["Data"]), ("2025 Q3", ["Infra", "Data"]), (None, [])])
    assert options == {"quarters": ["2025 Q3", "2025 Q1"], "teams": ["Data", "Infra"]}
