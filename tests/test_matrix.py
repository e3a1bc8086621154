from release_app.core.models import ChangeRequestModel
from release_app.versioning.matrix import build_matrix


def _cm(key, versions, clients=("Acme",), components=("Core",), date="2025-01-01"):
    return ChangeRequestModel(
        key=key,
        summary=key,
        status="Done",
        components=list(components),
        fix_versions=list(versions),
        client_environments=list(clients),
        target_deployment_date=date,
    )


def test_highest_version_wins_with_its_provenance():
    matrix = build_matrix([_cm("CM-1", ["1.2.0"], date="2025-01-01"), _cm("CM-2", ["1.3.0"], date="2025-02-01")])
    cell = matrix.get("Acme", "Core")
    assert str(cell.version) == "1.3.0"
    assert cell.cm_key == "CM-2"
    assert cell.deployed_at == "2025-02-01"


def test_order_does_not_change_value():
    forward = build_matrix([_cm("CM-1", ["1.2.0"]), _cm("CM-2", ["1.3.0"])])
    backward = build_matrix([_cm("CM-2", ["1.3.0"]), _cm("CM-1", ["1.2.0"])])
    assert forward.get("Acme", "Core").version == backward.get("Acme", "Core").version


def test_ties_keep_first_seen():
    matrix = build_matrix([_cm("CM-1", ["1.3.0"]), _cm("CM-2", ["1.3.0"])])
    assert matrix.get("Acme", "Core").cm_key == "CM-1"


def test_cross_product_and_sorted_lists():
    matrix = build_matrix(
        [
            _cm("CM-1", ["2.0.1", "Backlog"], clients=("Globex", "Acme"), components=("UI", "Core")),
            _cm("CM-2", ["Backlog"], clients=("Initech",), components=("Core",)),
        ]
    )
    assert matrix.clients == ["Acme", "Globex", "Initech"]
    assert matrix.components == ["Core", "UI"]
    assert str(matrix.get("Globex", "UI").version) == "2.0.1"
    assert matrix.get("Initech", "Core") is None

    payload = matrix.to_dict()
    assert payload["matrix"]["Acme"]["Core"] == {"version": "2.0.1", "cmKey": "CM-1", "deployedAt": "2025-01-01"}
    assert payload["matrix"]["Initech"] == {}

    frame = matrix.to_frame()
    assert list(frame.columns) == ["client", "Core", "UI"]
    assert frame.set_index("client").loc["Initech", "Core"] == ""


def test_empty_records():
    matrix = build_matrix([])
    assert matrix.to_dict() == {"matrix": {}, "components": [], "clients": []}
    assert matrix.to_frame().empty
