import itertools

from release_app.versioning.version import (
    Version,
    available_release_versions,
    compare_versions,
    is_release_point,
    parse_version,
    parse_versions,
)


def test_parse_valid_and_invalid():
    assert parse_version("9.92.3") == Version(9, 92, 3)
    for junk in ("Backlog", "", "9.92", "9.92.3.1", "v9.92.3", " 9.92.3", "9.92.3\n", "9.-1.0", "9.x.0"):
        assert parse_version(junk) is None, junk
    assert parse_version(None) is None
    assert parse_version(9) is None


def test_leading_zeros_normalised():
    assert parse_version("9.092.01") == Version(9, 92, 1)
    assert str(parse_version("09.092.001")) == "9.92.1"


def test_non_ascii_digits_rejected():
    # Arabic-Indic digits match \d without re.ASCII
    assert parse_version("٩.92.1") is None


def test_ordering_is_numeric():
    assert Version(9, 92, 10) > Version(9, 92, 9)
    assert Version(9, 100, 0) > Version(9, 99, 99)
    assert Version(10, 0, 0) > Version(9, 999, 999)
    assert compare_versions(Version(1, 2, 3), Version(1, 2, 3)) == 0
    assert compare_versions(Version(1, 2, 3), Version(1, 3, 0)) == -1
    assert compare_versions(Version(2, 0, 0), Version(1, 9, 9)) == 1


SAMPLE = [
    Version(0, 0, 0),
    Version(1, 2, 3),
    Version(1, 3, 0),
    Version(1, 10, 0),
    Version(2, 0, 0),
    Version(9, 92, 9),
    Version(9, 92, 10),
    Version(9, 100, 0),
]


def test_compare_is_antisymmetric():
    for a, b in itertools.product(SAMPLE, repeat=2):
        assert compare_versions(a, b) == -compare_versions(b, a), (a, b)
        assert (compare_versions(a, b) == 0) == (a == b)


def test_compare_is_transitive():
    for a, b, c in itertools.product(SAMPLE, repeat=3):
        if compare_versions(a, b) <= 0 and compare_versions(b, c) <= 0:
            assert compare_versions(a, c) <= 0, (a, b, c)


def test_release_point_and_helpers():
    assert is_release_point(Version(9, 93, 0))
    assert not is_release_point(Version(9, 93, 1))
    v = Version(9, 92, 10)
    assert v.next_patch() == Version(9, 92, 11)
    assert v.base_release() == Version(9, 92, 0)
    assert v.line == (9, 92)


def test_parse_versions_skips_junk():
    assert parse_versions(["9.1.0", "Backlog", None, "9.1.2"]) == [Version(9, 1, 0), Version(9, 1, 2)]
    assert parse_versions(None) == []


def test_available_release_versions():
    tags = ["9.90.0", "9.93.0", "9.92.4", "9.91.0", "9.93.0", "Backlog", "9.92.0", "8.5.0"]
    assert available_release_versions(tags, limit=3) == ["9.93.0", "9.92.0", "9.91.0"]
    assert available_release_versions(tags, limit=0) == []
