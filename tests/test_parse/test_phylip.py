import pytest
from numpy.testing import assert_allclose

from patristic import load_distances
from patristic.format.phylip import distances_to_phylip
from patristic.parse.phylip import parse_phylip_dists
from patristic.parse.record import RecordError


def test_parse_phylip_dists():
    data = ["3", "a  0 1 2", "b  1 0 3", "c  2 3 0"]
    names, dists = parse_phylip_dists(data)
    assert names == ["a", "b", "c"]
    assert_allclose(dists, [[0, 1, 2], [1, 0, 3], [2, 3, 0]])


def test_parse_wrapped_rows():
    """rows may continue on following lines, blank lines are ignored"""
    data = "2\n\nlong_name 0\n  0.5\nb 0.5 0\n".splitlines()
    names, dists = parse_phylip_dists(data)
    assert names == ["long_name", "b"]
    assert_allclose(dists, [[0, 0.5], [0.5, 0]])


@pytest.mark.parametrize(
    "data",
    [
        [],
        ["x"],
        ["0"],
        ["2", "a 0 1"],
        ["2", "a 0 1", "b 1"],
        ["2", "a 0 one", "b 1 0"],
        ["2", "a 0 1", "b 1 0", "c"],
    ],
)
def test_parse_invalid(data):
    with pytest.raises(RecordError):
        parse_phylip_dists(data)


def test_load_distances(DATA_DIR):
    names, dists = load_distances(DATA_DIR / "primates.dist")
    assert names == ["Human", "Chimpanzee", "Gorilla", "Orangutan", "Gibbon"]
    assert dists.shape == (5, 5)
    assert dists[0, 4] == 17
    assert_allclose(dists, dists.T)


def test_distances_to_phylip():
    got = distances_to_phylip(["a", "bb"], [[0, 1.5], [1.5, 0]])
    assert got == "2\na   0 1.5\nbb  1.5 0\n"
    names, dists = parse_phylip_dists(got.splitlines())
    assert names == ["a", "bb"]
    assert_allclose(dists, [[0, 1.5], [1.5, 0]])


@pytest.mark.parametrize("names", [["a"], ["a", ""], ["a", "b c"]])
def test_distances_to_phylip_invalid(names):
    with pytest.raises(ValueError):
        distances_to_phylip(names, [[0, 1], [1, 0]])
