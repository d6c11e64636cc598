import numpy
import pytest
from numpy.testing import assert_allclose

from patristic.phylo.util import (
    distance_dict_to_2D,
    lookup_symmetric_dict,
    names_from_distance_dict,
    validated_distances,
)


@pytest.fixture
def dists():
    return {("a", "b"): 1.0, ("a", "c"): 2.0, ("c", "b"): 3.0}


def test_names_from_distance_dict(dists):
    assert names_from_distance_dict(dists) == ["a", "b", "c"]


def test_lookup_symmetric_dict(dists):
    assert lookup_symmetric_dict(dists, "b", "c") == 3.0
    assert lookup_symmetric_dict(dists, "c", "b") == 3.0
    with pytest.raises(KeyError):
        lookup_symmetric_dict(dists, "a", "d")
    dists["b", "a"] = 4.0
    with pytest.raises(ValueError):
        lookup_symmetric_dict(dists, "a", "b")


def test_lookup_ignores_nan(dists):
    dists["b", "a"] = numpy.nan
    assert lookup_symmetric_dict(dists, "a", "b") == 1.0


def test_distance_dict_to_2D(dists):
    names, got = distance_dict_to_2D(dists)
    assert names == ["a", "b", "c"]
    assert_allclose(got, [[0, 1, 2], [1, 0, 3], [2, 3, 0]])
    names, got = distance_dict_to_2D(dists, names=["c", "b", "a"])
    assert names == ["c", "b", "a"]
    assert_allclose(got, [[0, 3, 2], [3, 0, 1], [2, 1, 0]])


def test_validated_distances():
    labels, got = validated_distances([[0, 1], [1, 0]])
    assert labels == ["0", "1"]
    assert got.dtype == float
    labels, _ = validated_distances([[0, 1], [1, 0]], labels=[7, "x"])
    assert labels == ["7", "x"]
    labels, got = validated_distances({("x", "y"): 2})
    assert labels == ["x", "y"]
    assert_allclose(got, [[0, 2], [2, 0]])


def test_validated_distances_tolerates_rounding():
    value = 0.1 + 0.2
    labels, got = validated_distances([[0, value], [0.3, 0]])
    assert got[0, 1] == value


@pytest.mark.parametrize(
    ("matrix", "match"),
    [
        ([1, 2], "square"),
        ([[0, 1, 2], [1, 0, 2]], "square"),
        ([[0]], "at least 2"),
        ([[0, numpy.nan], [numpy.nan, 0]], "finite"),
        ([[0, -1], [-1, 0]], "non-negative"),
        ([[0, 1], [1, 2]], "diagonal"),
        ([[0, 1], [1.1, 0]], "symmetric"),
    ],
)
def test_validated_distances_invalid(matrix, match):
    with pytest.raises(ValueError, match=match):
        validated_distances(matrix)


def test_validated_distances_label_count():
    with pytest.raises(ValueError, match="labels"):
        validated_distances([[0, 1], [1, 0]], labels=["a", "b", "c"])
