import pytest
from numpy.testing import assert_allclose

from patristic import make_tree
from patristic.core.tree import TreeError
from patristic.phylo.patristic import (
    depth_of,
    distance_between,
    get_mrca,
    path,
    to_matrix,
)


@pytest.fixture
def tree():
    return make_tree("(A:1,B:2,(C:3,D:4)E:5)root;")


@pytest.fixture
def nodes(tree):
    return {n.name: n for n in tree.preorder()}


def test_get_mrca(tree, nodes):
    assert get_mrca(nodes["C"], nodes["D"]) is nodes["E"]
    assert get_mrca(nodes["A"], nodes["C"]) is tree
    assert get_mrca(nodes["C"], nodes["E"]) is nodes["E"]
    assert get_mrca(nodes["E"], nodes["C"]) is nodes["E"]
    assert get_mrca(nodes["C"], nodes["C"]) is nodes["C"]
    assert nodes["C"].get_mrca("D") is nodes["E"]


def test_get_mrca_different_trees(nodes):
    other = make_tree("(a,b);")
    with pytest.raises(TreeError):
        get_mrca(nodes["A"], other.get_child("a"))


def test_depth_of(tree, nodes):
    assert depth_of(tree, nodes["C"]) == 8
    assert depth_of(tree, "D") == 9
    assert tree.depth_of("A") == 1
    assert nodes["E"].depth_of("C") == 3
    assert depth_of(nodes["C"], nodes["C"]) == 0
    with pytest.raises(TreeError):
        depth_of(nodes["E"], nodes["A"])
    with pytest.raises(TreeError):
        nodes["E"].depth_of("A")


@pytest.mark.parametrize(
    ("a", "b", "expect"),
    [
        ("C", "D", 7),
        ("A", "C", 9),
        ("A", "B", 3),
        ("B", "D", 11),
        ("E", "A", 6),
        ("C", "root", 8),
        ("C", "C", 0),
    ],
)
def test_distance_between(tree, nodes, a, b, expect):
    assert distance_between(nodes[a], nodes[b]) == expect
    assert distance_between(nodes[b], nodes[a]) == expect
    assert tree.distance_between(a, b) == expect
    assert nodes[a].distance_to(b) == expect


def test_distance_triangle(tree, nodes):
    """distances via the MRCA are no shorter than the direct distance"""
    tips = [nodes[n] for n in "ABCD"]
    for x in tips:
        for y in tips:
            for z in tips:
                direct = distance_between(x, z)
                assert direct <= distance_between(x, y) + distance_between(y, z)


def test_path(tree, nodes):
    got = [n.name for n in path(nodes["A"], nodes["C"])]
    assert got == ["A", "root", "E", "C"]
    got = [n.name for n in nodes["D"].path("C")]
    assert got == ["D", "E", "C"]
    got = [n.name for n in nodes["C"].path("C")]
    assert got == ["C"]
    got = [n.name for n in nodes["E"].path("D")]
    assert got == ["E", "D"]


def test_sources_targets(nodes):
    assert nodes["A"].sources("C")
    assert not nodes["A"].targets("C")
    assert nodes["C"].targets("A")
    assert not nodes["C"].sources("A")
    # equidistant from the MRCA
    tree = make_tree("(a:1,b:1);")
    assert not tree.get_child("a").sources("b")
    assert not tree.get_child("a").targets("b")


def test_to_matrix(tree):
    got = to_matrix(tree)
    assert got["ids"] == ["A", "B", "C", "D"]
    expect = [
        [0, 3, 9, 10],
        [3, 0, 10, 11],
        [9, 10, 0, 7],
        [10, 11, 7, 0],
    ]
    assert_allclose(got["matrix"], expect)
    assert_allclose(got["matrix"], got["matrix"].T)


def test_to_matrix_subtree(nodes):
    got = nodes["E"].to_matrix()
    assert got["ids"] == ["C", "D"]
    assert_allclose(got["matrix"], [[0, 7], [7, 0]])
