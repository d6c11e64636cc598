import numpy
import pytest
from numpy.testing import assert_allclose

from patristic import load_distances, make_tree, nj, parse_matrix
from patristic.core.tree import TreeNode
from patristic.phylo import nj_numba


def _random_tree(num_tips: int, seed: int) -> TreeNode:
    """a random bifurcating tree with positive lengths"""
    rng = numpy.random.default_rng(seed)
    tree = make_tree(tip_names=["t0", "t1"])
    while len(tree.get_leaves()) < num_tips:
        leaves = tree.get_leaves()
        tip = leaves[int(rng.integers(len(leaves)))]
        num = len(leaves)
        tip.extend([tip.name, f"t{num}"])
        tip.name = ""
    for node in tree.preorder(include_self=False):
        node.length = float(rng.uniform(0.1, 1.0))
    return tree.fix_distances()


def _assert_same_distances(got: TreeNode, expect: dict):
    got = got.to_matrix()
    assert sorted(got["ids"]) == sorted(expect["ids"])
    order = [got["ids"].index(name) for name in expect["ids"]]
    assert_allclose(got["matrix"][numpy.ix_(order, order)], expect["matrix"])


def test_nj_four_taxa(four_taxa):
    """a known additive matrix gives the expected tree"""
    names, dists = four_taxa
    tree = nj(dists, labels=names)
    assert tree.get_newick() == "(((A:2,B:3):3,C:4):2,D:2);"
    assert tree.get_descendant("A").parent is tree.get_descendant("B").parent
    _assert_same_distances(tree, {"ids": names, "matrix": numpy.array(dists)})


def test_nj_bifurcating(four_taxa):
    names, dists = four_taxa
    tree = nj(dists, labels=names)
    assert len(tree.children) == 2
    for node in tree.preorder():
        assert len(node.children) in (0, 2)
        assert node.children == [] or all(c.parent is node for c in node.children)
    assert tree.value == 7
    assert tree.is_consistent()


def test_nj_default_labels(four_taxa):
    _, dists = four_taxa
    tree = nj(numpy.array(dists))
    assert sorted(tree.get_tip_names()) == ["0", "1", "2", "3"]


def test_nj_distance_dict(four_taxa):
    names, dists = four_taxa
    data = {
        (names[i], names[j]): dists[i][j]
        for i in range(len(names))
        for j in range(i + 1, len(names))
    }
    assert nj(data).get_newick() == "(((A:2,B:3):3,C:4):2,D:2);"


def test_nj_two_taxa():
    tree = nj([[0, 4], [4, 0]], labels=["x", "y"])
    assert tree.get_newick() == "(x:2,y:2);"
    assert tree.get_child("x").parent is tree


def test_nj_ties_are_deterministic():
    """with every pair tied, the first pair found is joined"""
    dists = numpy.ones((4, 4)) - numpy.eye(4)
    expect = "(((A:0.5,B:0.5),C:0.5):0.25,D:0.25);"
    for _ in range(3):
        assert nj(dists, labels="ABCD").get_newick() == expect


def test_nj_negative_lengths():
    dists = [[0, 10, 1], [10, 0, 1], [1, 1, 0]]
    tree = nj(dists, labels=["A", "B", "C"])
    assert tree.get_newick() == "(B:2.5,(A:5,C:-4):2.5);"
    tree = nj(dists, labels=["A", "B", "C"], zero_negative=True)
    assert tree.get_descendant("C").length == 0
    assert tree.get_newick() == "(B:2.5,(A:5,C):2.5);"


@pytest.mark.parametrize(
    "dists",
    [
        [[0, 1, 2], [1, 0, 3]],
        [0, 1, 2],
        [[0]],
        [[0, -1], [-1, 0]],
        [[0, numpy.nan], [numpy.nan, 0]],
        [[0, numpy.inf], [numpy.inf, 0]],
        [[1, 2], [2, 0]],
        [[0, 2], [3, 0]],
    ],
)
def test_nj_invalid_matrix(dists):
    with pytest.raises(ValueError):
        nj(dists)


def test_nj_label_mismatch(four_taxa):
    _, dists = four_taxa
    with pytest.raises(ValueError):
        nj(dists, labels=["A", "B"])


def test_nj_progress(four_taxa):
    names, dists = four_taxa
    got = nj(dists, labels=names, show_progress=False)
    assert got.get_newick() == nj(dists, labels=names).get_newick()


def test_parse_matrix_alias():
    assert parse_matrix is nj


def test_nj_primates(DATA_DIR):
    names, dists = load_distances(DATA_DIR / "primates.dist")
    tree = nj(dists, labels=names)
    expect = make_tree(
        "((Human:1,Chimpanzee:2):3,Gorilla:4,(Orangutan:5,Gibbon:6):7);",
    ).to_matrix()
    _assert_same_distances(tree, expect)


@pytest.mark.parametrize(("num_tips", "seed"), [(8, 0), (12, 7)])
def test_nj_recovers_additive(num_tips, seed):
    expect = _random_tree(num_tips, seed).to_matrix()
    tree = nj(expect["matrix"], labels=expect["ids"])
    _assert_same_distances(tree, expect)


@pytest.mark.slow
def test_nj_recovers_additive_large():
    expect = _random_tree(200, 13).to_matrix()
    tree = nj(expect["matrix"], labels=expect["ids"])
    _assert_same_distances(tree, expect)


def test_row_sums():
    dists = numpy.array([[0, 1, 2], [1, 0, 3], [2, 3, 0]], dtype=float)
    assert_allclose(nj_numba.row_sums(dists), [3, 4, 5])


def test_sort_row():
    dists = numpy.array(
        [[0, 4, 2, 2], [4, 0, 1, 3], [2, 1, 0, 5], [2, 3, 5, 0]],
        dtype=float,
    )
    removed = numpy.array([False, False, False, True])
    sorted_dists = numpy.zeros((4, 3))
    sorted_cols = numpy.zeros((4, 3), dtype=numpy.int64)
    sorted_len = numpy.zeros(4, dtype=numpy.int64)
    nj_numba.sort_row(dists, 0, removed, sorted_dists, sorted_cols, sorted_len)
    assert sorted_len[0] == 2
    assert list(sorted_cols[0, :2]) == [2, 1]
    assert_allclose(sorted_dists[0, :2], [2, 4])
    # ties keep column order
    removed[:] = False
    nj_numba.sort_row(dists, 0, removed, sorted_dists, sorted_cols, sorted_len)
    assert list(sorted_cols[0]) == [2, 3, 1]


def test_join():
    dists = numpy.array(
        [[0, 5, 9, 9], [5, 0, 10, 10], [9, 10, 0, 8], [9, 10, 8, 0]],
        dtype=float,
    )
    sums = nj_numba.row_sums(dists)
    removed = numpy.zeros(4, dtype=numpy.bool_)
    got = nj_numba.join(dists, sums, removed, 0, 1)
    assert removed[0]
    assert_allclose(dists[1, 2:], [7, 7])
    assert_allclose(dists[2:, 1], [7, 7])
    assert_allclose(sums[1:], [14, 15, 15])
    assert sums[0] == 0
    # the maximum includes the value row 1 held before it was replaced
    assert got == 20
