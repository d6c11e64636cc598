"""Neighbour Joining phylogenetic tree estimation.

The algorithm of Saitou and Nei, with the search for the pair to join pruned
as proposed by Studier and Keppler. Each row of the distance matrix keeps its
columns sorted by distance, so a row can be abandoned once no remaining
column can improve on the best pair found so far. Only the row holding a
newly joined node is re-sorted after each join.

By default negative branch lengths are retained.
"""

from __future__ import annotations

import numpy

from patristic.core.tree import TreeNode
from patristic.phylo import nj_numba
from patristic.phylo.util import validated_distances
from patristic.util import progress_display as UI


class _NodeMaker:
    """creates tip nodes and sets lengths on joined nodes, keyed by label
    index. Indices below the number of taxa are tips."""

    def __init__(self, labels, zero_negative: bool) -> None:
        self.labels = labels
        self.zero_negative = zero_negative
        self.nodes: dict[int, TreeNode] = {}

    def __call__(self, label_index: int, length: float) -> TreeNode:
        length = float(length)
        if self.zero_negative:
            length = max(0.0, length)
        if label_index < len(self.labels):
            node = TreeNode(self.labels[label_index], length=length)
            self.nodes[label_index] = node
        else:
            node = self.nodes[label_index]
            node.length = length
        return node


@UI.display_wrap
def nj(matrix, labels=None, zero_negative: bool = False, ui=None) -> TreeNode:
    """returns the neighbour joining tree for a distance matrix

    Parameters
    ----------
    matrix
        a symmetric 2D array like of non-negative distances with a zero
        diagonal, or a dict of {(name1, name2): distance}
    labels
        tip names for each row of matrix. Defaults to the row indices as
        strings, or for a dict, the names in the keys.
    zero_negative
        set negative branch lengths to 0
    show_progress
        display a progress bar

    Returns
    -------
    The root of a bifurcating tree. The final pair joined are the children
    of the root, each with half the distance between them.

    Notes
    -----
    Ties between candidate pairs are resolved in favour of the first found,
    scanning rows in index order, so the result depends on the row order.
    """
    labels, dists = validated_distances(matrix, labels)
    num = len(labels)
    make_node = _NodeMaker(labels, zero_negative)
    if num == 2:
        half = dists[0, 1] / 2
        tree = TreeNode(children=[make_node(0, half), make_node(1, half)])
        return tree.fix_parenthood().fix_distances()

    dists = numpy.ascontiguousarray(dists, dtype=numpy.float64)
    removed = numpy.zeros(num, dtype=numpy.bool_)
    sorted_dists = numpy.zeros((num, num - 1), dtype=numpy.float64)
    sorted_cols = numpy.zeros((num, num - 1), dtype=numpy.int64)
    sorted_len = numpy.zeros(num, dtype=numpy.int64)
    for i in range(num):
        nj_numba.sort_row(dists, i, removed, sorted_dists, sorted_cols, sorted_len)

    sums = nj_numba.row_sums(dists)
    sum_max = max(0.0, float(sums.max()))

    # current row index to label index, joined nodes get labels from num
    index_to_label = list(range(num))
    next_label = num
    num_active = num
    for _ in ui.series(range(num - 2), noun="join"):
        i, j = nj_numba.search(
            dists,
            sorted_dists,
            sorted_cols,
            sorted_len,
            sums,
            removed,
            num_active,
            sum_max,
        )
        d_ij = dists[i, j]
        d1 = 0.5 * d_ij + (sums[i] - sums[j]) / (2 * num_active - 4)
        d2 = d_ij - d1

        node1 = make_node(index_to_label[i], d1)
        node2 = make_node(index_to_label[j], d2)
        make_node.nodes[next_label] = TreeNode(children=[node1, node2])

        sum_max = nj_numba.join(dists, sums, removed, i, j)
        nj_numba.sort_row(dists, j, removed, sorted_dists, sorted_cols, sorted_len)
        sorted_len[i] = 0
        num_active -= 1

        index_to_label[i] = -1
        index_to_label[j] = next_label
        next_label += 1

    i, j = numpy.flatnonzero(~removed)[:2]
    half = dists[i, j] / 2
    node1 = make_node(index_to_label[i], half)
    node2 = make_node(index_to_label[j], half)
    tree = TreeNode(children=[node1, node2])
    tree.fix_parenthood()
    return tree.fix_distances()


parse_matrix = nj
