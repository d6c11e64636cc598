"""Patristic distance calculations on an existing tree.

The patristic distance between two nodes is the sum of edge lengths along
the path connecting them through their most recent common ancestor (MRCA).
Nodes may be given as TreeNode instances, or where noted, as names that are
looked up within the tree.
"""

from __future__ import annotations

import numpy

from patristic.core.tree import TreeError, TreeNode


def get_mrca(a: TreeNode, b: TreeNode) -> TreeNode:
    """returns the first node, going upward from a (inclusive), that is b
    or an ancestor of b

    Raises
    ------
    TreeError if a and b are not in the same tree
    """
    lineage = {id(node) for node in b.get_ancestors(include_self=True)}
    curr: TreeNode | None = a
    while curr is not None:
        if id(curr) in lineage:
            return curr
        curr = curr.parent
    msg = "No common ancestor found, the nodes are in different trees."
    raise TreeError(msg)


def depth_of(ancestor: TreeNode, descendant: TreeNode | str) -> float:
    """sum of lengths from descendant up to ancestor, 0 when they are the
    same node

    Parameters
    ----------
    ancestor
        the node to measure from
    descendant
        a node, or the name of a node, within ancestor

    Raises
    ------
    TreeError if descendant is not within ancestor
    """
    if isinstance(descendant, str):
        descendant = ancestor._in_subtree(descendant)

    total = 0.0
    curr = descendant
    while curr is not ancestor:
        if curr.parent is None:
            msg = f"{descendant.name!r} is not a descendant of {ancestor.name!r}"
            raise TreeError(msg)
        total += curr.length
        curr = curr.parent
    return total


def distance_between(a: TreeNode, b: TreeNode) -> float:
    """the patristic distance between a and b"""
    if a is b:
        return 0.0
    mrca = get_mrca(a, b)
    return depth_of(mrca, a) + depth_of(mrca, b)


def path(source: TreeNode, target: TreeNode) -> list[TreeNode]:
    """the nodes from source up to the MRCA, then down to target"""
    mrca = get_mrca(source, target)
    up = []
    curr = source
    while curr is not mrca:
        up.append(curr)
        curr = curr.parent
    down = []
    curr = target
    while curr is not mrca:
        down.append(curr)
        curr = curr.parent
    return [*up, mrca, *reversed(down)]


def sources(node: TreeNode, cousin: TreeNode) -> bool:
    """whether node is closer to the MRCA of node and cousin than cousin"""
    mrca = get_mrca(node, cousin)
    return depth_of(mrca, node) < depth_of(mrca, cousin)


def targets(node: TreeNode, cousin: TreeNode) -> bool:
    """whether cousin is closer to the MRCA of node and cousin than node"""
    mrca = get_mrca(node, cousin)
    return depth_of(mrca, node) > depth_of(mrca, cousin)


def to_matrix(tree: TreeNode) -> dict[str, numpy.ndarray | list[str]]:
    """pairwise patristic distances between the tips of tree

    Returns
    -------
    {"matrix": symmetric 2D array with zero diagonal, "ids": tip names},
    tips in traversal order
    """
    tips = tree.get_leaves()
    num = len(tips)
    matrix = numpy.zeros((num, num), dtype=float)
    for i in range(num):
        for j in range(i + 1, num):
            matrix[i, j] = matrix[j, i] = tips[i].distance_to(tips[j])
    return {"matrix": matrix, "ids": [tip.name for tip in tips]}
