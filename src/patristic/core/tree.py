"""Classes for storing and manipulating rooted, weighted trees.

A tree is a set of TreeNode instances (branches), each owning an ordered list
of children and holding a non-owning reference to its parent. Every node
carries the length of the edge connecting it to its parent.

Derived fields, recomputed by TreeNode.fix_distances():
    -  depth: number of edges from the root
    -  height: number of edges to the furthest descendant tip
    -  root_distance: sum of lengths from the root
    -  value: number of nodes in the subtree (other passes, such as
       count(), sum() and normalize(), overwrite it with their own
       accumulation)

Definition of relevant terms or abbreviations:
    -  edge: also known as a branch on a tree.
    -  tip: a node with no children, also called a leaf
    -  MRCA: most recent common ancestor
    -  patristic distance: the sum of edge lengths on the path connecting
       two nodes
"""

from __future__ import annotations

import json
import math
import uuid
from collections import deque
from collections.abc import Mapping
from copy import deepcopy
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any

from patristic._version import __version__
from patristic.format.newick import format_node
from patristic.parse.newick import parse_string as newick_parse_string
from patristic.util.deserialise import register_deserialiser
from patristic.util.io import atomic_write, get_format_suffixes, open_
from patristic.util.misc import get_object_provenance
from patristic.util.warning import deprecated

if TYPE_CHECKING:  # pragma: no cover
    import os
    import pathlib
    from collections.abc import Callable, Generator, Iterable, Iterator, Sequence

    import numpy
    from typing_extensions import Self


# branches shorter than this are merged by TreeNode.consolidate()
CONSOLIDATE_THRESHOLD = 0.0005


class TreeError(Exception):
    pass


def _join_names(first: str, second: str) -> str:
    """joins non-empty names with '+'"""
    return "+".join(name for name in (first, second) if name)


class TreeNode:
    """Store information about a tree node. Mutable.

    Parameters:
        name: label for the node, may be empty.
        length: length of the edge to the parent.
        children: list of the node's children.
        parent: parent to this node
        params: dict containing arbitrary parameters for the node.
    """

    __slots__ = (
        "_guid",
        "_parent",
        "children",
        "depth",
        "height",
        "length",
        "name",
        "params",
        "root_distance",
        "value",
    )

    def __init__(
        self,
        name: str | None = "",
        length: float | None = 0.0,
        children: Iterable[Self | str] | None = None,
        parent: Self | None = None,
        params: dict[str, Any] | None = None,
    ) -> None:
        self.name = "" if name is None else str(name)
        self.length = 0.0 if length is None else float(length)
        self.params = params or {}
        self.depth = 0
        self.height = 0
        self.root_distance = 0.0
        self.value = 1.0
        self._guid = uuid.uuid4().hex
        self._parent = None
        self.children: list[Self] = []
        if children:
            self.extend(children)
        if parent is not None:
            parent.add_child(self)

    def __repr__(self) -> str:
        name = f"name={self.name!r}, " if self.name else ""
        return (
            f"{self.__class__.__name__}({name}length={self.length}, "
            f"children={len(self.children)})"
        )

    def __str__(self) -> str:
        """Returns Newick-format string representation of tree."""
        return self.get_newick(with_distances=True)

    def __iter__(self) -> Iterator[Self]:
        """Node iter iterates over the children."""
        return iter(self.children)

    def __len__(self) -> int:
        """Node len returns number of children."""
        return len(self.children)

    def __getitem__(self, i: int) -> Self:
        return self.children[i]

    @property
    def guid(self) -> str:
        """unique identifier of this node instance"""
        return self._guid

    @property
    def source(self) -> str | None:
        return self.params.get("source")

    @source.setter
    def source(self, value: str | None) -> None:
        if value:
            self.params["source"] = str(value)
        else:
            self.params.pop("source", None)

    # methods for building and editing the structure
    def _new_node(self, data: Self | str | Mapping[str, Any] | None) -> Self:
        """returns data as a node of this class"""
        if isinstance(data, TreeNode):
            return data
        if data is None or isinstance(data, str):
            return self.__class__(data)
        if isinstance(data, Mapping):
            name = data.get("name", data.get("id", ""))
            return self.__class__(
                name,
                length=data.get("length", 0.0),
                params=dict(data.get("params", {})),
            )
        msg = f"cannot make a tree node from {type(data)}"
        raise TypeError(msg)

    def _to_self_child(self, i: Self | str | Mapping[str, Any] | None) -> Self:
        """Converts i to self's type, with self as its parent.

        Cleans up refs from i's original parent, but doesn't give self ref to i.
        """
        node = self._new_node(i)
        if node is self or (node.children and node.is_ancestor_of(self)):
            msg = "Cannot attach a node beneath itself or one of its descendants."
            raise TreeError(msg)
        if node._parent is not None:
            node._parent._detach(node)
        node._parent = self
        return node

    def _detach(self, child: Self) -> None:
        """removes child by identity, leaving it as a root"""
        for i, curr in enumerate(self.children):
            if curr is child:
                del self.children[i]
                child._parent = None
                return
        msg = "Node is not a child of this node."
        raise TreeError(msg)

    def _index_of(self, child: Self) -> int:
        for i, curr in enumerate(self.children):
            if curr is child:
                return i
        msg = "Node is not a child of this node."
        raise TreeError(msg)

    def add_child(
        self, child: Self | str | Mapping[str, Any] | None = None, **kwargs: Any
    ) -> Self:
        """attaches child as the last child of self, returns the child

        Parameters
        ----------
        child
            an existing node (which is detached from its current parent), a
            name, a mapping with 'name' or 'id' and 'length' keys, or None for
            a new node constructed from kwargs.
        kwargs
            passed to the constructor when child is None
        """
        if child is None and kwargs:
            child = self.__class__(**kwargs)
        node = self._to_self_child(child)
        self.children.append(node)
        return node

    def extend(self, items: Iterable[Self | str]) -> None:
        """Extends self.children by items, in-place, cleaning up refs."""
        for item in items:
            self.add_child(item)

    def insert(self, index: int, i: Self | str) -> None:
        """Inserts an item at specified position in self.children."""
        self.children.insert(index, self._to_self_child(i))

    def remove_child(self, target: Self | str) -> bool:
        """Removes the child matching target, by identity for a node or by
        name for a str.

        Returns True if node was present, False otherwise.
        """
        for curr in self.children:
            if self._matches(curr, target):
                self._detach(curr)
                return True
        return False

    @property
    def parent(self) -> Self | None:
        """parent of this node"""
        return self._parent

    @parent.setter
    def parent(self, parent: Self | None) -> None:
        if parent is None:
            self.isolate()
        else:
            parent.add_child(self)

    def add_parent(
        self,
        parent: Self | str | Mapping[str, Any] | None = None,
        siblings: Iterable[Self | str] | None = None,
    ) -> Self:
        """inserts a new parent above self, returns self

        Parameters
        ----------
        parent
            the new parent, a node, a name, a mapping or None for an
            unnamed node. It takes the position of self among the children
            of the former parent. If self was a root, the new parent
            becomes the root.
        siblings
            nodes moved from their current parents to be children of the new
            parent, following self
        """
        new_parent = self._new_node(parent)
        siblings = [self._new_node(s) for s in siblings or []]
        lineage = self.get_ancestors(include_self=True)
        if any(new_parent is n for n in lineage) or self.is_ancestor_of(new_parent):
            msg = "The new parent cannot be self, an ancestor or a descendant."
            raise TreeError(msg)
        for sibling in siblings:
            if sibling is new_parent or any(sibling is n for n in lineage):
                msg = "A sibling cannot be the new parent, self or an ancestor of self."
                raise TreeError(msg)

        new_parent.isolate()
        old_parent = self._parent
        if old_parent is not None:
            index = old_parent._index_of(self)
            old_parent.children[index] = new_parent
            new_parent._parent = old_parent
            self._parent = None

        new_parent.add_child(self)
        for sibling in siblings:
            new_parent.add_child(sibling)
        return self

    def excise(self) -> Self:
        """removes self, reattaching its children to its parent in its place

        The length of self is added to each child's length, preserving the
        distance from every descendant to the rest of the tree.

        Returns
        -------
        The former parent. If self was a root with a single child, that
        child is the new root and is returned.

        Raises
        ------
        TreeError if self is a root with no children or more than one child
        """
        parent = self._parent
        children = self.children
        if parent is None:
            if len(children) != 1:
                msg = f"Cannot excise a root with {len(children)} children."
                raise TreeError(msg)
            child = children[0]
            child.length += self.length
            child._parent = None
            self.children = []
            return child

        index = parent._index_of(self)
        for child in children:
            child.length += self.length
            child._parent = parent
        parent.children[index : index + 1] = children
        self.children = []
        self._parent = None
        return parent

    def isolate(self) -> Self:
        """detaches self, and its subtree, from its parent. Returns self."""
        if self._parent is not None:
            self._parent._detach(self)
        return self

    def remove(self) -> Self:
        """detaches self from the tree, returns the root of what remains

        Raises
        ------
        TreeError if self is a root
        """
        if self._parent is None:
            msg = "Cannot remove a root, nothing would remain."
            raise TreeError(msg)
        root = self.get_root()
        self.isolate()
        return root

    def replace(self, replacement: Self | str | Mapping[str, Any]) -> Self:
        """puts replacement at the position of self, detaching self.
        Returns the root of the tree now containing replacement."""
        replacement = self._new_node(replacement)
        if replacement is self:
            return self.get_root()
        if replacement.is_ancestor_of(self):
            msg = "Cannot replace a node with one of its ancestors."
            raise TreeError(msg)

        replacement.isolate()
        parent = self._parent
        if parent is None:
            return replacement

        index = parent._index_of(self)
        parent.children[index] = replacement
        replacement._parent = parent
        self._parent = None
        return replacement.get_root()

    def invert(self) -> Self:
        """swaps self with its parent, which becomes a child of self

        The edge lengths of self and the parent are exchanged so the
        distance between them is unchanged. Self takes the position of the
        parent among the grandparent's children. Returns self.
        """
        parent = self._parent
        if parent is None:
            msg = "Cannot invert a root, it has no parent."
            raise TreeError(msg)

        grandparent = parent._parent
        index = None if grandparent is None else grandparent._index_of(parent)
        self.length, parent.length = parent.length, self.length
        parent._detach(self)
        if grandparent is not None:
            grandparent.children[index] = self
            self._parent = grandparent
        parent._parent = self
        self.children.append(parent)
        return self

    def reroot(self) -> Self:
        """makes self the root by inverting every edge on the path to the
        current root, returns self with distances fixed"""
        path = self.get_ancestors(include_self=True)
        for node in reversed(path[:-1]):
            node.invert()
        return self.fix_distances()

    def fix_distances(self) -> Self:
        """recomputes depth, root_distance, height and value for the whole
        tree containing self, returns self"""
        root = self.get_root()
        for node in root.preorder():
            parent = node._parent
            if parent is None:
                node.depth = 0
                node.root_distance = 0.0
            else:
                node.depth = parent.depth + 1
                node.root_distance = parent.root_distance + node.length

        for node in root.postorder():
            children = node.children
            node.height = 1 + max(c.height for c in children) if children else 0
            node.value = 1.0 + sum(c.value for c in children)
        return self

    def fix_parenthood(self, nonrecursive: bool = False) -> Self:
        """sets the parent of every child to the node that lists it

        Parameters
        ----------
        nonrecursive
            only repair the immediate children of self
        """
        nodes = [self] if nonrecursive else self.preorder()
        for node in nodes:
            for child in node.children:
                child._parent = node
        return self

    def is_consistent(self) -> bool:
        """whether parent and children references agree throughout self"""
        for node in self.preorder():
            parent = node._parent
            if parent is not None and not any(c is node for c in parent.children):
                return False
            if any(c._parent is not node for c in node.children):
                return False
        return True

    def consolidate(self) -> Self:
        """excises every non-root node with length below
        CONSOLIDATE_THRESHOLD, joining its name onto its parent's name with
        '+'

        Returns
        -------
        self with distances fixed, or the former parent of self if self
        was excised
        """
        result = self
        for node in list(self.postorder()):
            parent = node._parent
            if parent is None or node.length >= CONSOLIDATE_THRESHOLD:
                continue
            parent.name = _join_names(parent.name, node.name)
            node.excise()
            if node is self:
                result = parent
        return result.fix_distances()

    def simplify(self) -> Self:
        """excises every node with exactly one child, so chains of nodes
        become a single edge with the summed length. The child's name
        becomes the excised name joined to it with '+'.

        Returns
        -------
        self with distances fixed, or the child that took the place of self
        if self was excised
        """
        result = self
        for node in list(self.postorder()):
            if len(node.children) != 1:
                continue
            child = node.children[0]
            child.name = _join_names(node.name, child.name)
            node.excise()
            if node is result:
                result = child
        return result.fix_distances()

    def sort(
        self,
        key: Callable[[Self], Any] | None = None,
        comparator: Callable[[Self, Self], int] | None = None,
        reverse: bool = False,
    ) -> Self:
        """stably reorders the children of every node, top-down

        Parameters
        ----------
        key
            function of a node returning the sort key, defaults to the
            node value
        comparator
            a cmp style function of two nodes, overrides key
        reverse
            sort in descending order
        """
        if comparator is not None:
            key = cmp_to_key(comparator)
        elif key is None:
            key = _value_key

        for node in self.preorder():
            node.children.sort(key=key, reverse=reverse)
        return self

    def rotate(self) -> Self:
        """reverses the order of the children of self"""
        self.children.reverse()
        return self

    def flip(self) -> Self:
        """reverses the order of children of every node in self"""
        for node in self.preorder():
            node.children.reverse()
        return self

    def set_length(self, length: float) -> Self:
        """sets the edge length, which must be finite and non-negative"""
        length = float(length)
        if not math.isfinite(length) or length < 0:
            msg = f"length must be finite and non-negative, not {length}"
            raise ValueError(msg)
        self.length = length
        return self

    def count(self) -> Self:
        """sets the value of every node in self to its number of nodes"""
        return self.sum(_one)

    def sum(self, func: Callable[[Self], float]) -> Self:
        """sets node values to func(node) plus the sum of its children's
        values, post-order"""
        for node in self.postorder():
            node.value = func(node) + sum(c.value for c in node.children)
        return self

    def normalize(self, newmin: float = 0.0, newmax: float = 1.0) -> Self:
        """linearly rescales node values within self to [newmin, newmax]"""
        values = [node.value for node in self.levelorder()]
        lo, hi = min(values), max(values)
        if lo == hi:
            msg = "cannot normalise, all node values are equal"
            raise ValueError(msg)
        ratio = (newmax - newmin) / (hi - lo)
        for node in self.levelorder():
            node.value = (node.value - lo) * ratio + newmin
        return self

    def clone(self) -> Self:
        """a shallow copy, a new root whose children are the same node
        objects as the children of self

        Notes
        -----
        The children keep self as their parent. Use copy() for an
        independent tree.
        """
        result = self.__class__(self.name, self.length, params=dict(self.params))
        result.children = list(self.children)
        result.height = self.height
        result.value = self.value
        return result

    @classmethod
    def _copy_node(cls, node: Self, memo: dict[int, Any] | None = None) -> Self:
        return cls(node.name, node.length, params=deepcopy(node.params, memo=memo))

    def copy(self, memo: dict[int, Any] | None = None) -> Self:
        """Returns a detached deep copy of self using an iterative approach,
        all nodes in the copy have new identities"""
        if memo is None:
            memo = {}

        obj_id = id(self)
        if obj_id in memo:
            return memo[obj_id]

        root = self.__class__._copy_node(self, memo)
        nodes_stack = [(root, self, len(self.children))]

        while nodes_stack:
            # check the top node, any children left unvisited?
            new_top_node, old_top_node, unvisited_children = nodes_stack[-1]

            if unvisited_children:
                nodes_stack[-1] = (new_top_node, old_top_node, unvisited_children - 1)
                old_child = old_top_node.children[-unvisited_children]
                new_child = self.__class__._copy_node(old_child, memo)
                new_top_node.children.append(new_child)
                new_child._parent = new_top_node
                nodes_stack.append((new_child, old_child, len(old_child.children)))
            else:  # no unvisited children
                nodes_stack.pop()

        memo[obj_id] = root
        return root.fix_distances()

    __deepcopy__ = deepcopy = copy

    # traversal
    def is_leaf(self) -> bool:
        """Returns True if the current node is a tip, i.e. has no children."""
        return not self.children

    def is_root(self) -> bool:
        """Returns True if the current is a root, i.e. has no parent."""
        return self._parent is None

    def preorder(self, include_self: bool = True) -> Generator[Self]:
        """Performs preorder iteration over tree."""
        stack = [self]
        while stack:
            node = stack.pop()
            if include_self or node is not self:
                yield node

            # the stack is last-in-first-out, so children are added
            # in reverse order to be processed left-to-right
            if node.children:
                stack.extend(node.children[::-1])

    def postorder(self, include_self: bool = True) -> Generator[Self]:
        """performs postorder iteration over tree"""
        stack = [(self, False)]
        while stack:
            node, children_done = stack.pop()
            if children_done:
                if include_self or node is not self:
                    yield node
            else:
                stack.append((node, True))
                if node.children:
                    stack.extend((child, False) for child in node.children[::-1])

    def levelorder(self, include_self: bool = True) -> Generator[Self]:
        """Performs levelorder iteration over tree"""
        queue = deque([self])
        while queue:
            curr = queue.popleft()
            if include_self or curr is not self:
                yield curr
            queue.extend(curr.children)

    def each_before(self, func: Callable[[Self], Any]) -> Self:
        """applies func to every node in self in preorder, returns self"""
        for node in list(self.preorder()):
            func(node)
        return self

    def each_after(self, func: Callable[[Self], Any]) -> Self:
        """applies func to every node in self in postorder, returns self"""
        for node in list(self.postorder()):
            func(node)
        return self

    def each(self, func: Callable[[Self], Any]) -> Self:
        """applies func to every node in self in levelorder, returns self"""
        for node in list(self.levelorder()):
            func(node)
        return self

    def get_descendants(self, include_self: bool = False) -> list[Self]:
        """Returns all descendants of self in preorder."""
        return list(self.preorder(include_self=include_self))

    def iter_tips(self, include_self: bool = False) -> Generator[Self]:
        """Iterates over tips descended from self, [] if self is a tip."""
        if not self.children:
            if include_self:
                yield self
            return
        # use stack-based method: robust to large trees
        stack = [self]
        while stack:
            curr = stack.pop()
            if curr.children:
                stack.extend(curr.children[::-1])
            else:
                yield curr

    def tips(self, include_self: bool = False) -> list[Self]:
        """Returns tips descended from self, [] if self is a tip."""
        return list(self.iter_tips(include_self=include_self))

    def get_leaves(self) -> list[Self]:
        """Returns the tips of self in traversal order, [self] if self is
        a tip."""
        return list(self.iter_tips(include_self=True))

    def leafs(self) -> list[Self]:
        """deprecated, use get_leaves"""
        deprecated("method", "leafs", "get_leaves", "2027.1")
        return self.get_leaves()

    def get_leafs(self) -> list[Self]:
        """deprecated, use get_leaves"""
        deprecated("method", "get_leafs", "get_leaves", "2027.1")
        return self.get_leaves()

    def get_tip_names(self) -> list[str]:
        """names of the tips of self"""
        return [n.name for n in self.get_leaves()]

    def get_ancestors(self, include_self: bool = False) -> list[Self]:
        """Returns all ancestors back to the root, nearest first."""
        result: list[Self] = [self] if include_self else []
        curr = self._parent
        while curr is not None:
            result.append(curr)
            curr = curr._parent
        return result

    def get_root(self) -> Self:
        """Returns root of the tree self is in."""
        curr = self
        while curr._parent is not None:
            curr = curr._parent
        return curr

    def siblings(self) -> list[Self]:
        """Returns all nodes that are children of the same parent as self,
        excluding self."""
        if self._parent is None:
            return []
        return [c for c in self._parent.children if c is not self]

    def links(self) -> list[tuple[Self, Self]]:
        """(parent, child) pairs for every edge within self, levelorder"""
        return [
            (node._parent, node)
            for node in self.levelorder()
            if node._parent is not None
        ]

    # queries by identity or name
    @staticmethod
    def _matches(node: TreeNode, target: TreeNode | str) -> bool:
        if isinstance(target, TreeNode):
            return node is target
        if isinstance(target, str):
            return node.name == target
        msg = f"expected a TreeNode or str, not {type(target)}"
        raise TypeError(msg)

    def get_child(self, name: str) -> Self:
        """returns the first child with name

        Raises
        ------
        TreeError if there is no such child
        """
        for child in self.children:
            if self._matches(child, name):
                return child
        msg = f"No child named {name!r}."
        raise TreeError(msg)

    def get_descendant(self, name: str) -> Self:
        """returns the first descendant (preorder) with name

        Raises
        ------
        TreeError if there is no such descendant
        """
        for node in self.preorder(include_self=False):
            if self._matches(node, name):
                return node
        msg = f"No descendant named {name!r}."
        raise TreeError(msg)

    def has_child(self, target: Self | str) -> bool:
        return any(self._matches(c, target) for c in self.children)

    def has_descendant(self, target: Self | str) -> bool:
        return any(self._matches(n, target) for n in self.preorder(include_self=False))

    def has_leaf(self, target: Self | str) -> bool:
        return any(self._matches(n, target) for n in self.get_leaves())

    def is_child_of(self, target: Self | str) -> bool:
        return self._parent is not None and self._matches(self._parent, target)

    def is_descendant_of(self, target: Self | str) -> bool:
        return any(self._matches(n, target) for n in self.get_ancestors())

    def is_ancestor_of(self, other: Self) -> bool:
        """whether self is a proper ancestor of other, by identity"""
        return any(n is self for n in other.get_ancestors())

    # distances, see patristic.phylo.patristic
    def get_mrca(self, cousin: Self | str) -> Self:
        """the most recent common ancestor of self and cousin"""
        from patristic.phylo.patristic import get_mrca

        return get_mrca(self, self._in_tree(cousin))

    def depth_of(self, descendant: Self | str) -> float:
        """sum of lengths from descendant up to self"""
        from patristic.phylo.patristic import depth_of

        return depth_of(self, descendant)

    def distance_between(self, a: Self | str, b: Self | str) -> float:
        """patristic distance between nodes a and b, names are looked up
        within self"""
        from patristic.phylo.patristic import distance_between

        return distance_between(self._in_subtree(a), self._in_subtree(b))

    def distance_to(self, cousin: Self | str) -> float:
        """patristic distance from self to cousin"""
        from patristic.phylo.patristic import distance_between

        return distance_between(self, self._in_tree(cousin))

    def path(self, target: Self | str) -> list[Self]:
        """nodes on the path from self, up to the MRCA, then down to
        target"""
        from patristic.phylo.patristic import path

        return path(self, self._in_tree(target))

    def sources(self, cousin: Self | str) -> bool:
        """whether self is closer to the MRCA with cousin than cousin is"""
        from patristic.phylo.patristic import sources

        return sources(self, self._in_tree(cousin))

    def targets(self, cousin: Self | str) -> bool:
        """whether cousin is closer to the MRCA with self than self is"""
        from patristic.phylo.patristic import targets

        return targets(self, self._in_tree(cousin))

    def to_matrix(self) -> dict[str, numpy.ndarray | list[str]]:
        """patristic distances between the tips of self

        Returns
        -------
        {"matrix": 2D numpy array, "ids": tip names in traversal order}
        """
        from patristic.phylo.patristic import to_matrix

        return to_matrix(self)

    def _in_subtree(self, node: Self | str) -> Self:
        if isinstance(node, TreeNode):
            return node
        if self._matches(self, node):
            return self
        return self.get_descendant(node)

    def _in_tree(self, node: Self | str) -> Self:
        return self.get_root()._in_subtree(node)

    # serialisation
    def get_newick(self, with_distances: bool = True, semicolon: bool = True) -> str:
        """Return the newick string of node and its descendents

        Parameters
        ----------
        with_distances
            include non-zero node lengths
        semicolon
            end tree string with a semicolon

        Notes
        -----
        Lengths are written in positional notation, never with an exponent.
        """
        # Stack contains tuples of (tree node, visit flag)
        stack = [(self, False)]
        node_results: dict[int, str] = {}

        while stack:
            node, visited = stack.pop()
            if not visited:
                stack.append((node, True))
                stack.extend((child, False) for child in node.children)
                continue

            label = format_node(node.name, node.length, with_distances=with_distances)
            if node.children:
                children = ",".join(node_results.pop(id(c)) for c in node.children)
                label = f"({children}){label}"
            node_results[id(node)] = label

        result = node_results[id(self)]
        return f"{result};" if semicolon else result

    def to_newick(self) -> str:
        """Newick string with lengths, terminated by a semicolon"""
        return self.get_newick(with_distances=True, semicolon=True)

    def to_object(self) -> dict[str, Any]:
        """returns the plain-object form of self, nested dicts of
        {'id': name, 'length': length, 'children': [...]}, 'children'
        absent for tips"""
        results: dict[int, dict[str, Any]] = {}
        for node in self.postorder():
            obj: dict[str, Any] = {"id": node.name, "length": node.length}
            if node.children:
                obj["children"] = [results.pop(id(c)) for c in node.children]
            results[id(node)] = obj
        return results[id(self)]

    def to_rich_dict(self) -> dict[str, Any]:
        """returns {'tree': plain-object form, 'params': {...}, 'type': ...,
        'version': ...}"""
        params = {
            str(i): dict(node.params)
            for i, node in enumerate(self.preorder())
            if node.params
        }
        return {
            "tree": self.to_object(),
            "params": params,
            "type": get_object_provenance(self),
            "version": __version__,
        }

    def to_json(self, **kwargs: Any) -> str:
        """returns json formatted string of to_rich_dict()"""
        return json.dumps(self.to_rich_dict(), **kwargs)

    def write(
        self,
        filename: str | os.PathLike[str],
        with_distances: bool = True,
        format_name: str | None = None,
    ) -> None:
        """Save the tree to filename

        Parameters
        ----------
        filename
            path to write the tree to.
        with_distances
            whether branch lengths are included in string.
        format_name
            default is newick, json is alternate, phylip (or dist) writes
            the tip-to-tip distance matrix. Argument overrides the filename
            suffix.
        """
        file_format, _ = get_format_suffixes(filename)
        format_name = format_name or file_format
        if format_name == "json":
            data = self.to_json()
        elif format_name in ("phylip", "dist"):
            from patristic.format.phylip import distances_to_phylip

            dists = self.to_matrix()
            data = distances_to_phylip(dists["ids"], dists["matrix"])
        else:
            data = self.get_newick(with_distances=with_distances)

        with atomic_write(filename, mode="wt") as outf:
            outf.write(data)


def _value_key(node: TreeNode) -> float:
    return node.value


def _one(node: TreeNode) -> float:
    return 1.0


def make_tree(
    treestring: str | None = None,
    tip_names: Sequence[str] | None = None,
    source: str | pathlib.Path | None = None,
) -> TreeNode:
    """Initialises a tree.

    Parameters
    ----------
    treestring
        a newick formatted tree string
    tip_names
        a list of tip names, returns a "star" topology tree
    source
        path to file tree came from, string value assigned to tree.source

    Returns
    -------
    TreeNode
    """
    if tip_names:
        tree = TreeNode(children=[str(name) for name in tip_names])
    elif not treestring:
        msg = "Must provide either treestring or tip_names."
        raise ValueError(msg)
    else:
        tree = newick_parse_string(treestring, TreeNode)

    tree.source = source
    return tree.fix_distances()


def load_tree(
    filename: str | pathlib.Path,
    format_name: str | None = None,
) -> TreeNode:
    """Constructor for tree.

    Parameters
    ----------
    filename
        a file path containing a newick or json formatted tree.
    format_name
        either json or newick, overrides the file name suffix.

    Notes
    -----
    filename is assigned to root node tree.source attribute.
    """
    fmt, _ = get_format_suffixes(filename)
    format_name = format_name or fmt
    with open_(filename) as tfile:
        text = tfile.read()

    if format_name == "json":
        from patristic.parse.tree_json import parse_json

        tree = parse_json(text)
        tree.source = filename
        return tree

    return make_tree(text, source=filename)


@register_deserialiser("patristic.core.tree")
def deserialise_tree(data: dict[str, Any]) -> TreeNode:
    """returns a patristic TreeNode instance"""
    from patristic.parse.tree_json import parse_json

    return parse_json(data)
