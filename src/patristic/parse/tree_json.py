"""Builds trees from the plain-object form, nested mappings of
{"id": name, "length": length, "children": [...]}, or its JSON text."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


def _get_params(data: Mapping[str, Any]) -> dict[int, dict[str, Any]]:
    return {int(k): v for k, v in data.get("params", {}).items()}


def parse_json(
    data: str | Mapping[str, Any],
    id_label: str = "id",
    length_label: str = "length",
    children_label: str = "children",
):
    """returns the TreeNode represented by a plain-object tree

    Parameters
    ----------
    data
        a mapping, or JSON text of one. Output of TreeNode.to_rich_dict()
        is also accepted, node params included.
    id_label, length_label, children_label
        keys for the node name, edge length and list of children

    Notes
    -----
    Missing names default to '' and missing lengths to 0.
    """
    from patristic.core.tree import TreeNode

    if isinstance(data, (str, bytes)):
        data = json.loads(data)

    if not isinstance(data, Mapping):
        msg = f"expected a mapping, not {type(data)}"
        raise TypeError(msg)

    params = {}
    if "tree" in data and "type" in data:
        params = _get_params(data)
        data = data["tree"]

    root = None
    # entries are (plain object, parent node)
    stack = [(data, None)]
    while stack:
        obj, parent = stack.pop()
        if not isinstance(obj, Mapping):
            msg = f"expected a mapping for a tree node, not {type(obj)}"
            raise TypeError(msg)
        node = TreeNode(obj.get(id_label), length=obj.get(length_label))
        if parent is None:
            root = node
        else:
            parent.add_child(node)
        # reversed so the last pushed, first popped, is the first child
        stack.extend((child, node) for child in reversed(obj.get(children_label) or []))

    for index, node in enumerate(root.preorder()):
        node.params.update(params.get(index, {}))

    return root.fix_distances()
