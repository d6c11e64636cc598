"""Writer helpers for the Newick tree format."""

import re

import numpy

_reserved = re.compile(r"[(),:;]")


def format_length(length) -> str:
    """returns length in positional notation using the fewest digits that
    round trip, e.g. 2.0 -> '2', 1e-07 -> '0.0000001'"""
    return numpy.format_float_positional(float(length), trim="-")


def format_node(name, length, with_distances: bool = True) -> str:
    """returns the label part of a node, name followed by ':length' when
    length is non-zero"""
    name = name or ""
    if _reserved.search(name):
        msg = f"node name {name!r} contains a reserved Newick character"
        raise ValueError(msg)
    if with_distances and length:
        return f"{name}:{format_length(length)}"
    return name
