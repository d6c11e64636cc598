"""Distance matrix conversion and validation.

Distances can be provided as a dict keyed by (name1, name2) pairs, which
needs converting into a numpy array before being used in phylogenetic
reconstruction.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy


def names_from_distance_dict(dists: Mapping) -> list[str]:
    """Unique names from within the tuples which make up the keys of 'dists'"""
    names = []
    for key in dists:
        for name in key:
            if name not in names:
                names.append(name)
    return names


def lookup_symmetric_dict(dists: Mapping, a, b) -> float:
    """dists[a,b] or dists[b,a], whichever is present, so long as they
    don't contradict each other"""
    values = []
    for key in ((a, b), (b, a)):
        value = dists.get(key, None)
        if value is not None and not numpy.isnan(value):
            values.append(value)

    if not values:
        raise KeyError((a, b))
    if len(values) == 2 and values[0] != values[1]:
        msg = f"d[{a},{b}] != d[{b},{a}]"
        raise ValueError(msg)
    return values[0]


def distance_dict_to_2D(
    dists: Mapping, names: Sequence[str] | None = None
) -> tuple[list[str], numpy.ndarray]:
    """(names, dists). Distances converted into a straightforward distance
    matrix, ordered by names if provided."""
    names = names_from_distance_dict(dists) if names is None else list(names)
    num = len(names)
    d = numpy.zeros((num, num), dtype=float)
    for i, a in enumerate(names):
        for j in range(i + 1, num):
            d[i, j] = d[j, i] = lookup_symmetric_dict(dists, a, names[j])
    return names, d


def validated_distances(
    matrix, labels: Sequence[str] | None = None
) -> tuple[list[str], numpy.ndarray]:
    """returns (labels, distances) after checking the distances are a
    square, symmetric, finite, non-negative matrix with a zero diagonal

    Parameters
    ----------
    matrix
        a 2D array like, or a dict of {(name1, name2): distance}
    labels
        a name for each row. Defaults to the row indices as strings, or for
        a dict, the names in the keys in order of appearance.

    Raises
    ------
    ValueError for an invalid matrix or mismatched labels
    """
    if isinstance(matrix, Mapping):
        labels, matrix = distance_dict_to_2D(matrix, names=labels)

    dists = numpy.array(matrix, dtype=float)
    if dists.ndim != 2 or dists.shape[0] != dists.shape[1]:
        msg = f"distances must be a square matrix, not shape {dists.shape}"
        raise ValueError(msg)

    num = dists.shape[0]
    if num < 2:
        msg = f"at least 2 taxa are required, not {num}"
        raise ValueError(msg)

    if not numpy.isfinite(dists).all():
        msg = "distances must be finite"
        raise ValueError(msg)

    if (dists < 0).any():
        msg = "distances must be non-negative"
        raise ValueError(msg)

    if (numpy.diag(dists) != 0).any():
        msg = "distances on the diagonal must be zero"
        raise ValueError(msg)

    if not numpy.allclose(dists, dists.T, rtol=1e-9, atol=0):
        msg = "distances must be symmetric"
        raise ValueError(msg)

    labels = [str(i) for i in range(num)] if labels is None else [str(l) for l in labels]
    if len(labels) != num:
        msg = f"{len(labels)} labels for {num} taxa"
        raise ValueError(msg)

    return labels, dists
