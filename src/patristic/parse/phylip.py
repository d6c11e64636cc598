"""Parser for square distance matrices in PHYLIP format.

The first line holds the number of taxa. Each row starts with the taxon name
followed by its distances. Names are delimited by whitespace and rows may
wrap across lines.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy

from patristic.parse.record import RecordError
from patristic.util.io import PathType, open_


def _get_num_taxa(line: str) -> int:
    try:
        num = int(line.split()[0])
    except (IndexError, ValueError):
        msg = f"Was expecting the number of taxa, not {line.strip()[:20]!r}"
        raise RecordError(msg) from None
    if num < 1:
        msg = f"Number of taxa must be positive, not {num}"
        raise RecordError(msg)
    return num


def parse_phylip_dists(data: Iterable[str]) -> tuple[list[str], numpy.ndarray]:
    """returns (names, 2D array of distances)

    Parameters
    ----------
    data
        lines of a PHYLIP distance matrix, e.g. an open file

    Raises
    ------
    RecordError if the matrix does not have the declared number of
    rows and columns
    """
    lines = (line for line in data if line.strip())
    try:
        num = _get_num_taxa(next(lines))
    except StopIteration:
        msg = "No data"
        raise RecordError(msg) from None

    tokens = (token for line in lines for token in line.split())
    names = []
    dists = numpy.zeros((num, num), dtype=float)
    for row in range(num):
        name = next(tokens, None)
        if name is None:
            msg = f"Expected {num} rows, found {row}"
            raise RecordError(msg)
        names.append(name)
        for col in range(num):
            value = next(tokens, None)
            if value is None:
                msg = f"Row {name!r} has {col} values, expected {num}"
                raise RecordError(msg)
            try:
                dists[row, col] = float(value)
            except ValueError:
                msg = f"Row {name!r} has a non-numeric value {value!r}"
                raise RecordError(msg) from None

    if (extra := next(tokens, None)) is not None:
        msg = f"Unexpected data after {num} rows, starting {extra!r}"
        raise RecordError(msg)

    return names, dists


def load_distances(filename: PathType) -> tuple[list[str], numpy.ndarray]:
    """reads a PHYLIP distance matrix file, which may be compressed

    Returns
    -------
    (names, 2D array of distances)
    """
    with open_(filename) as infile:
        return parse_phylip_dists(infile)
