"""Writer for square distance matrices in PHYLIP format."""

from patristic.format.newick import format_length


def distances_to_phylip(names, dists) -> str:
    """Returns a PHYLIP formatted string of a square distance matrix.

    Parameters
    ----------
    names
        taxon names, one per row
    dists
        2D array like of distances

    Notes
    -----
    Names are padded to a common width and must not contain whitespace.
    """
    if len(names) != len(dists):
        msg = f"{len(names)} names for {len(dists)} rows"
        raise ValueError(msg)
    if any(not name or len(name.split()) != 1 for name in names):
        msg = "names must be non-empty and contain no whitespace"
        raise ValueError(msg)

    width = max(len(name) for name in names) if names else 0
    lines = [str(len(names))]
    for name, row in zip(names, dists):
        values = " ".join(format_length(value) for value in row)
        lines.append(f"{name.ljust(width)}  {values}")
    return "\n".join(lines) + "\n"
