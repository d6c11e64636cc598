"""Compiled kernels for neighbour joining.

Sums are accumulated sequentially in index order so results, and the choice
between tied pairs, are reproducible.
"""

import numpy
from numba import njit

# turn off code coverage as jit-ted code not accessible to coverage


@njit(cache=True)
def row_sums(dists):  # pragma: no cover
    """sum of each row"""
    num = dists.shape[0]
    sums = numpy.zeros(num, dtype=numpy.float64)
    for i in range(num):
        total = 0.0
        for j in range(num):
            total += dists[i, j]
        sums[i] = total
    return sums


@njit(cache=True)
def sort_row(dists, row, removed, sorted_dists, sorted_cols, sorted_len):  # pragma: no cover
    """stores the active columns of row, except row itself, ordered by
    distance. Ties keep column order.

    Parameters
    ----------
    dists
        2D distance matrix
    row
        index of the row to sort
    removed
        boolean array, True for indices that have been joined
    sorted_dists, sorted_cols
        2D arrays, row ``row`` is overwritten with the sorted distances and
        their column indices
    sorted_len
        number of valid entries in each row of sorted_dists
    """
    num = dists.shape[0]
    cols = numpy.empty(num, dtype=numpy.int64)
    count = 0
    for c in range(num):
        if c == row or removed[c]:
            continue
        cols[count] = c
        count += 1

    values = numpy.empty(count, dtype=numpy.float64)
    for k in range(count):
        values[k] = dists[row, cols[k]]

    order = numpy.argsort(values, kind="mergesort")
    for k in range(count):
        sorted_dists[row, k] = values[order[k]]
        sorted_cols[row, k] = cols[order[k]]
    sorted_len[row] = count


@njit(cache=True)
def search(
    dists, sorted_dists, sorted_cols, sorted_len, sums, removed, num_active, sum_max
):  # pragma: no cover
    """returns the active pair (i, j) minimising
    Q = (num_active - 2) * d[i, j] - sum[i] - sum[j]

    The nearest neighbour of each row seeds the minimum. Each row's sorted
    neighbours are then scanned until the lower bound on Q for the rest of
    the row, which uses the largest row sum, exceeds the minimum. The first
    pair found wins ties.
    """
    num = dists.shape[0]
    n2 = num_active - 2
    q_min = numpy.inf
    min_i = -1
    min_j = -1

    for r in range(num):
        if removed[r] or sorted_len[r] == 0:
            continue
        c2 = sorted_cols[r, 0]
        if removed[c2]:
            continue
        q = dists[r, c2] * n2 - sums[r] - sums[c2]
        if q < q_min:
            q_min = q
            min_i = r
            min_j = c2

    for r in range(num):
        if removed[r]:
            continue
        for c in range(sorted_len[r]):
            c2 = sorted_cols[r, c]
            if removed[c2]:
                continue
            if sorted_dists[r, c] * n2 - sums[r] - sum_max > q_min:
                break
            q = dists[r, c2] * n2 - sums[r] - sums[c2]
            if q < q_min:
                q_min = q
                min_i = r
                min_j = c2

    return min_i, min_j


@njit(cache=True)
def join(dists, sums, removed, i, j):  # pragma: no cover
    """retires i and stores the distances to the node joining i and j in
    row and column j, updating the row sums in place

    Returns
    -------
    the largest row sum, including the value row j held before being
    replaced
    """
    num = dists.shape[0]
    removed[i] = True
    new_row = numpy.zeros(num, dtype=numpy.float64)
    row_change = numpy.zeros(num, dtype=numpy.float64)
    d_ij = dists[i, j]
    total = 0.0
    for k in range(num):
        if removed[k]:
            continue
        aux = dists[i, k] + dists[j, k]
        new_row[k] = 0.5 * (aux - d_ij)
        total += new_row[k]
        row_change[k] = -0.5 * (aux + d_ij)

    new_max = 0.0
    for k in range(num):
        if removed[k]:
            continue
        dists[j, k] = new_row[k]
        dists[k, j] = new_row[k]
        sums[k] += row_change[k]
        if sums[k] > new_max:
            new_max = sums[k]

    sums[i] = 0.0
    sums[j] = total
    if total > new_max:
        new_max = total
    return new_max
