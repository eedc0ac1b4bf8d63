"""Multiset pairing for unordered iterables.

Elements of two same-size unordered containers are paired by solving a
minimum-cost assignment over a matrix whose cell ``(i, j)`` holds the number
of differences found between actual element ``i`` and expected element
``j``.  Zero-cost pairs are equal; any other pair is the best available
partner and is compared in full by the engine.

Wraps scipy's ``linear_sum_assignment`` (Hungarian algorithm).  For a given
matrix the assignment, and so the pairing order, is deterministic.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
from scipy.optimize import linear_sum_assignment  # type: ignore[import-untyped]

__all__ = ["build_cost_matrix", "pair_elements"]


def build_cost_matrix(
    actual: Sequence[Any],
    expected: Sequence[Any],
    cost: Callable[[Any, Any], int],
) -> np.ndarray:
    """Evaluate ``cost`` for every (actual, expected) element pair.

    Args:
        actual:   Actual elements, in iteration order.
        expected: Expected elements, in iteration order.
        cost:     Non-negative pair cost, 0 meaning equal.

    Returns:
        Float matrix of shape ``(len(actual), len(expected))``.
    """
    matrix = np.zeros((len(actual), len(expected)), dtype=float)
    for i, a in enumerate(actual):
        for j, e in enumerate(expected):
            matrix[i, j] = cost(a, e)
    return matrix


def pair_elements(cost_matrix: np.ndarray) -> list[tuple[int, int, float]]:
    """Compute the minimum total-cost pairing of rows to columns.

    Args:
        cost_matrix: 2-D cost matrix of shape ``(m, n)`` with finite entries.

    Returns:
        ``(row, col, cost)`` triples sorted by row.  When ``m != n`` only
        ``min(m, n)`` pairs are returned.
    """
    if cost_matrix.size == 0:
        return []

    cost = np.asarray(cost_matrix, dtype=float)
    if not np.isfinite(cost).all():
        msg = "cost matrix must only hold finite values"
        raise ValueError(msg)

    row_ind, col_ind = linear_sum_assignment(cost)
    return [
        (int(r), int(c), float(cost[r, c]))
        for r, c in zip(row_ind.tolist(), col_ind.tolist(), strict=True)
    ]
