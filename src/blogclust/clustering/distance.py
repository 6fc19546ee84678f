"""Pearson correlation distance between word-count vectors."""

import numpy as np

from ..errors import InputShapeError

# Distance reported when either vector has zero variance and r is undefined.
MAX_DISTANCE = 2.0

_EPS = 1e-12


def pearson_distance(a, b) -> float:
    """Return 1 - r(a, b).

    0 means identical shape at any scale, 2 means perfectly anti-correlated.
    If either vector is constant the correlation is undefined and
    MAX_DISTANCE is returned instead of NaN.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise InputShapeError(f"Vector lengths differ: {a.shape[0]} vs {b.shape[0]}")

    a_c = a - a.mean()
    b_c = b - b.mean()
    ss_a = float(np.dot(a_c, a_c))
    ss_b = float(np.dot(b_c, b_c))
    if ss_a < _EPS or ss_b < _EPS:
        return MAX_DISTANCE

    r = float(np.dot(a_c, b_c)) / np.sqrt(ss_a * ss_b)
    return 1.0 - r


def zero_variance(rows: np.ndarray) -> np.ndarray:
    """Boolean mask of rows whose values are all (numerically) equal."""
    rows = np.atleast_2d(np.asarray(rows, dtype=float))
    centered = rows - rows.mean(axis=1, keepdims=True)
    return np.einsum("ij,ij->i", centered, centered) < _EPS


def pearson_distances(matrix: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Distance from every row of `matrix` to every row of `centroids`.

    Returns an array of shape (documents, k) under the same degenerate policy
    as pearson_distance.
    """
    matrix = np.asarray(matrix, dtype=float)
    centroids = np.asarray(centroids, dtype=float)
    if matrix.shape[1] != centroids.shape[1]:
        raise InputShapeError(
            f"Documents have {matrix.shape[1]} dimensions, "
            f"centroids have {centroids.shape[1]}"
        )

    x_c = matrix - matrix.mean(axis=1, keepdims=True)
    c_c = centroids - centroids.mean(axis=1, keepdims=True)
    ss_x = np.einsum("ij,ij->i", x_c, x_c)
    ss_c = np.einsum("ij,ij->i", c_c, c_c)

    den = np.sqrt(np.outer(ss_x, ss_c))
    degenerate = (ss_x[:, None] < _EPS) | (ss_c[None, :] < _EPS)
    num = x_c @ c_c.T

    r = np.where(degenerate, 0.0, num / np.where(degenerate, 1.0, den))
    return np.where(degenerate, MAX_DISTANCE, 1.0 - r)
