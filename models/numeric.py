"""
Numeric helpers for the TF-IDF pipeline
Pure functions over scipy sparse matrices and numpy vectors
"""

import numpy as np
from scipy import sparse

from .errors import DimensionMismatch, PreconditionViolation


def row_normalize(matrix) -> sparse.csr_matrix:
    """Divide every row by its sum. Rows summing to zero become zero rows."""
    matrix = sparse.csr_matrix(matrix, dtype=np.float64)
    if matrix.shape[0] == 0:
        return matrix
    row_sums = np.asarray(matrix.sum(axis=1), dtype=np.float64).ravel()

    with np.errstate(divide="ignore", invalid="ignore"):
        inverse = 1.0 / row_sums
    # 0/0 for empty documents: substitute zero instead of propagating inf/nan
    inverse[~np.isfinite(inverse)] = 0.0

    return sparse.csr_matrix(sparse.diags(inverse) @ matrix)


def log10_ratio(total: int, counts) -> np.ndarray:
    """log10(total / count) for every entry of counts"""
    counts = np.asarray(counts, dtype=np.float64).ravel()
    if total <= 0:
        raise PreconditionViolation("log10 ratio needs a positive total")
    if np.any(counts <= 0):
        raise PreconditionViolation("document frequency must be at least 1 for every term")
    return np.log10(total / counts)


def scale_columns(matrix, weights) -> sparse.csr_matrix:
    """Multiply column j of matrix by weights[j]"""
    matrix = sparse.csr_matrix(matrix, dtype=np.float64)
    weights = np.asarray(weights, dtype=np.float64).ravel()
    if matrix.shape[1] != weights.shape[0]:
        raise DimensionMismatch(
            f"matrix has {matrix.shape[1]} columns but {weights.shape[0]} weights were given"
        )
    return sparse.csr_matrix(matrix @ sparse.diags(weights))


def zero_fill_undefined_rows(matrix) -> sparse.csr_matrix:
    """Zero every row that holds a nan or infinite value"""
    matrix = sparse.csr_matrix(matrix, dtype=np.float64, copy=True)
    bad = ~np.isfinite(matrix.data)
    if not bad.any():
        return matrix

    row_of_entry = np.repeat(np.arange(matrix.shape[0]), np.diff(matrix.indptr))
    bad_rows = np.unique(row_of_entry[bad])
    matrix.data[np.isin(row_of_entry, bad_rows)] = 0.0
    matrix.eliminate_zeros()
    return matrix
