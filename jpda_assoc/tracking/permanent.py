"""
Matrix permanent bounds used to approximate association probabilities.

The permanent of a non-negative m x n matrix (m <= n) is the sum, over
all one-to-one maps of rows to columns, of the product of the selected
entries. It counts every joint explanation of the rows, which makes it
expensive to compute exactly. This module offers interchangeable
strategies:
- SoulesPermanentBound: upper bound from sorted row entries
- RowSumPermanentBound: product of the row sums
- ExactPermanent: exact value by dynamic programming over column subsets

Author: RadarSim Project
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Dict
from scipy.special import gammaln

from ..validators import InvalidArgumentError, UnknownSelectorError


class PermanentBound(ABC):
    """
    Abstract base class for permanent bounds.

    Trivial cases are resolved exactly before the strategy is consulted:
    an empty matrix has permanent 1, a matrix with more rows than non-zero
    columns has permanent 0, and a single row has permanent equal to its sum.
    """

    name = "base"

    def __call__(self, matrix) -> float:
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2:
            raise InvalidArgumentError(
                f"Permanent requires a 2-dimensional matrix, got {matrix.ndim} dimensions")

        if matrix.shape[0] == 0:
            return 1.0

        # Columns no row can use do not change the permanent
        matrix = matrix[:, np.any(matrix != 0, axis=0)]
        n_rows, n_cols = matrix.shape

        if n_rows > n_cols:
            return 0.0
        if n_rows == 1:
            return float(matrix.sum())

        return self._bound(matrix)

    @abstractmethod
    def _bound(self, matrix: np.ndarray) -> float:
        """Bound for a matrix with at least two rows and no zero columns."""
        pass


class RowSumPermanentBound(PermanentBound):
    """Product of the row sums, the simplest upper bound."""

    name = "row_sum"

    def _bound(self, matrix: np.ndarray) -> float:
        return float(np.prod(matrix.sum(axis=1)))


class SoulesPermanentBound(PermanentBound):
    """
    Soules' upper bound for non-negative matrices.

    For a square matrix, perm(A) <= prod_i sum_j a*_ij g_j where a*_i is
    row i sorted in decreasing order, g_1 = 1 and
    g_j = (j!)^(1/j) - ((j-1)!)^(1/(j-1)). It reduces to the Bregman-Minc
    bound for 0-1 matrices. A rectangular m x n matrix is padded with
    n - m rows of ones, whose permanent is (n - m)! times that of the
    unpadded matrix. The result is capped by the row-sum product, which is
    also an upper bound.
    """

    name = "soules"

    @staticmethod
    def _log_factorial_roots(n: int) -> np.ndarray:
        k = np.arange(1, n + 1)
        return gammaln(k + 1) / k

    def _bound(self, matrix: np.ndarray) -> float:
        n_rows, n_cols = matrix.shape

        row_sums = matrix.sum(axis=1)
        if np.any(row_sums == 0):
            return 0.0

        roots = np.exp(self._log_factorial_roots(n_cols))
        gamma = np.diff(np.concatenate([[0.0], roots]))

        sorted_rows = -np.sort(-matrix, axis=1)
        row_terms = sorted_rows @ gamma

        # Rows of ones contribute (n!)^(1/n) each
        n_pad = n_cols - n_rows
        log_bound = (np.sum(np.log(row_terms))
                     + n_pad * self._log_factorial_roots(n_cols)[-1]
                     - gammaln(n_pad + 1))
        log_row_sum_bound = np.sum(np.log(row_sums))

        return float(np.exp(min(log_bound, log_row_sum_bound)))


class ExactPermanent(PermanentBound):
    """
    Exact permanent of a rectangular matrix.

    Rows are assigned one at a time while tracking the set of used
    columns, so the cost grows with the number of column subsets.
    """

    name = "exact"

    def _bound(self, matrix: np.ndarray) -> float:
        n_rows, n_cols = matrix.shape
        partial: Dict[int, float] = {0: 1.0}

        for i in range(n_rows):
            columns = np.flatnonzero(matrix[i])
            next_partial: Dict[int, float] = {}
            for used, value in partial.items():
                for j in columns:
                    bit = 1 << int(j)
                    if used & bit:
                        continue
                    key = used | bit
                    next_partial[key] = next_partial.get(key, 0.0) + value * matrix[i, j]
            partial = next_partial
            if not partial:
                return 0.0

        return float(sum(partial.values()))


_PERMANENT_BOUNDS = {
    cls.name: cls for cls in (SoulesPermanentBound, RowSumPermanentBound, ExactPermanent)
}


def get_permanent_bound(name) -> PermanentBound:
    """
    Resolve a permanent bound strategy.

    Args:
        name: Strategy name ('soules', 'row_sum', 'exact') or an existing
              PermanentBound, which is returned unchanged

    Returns:
        PermanentBound instance
    """
    if isinstance(name, PermanentBound):
        return name
    key = str(name).strip().lower().replace('-', '_')
    if key not in _PERMANENT_BOUNDS:
        raise UnknownSelectorError("permanent bound", name)
    return _PERMANENT_BOUNDS[key]()
