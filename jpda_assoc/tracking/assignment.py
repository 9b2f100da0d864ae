"""
Hard target-to-measurement assignment for single-scan updates.

Provides the global optimum (Hungarian / Jonker-Volgenant via scipy) used
by the GNN family and the per-target greedy choice used by naive nearest
neighbor association.

Author: RadarSim Project
"""

import numpy as np
from dataclasses import dataclass
from scipy.optimize import linear_sum_assignment
import logging

from .likelihood import LikelihoodMatrix
from ..validators import InvalidArgumentError


logger = logging.getLogger(__name__)


@dataclass
class HardAssignment:
    """Result of a hard assignment."""
    columns: np.ndarray          # Chosen column of the augmented matrix per target
    hypothesis_indices: np.ndarray  # Chosen hypothesis per target, missed detection = num_meas
    log_likelihoods: np.ndarray  # Log of the chosen likelihood per target


def optimal_assignment(cost_matrix: np.ndarray, maximize: bool = True) -> np.ndarray:
    """
    Solve the rectangular linear assignment problem.

    Args:
        cost_matrix: numRow x numCol matrix with numRow <= numCol. Entries of
                     -inf (maximize) or +inf (minimize) are forbidden pairs
        maximize: Maximize the total instead of minimizing it

    Returns:
        Column index assigned to each row
    """
    cost_matrix = np.asarray(cost_matrix, dtype=float)
    n_rows, n_cols = cost_matrix.shape

    if n_rows > n_cols:
        raise InvalidArgumentError(
            f"Cannot assign {n_rows} rows to {n_cols} columns one-to-one")

    if n_rows == 0:
        return np.zeros(0, dtype=int)

    row_ind, col_ind = linear_sum_assignment(cost_matrix, maximize=maximize)

    columns = np.empty(n_rows, dtype=int)
    columns[row_ind] = col_ind
    return columns


def _to_hypotheses(lm: LikelihoodMatrix, columns: np.ndarray,
                   log_A: np.ndarray) -> HardAssignment:
    rows = np.arange(lm.num_targets)
    hypothesis_indices = np.minimum(columns, lm.num_measurements)
    return HardAssignment(
        columns=columns,
        hypothesis_indices=hypothesis_indices,
        log_likelihoods=log_A[rows, columns]
    )


def gnn_assignment(lm: LikelihoodMatrix) -> HardAssignment:
    """
    Global nearest neighbor: the one-to-one assignment maximizing the
    total log-likelihood over the augmented matrix.
    """
    with np.errstate(divide='ignore'):
        log_A = np.log(lm.augmented())

    # Zero likelihoods cost more than any feasible assignment can gain, so a
    # target with nothing else left is still assigned, at -inf log-likelihood
    forbidden = ~np.isfinite(log_A)
    cost = log_A
    if forbidden.any():
        finite = log_A[~forbidden]
        lo, hi = (finite.min(), finite.max()) if finite.size else (0.0, 0.0)
        cost = np.where(forbidden, lo - 1.0 - lm.num_targets * (hi - lo), log_A)

    columns = optimal_assignment(cost, maximize=True)
    result = _to_hypotheses(lm, columns, log_A)

    logger.debug(f"GNN assignment: hypotheses {result.hypothesis_indices.tolist()}")
    return result


def naive_nearest_neighbor(lm: LikelihoodMatrix) -> HardAssignment:
    """
    Most likely hypothesis of each target taken independently.

    Several targets may end up on the same measurement; this is not a
    valid one-to-one assignment.
    """
    with np.errstate(divide='ignore'):
        log_A = np.log(lm.augmented())

    columns = np.argmax(lm.augmented(), axis=1)
    result = _to_hypotheses(lm, columns, log_A)

    measured = result.columns[result.columns < lm.num_measurements]
    if len(measured) != len(set(measured.tolist())):
        logger.debug("Naive nearest neighbor assigned a measurement to several targets")

    return result
