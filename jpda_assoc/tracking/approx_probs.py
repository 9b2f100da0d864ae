"""
Approximate association probabilities for multi-target tracking.

Exact JPDA marginalization is combinatorial in the number of targets that
share measurements. This module implements four polynomial-time
approximations of the same target-measurement association probabilities:
- Fitzgerald's cheap JPDA
- The modified cheap JPDA of Quan, Hongcai, Peide and Zhou
- The product-of-sums algorithm of Bakhtiar and Alavi
- Uhlmann's algorithm using matrix permanent bounds

References:
    R. J. Fitzgerald, "Development of practical PDA logic for multitarget
    tracking by microprocessor," in Multitarget-Multisensor Tracking:
    Advanced Applications, Artech House, 1996, pp. 1-23.

    P. Quan, Z. Hongcai, W. Peide and H. Zhou, "Development of new
    practical multitarget data association algorithm," Proc. First IEEE
    Conference on Control Applications, 1992, pp. 1065-1066.

    B. Bakhtiar and H. Alavi, "Efficient algorithm for computing data
    association probabilities for multitarget tracking," Proc. SPIE 2756,
    1996, pp. 130-140.

    J. K. Uhlmann, "Matrix permanent inequalities for approximating joint
    assignment matrices in tracking systems," Journal of the Franklin
    Institute, vol. 341, no. 7, pp. 569-593, 2004.

Author: RadarSim Project
"""

import numpy as np
from typing import Callable, Dict, Optional, Union
import logging

from .likelihood import LikelihoodMatrix, as_likelihood_matrix, normalize_rows
from .permanent import PermanentBound, get_permanent_bound
from ..constants import ApproximationType, DEFAULT_APPROXIMATION, DEFAULT_PERMANENT_BOUND
from ..validators import parse_approximation


logger = logging.getLogger(__name__)


def _with_missed_probability(beta_meas: np.ndarray) -> np.ndarray:
    """Append the missed-detection column as the remaining probability mass."""
    missed = 1.0 - beta_meas.sum(axis=1, keepdims=True)
    return np.hstack([beta_meas, missed])


def cheap_jpda(lm: LikelihoodMatrix) -> np.ndarray:
    """
    Fitzgerald's cheap JPDA.

    beta[t, m] = G[t, m] / (S_m + S_t - G[t, m] + B_t) where S_m sums
    measurement m over all targets, S_t sums target t over all
    measurements and B_t is the missed-detection likelihood of t.
    """
    G = lm.measurement
    col_sums = G.sum(axis=0, keepdims=True)
    row_sums = G.sum(axis=1, keepdims=True)
    B = lm.missed[:, np.newaxis]

    with np.errstate(invalid='ignore', divide='ignore'):
        beta_meas = G / (col_sums + row_sums - G + B)

    return _with_missed_probability(beta_meas)


def quan_cheap_jpda(lm: LikelihoodMatrix) -> np.ndarray:
    """
    Modified cheap JPDA of Quan, Hongcai, Peide and Zhou.

    Competing targets are weighted by the fraction r[t, m] of their own
    measurement likelihood that falls on measurement m:
    beta[t, m] = G[t, m] / (S_t + sum_t' r[t', m] G[t', m] - r[t, m] G[t, m] + B_t)
    """
    G = lm.measurement
    row_sums = G.sum(axis=1, keepdims=True)
    B = lm.missed[:, np.newaxis]

    # A target with no measurement likelihood competes for nothing
    r = np.divide(G, row_sums, out=np.zeros_like(G), where=row_sums > 0)

    committed = r * G
    competition = committed.sum(axis=0, keepdims=True)

    with np.errstate(invalid='ignore', divide='ignore'):
        beta_meas = G / (row_sums + competition - committed + B)

    return _with_missed_probability(beta_meas)


def bakhtiar_alavi(lm: LikelihoodMatrix) -> np.ndarray:
    """
    Bakhtiar and Alavi product-of-sums algorithm.

    With the missed detections as one extra column of G, the raw weight of
    target t taking column m is G[t, m] times the product, over every other
    target, of its row sum with column m excluded. The missed-detection
    column is never shared, so nothing is excluded for it. Rows are then
    normalized.
    """
    G = lm.with_missed_column()
    num_tar = lm.num_targets
    num_meas = lm.num_measurements

    beta = np.zeros((num_tar, num_meas + 1))
    for t in range(num_tar):
        others = np.delete(G, t, axis=0)

        for m in range(num_meas):
            remaining = np.delete(others, m, axis=1).sum(axis=1)
            beta[t, m] = G[t, m] * np.prod(remaining)

        beta[t, num_meas] = G[t, num_meas] * np.prod(others.sum(axis=1))

    return normalize_rows(beta)


def uhlmann_permanent(lm: LikelihoodMatrix,
                      permanent_bound: Optional[PermanentBound] = None) -> np.ndarray:
    """
    Uhlmann's permanent-based approximation.

    The raw weight of target t taking column c of the augmented matrix is
    A[t, c] times the permanent of A with row t and column c removed, which
    counts the ways the remaining targets can still be explained. The
    permanent is replaced by a bound. Rows are then normalized.

    Args:
        lm: Likelihood matrix
        permanent_bound: Strategy bounding the permanent, defaults to the
                         Soules bound
    """
    if permanent_bound is None:
        permanent_bound = get_permanent_bound(DEFAULT_PERMANENT_BOUND)

    A = lm.augmented()
    num_tar = lm.num_targets
    num_meas = lm.num_measurements

    beta = np.zeros((num_tar, num_meas + 1))
    for t in range(num_tar):
        reduced_rows = np.delete(A, t, axis=0)

        columns = list(range(num_meas)) + [num_meas + t]
        for hyp, c in enumerate(columns):
            if A[t, c] == 0:
                continue
            reduced = np.delete(reduced_rows, c, axis=1)
            beta[t, hyp] = A[t, c] * permanent_bound(reduced)

    return normalize_rows(beta)


_APPROXIMATIONS: Dict[ApproximationType, Callable[..., np.ndarray]] = {
    ApproximationType.FITZGERALD: cheap_jpda,
    ApproximationType.QUAN: quan_cheap_jpda,
    ApproximationType.BAKHTIAR_ALAVI: bakhtiar_alavi,
}


def compute_approx_assoc_probs(A: Union[np.ndarray, LikelihoodMatrix],
                               approx_type: Union[int, str, ApproximationType] = DEFAULT_APPROXIMATION,
                               permanent_bound: Union[str, PermanentBound, None] = None) -> np.ndarray:
    """
    Approximate target-measurement association probabilities.

    Args:
        A: numTar x (numMeas + numTar) matrix of non-negative likelihoods or
           likelihood ratios (not log-likelihoods). Columns past numMeas hold
           the missed-detection likelihoods on their diagonal. A
           LikelihoodMatrix is also accepted
        approx_type: Approximation to use
            0 Fitzgerald's cheap JPDA
            1 Quan, Hongcai, Peide and Zhou
            2 Bakhtiar and Alavi
            3 Uhlmann's matrix permanent approximation
        permanent_bound: Strategy or strategy name for approximation 3

    Returns:
        numTar x (numMeas + 1) matrix whose rows sum to one; the last column
        holds the missed-detection probabilities
    """
    approx_type = parse_approximation(approx_type)
    bound = get_permanent_bound(permanent_bound or DEFAULT_PERMANENT_BOUND)
    lm = as_likelihood_matrix(A)

    logger.debug(f"{approx_type.description}: {lm.num_targets} targets, "
                 f"{lm.num_measurements} measurements")

    if approx_type == ApproximationType.UHLMANN:
        return uhlmann_permanent(lm, bound)

    return _APPROXIMATIONS[approx_type](lm)
