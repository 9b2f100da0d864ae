"""
Exact association probabilities by joint hypothesis enumeration.

Computes the JPDA marginal probability that each target is associated
with each measurement (or missed) by summing over all feasible joint
association hypotheses, and the JPDA* variant that keeps only the most
likely permutation among hypotheses that use the same measurements for
the same targets. The cost grows exponentially with the number of
targets competing for measurements.

Author: RadarSim Project
"""

import numpy as np
from typing import Dict, Iterator, List, Tuple, Union
import itertools
from scipy.special import logsumexp
import logging

from .likelihood import LikelihoodMatrix, as_likelihood_matrix
from ..constants import MISSED_DETECTION


logger = logging.getLogger(__name__)


def _target_options(lm: LikelihoodMatrix) -> List[List[int]]:
    """Measurements with non-zero likelihood for each target, plus missed."""
    options = []
    for t in range(lm.num_targets):
        target_options = np.flatnonzero(lm.measurement[t] > 0).tolist()
        if lm.missed[t] > 0:
            target_options.append(MISSED_DETECTION)
        options.append(target_options)
    return options


def enumerate_joint_hypotheses(lm: LikelihoodMatrix,
                               use_log: bool = True) -> Iterator[Tuple[Tuple[int, ...], float]]:
    """
    Generate all feasible joint association hypotheses.

    Args:
        lm: Likelihood matrix
        use_log: Yield log-weights instead of weights

    Yields:
        (hypothesis, weight) where hypothesis[t] is the measurement index of
        target t or MISSED_DETECTION
    """
    options = _target_options(lm)

    for combination in itertools.product(*options):
        # No measurement may be assigned to more than one target
        assigned = [m for m in combination if m != MISSED_DETECTION]
        if len(assigned) != len(set(assigned)):
            continue

        # Options only hold non-zero likelihoods, so the logs are finite
        values = [lm.missed[t] if m == MISSED_DETECTION else lm.measurement[t, m]
                  for t, m in enumerate(combination)]
        if use_log:
            weight = float(np.sum(np.log(values)))
        else:
            weight = float(np.prod(values))
        yield combination, weight


def _marginalize(lm: LikelihoodMatrix, hypotheses: List[Tuple[int, ...]],
                 weights: np.ndarray, use_log: bool) -> np.ndarray:
    beta = np.zeros((lm.num_targets, lm.num_hypotheses))

    if len(hypotheses) == 0:
        logger.warning("No feasible joint association hypothesis exists")
        beta[:] = np.nan
        return beta

    if use_log:
        probs = np.exp(weights - logsumexp(weights))
    else:
        with np.errstate(invalid='ignore', divide='ignore'):
            probs = weights / np.sum(weights)

    missed_col = lm.num_measurements
    for hypothesis, prob in zip(hypotheses, probs):
        for t, m in enumerate(hypothesis):
            beta[t, missed_col if m == MISSED_DETECTION else m] += prob

    return beta


def exact_assoc_probs(A: Union[np.ndarray, LikelihoodMatrix], use_log: bool = True) -> np.ndarray:
    """
    Exact JPDA target-measurement association probabilities.

    Args:
        A: Augmented numTar x (numMeas + numTar) likelihood matrix or a
           LikelihoodMatrix
        use_log: Accumulate hypothesis weights in the log domain, which
                 avoids underflow for long products of small likelihoods

    Returns:
        numTar x (numMeas + 1) matrix of probabilities, last column missed
        detection
    """
    lm = as_likelihood_matrix(A)

    hypotheses = []
    weights = []
    for hypothesis, weight in enumerate_joint_hypotheses(lm, use_log):
        hypotheses.append(hypothesis)
        weights.append(weight)

    logger.debug(f"JPDA: {len(hypotheses)} joint hypotheses for "
                 f"{lm.num_targets} targets, {lm.num_measurements} measurements")

    return _marginalize(lm, hypotheses, np.array(weights), use_log)


def exact_star_assoc_probs(A: Union[np.ndarray, LikelihoodMatrix], use_log: bool = True) -> np.ndarray:
    """
    JPDA* association probabilities.

    Joint hypotheses that detect the same set of targets using the same
    set of measurements differ only by a permutation; only the most likely
    member of each such group is kept, which avoids track coalescence.

    Args:
        A: Augmented likelihood matrix or LikelihoodMatrix
        use_log: Accumulate hypothesis weights in the log domain

    Returns:
        numTar x (numMeas + 1) matrix of probabilities
    """
    lm = as_likelihood_matrix(A)

    best: Dict[Tuple[frozenset, frozenset], Tuple[Tuple[int, ...], float]] = {}
    n_total = 0
    for hypothesis, weight in enumerate_joint_hypotheses(lm, use_log):
        n_total += 1
        detected = frozenset(t for t, m in enumerate(hypothesis) if m != MISSED_DETECTION)
        used = frozenset(m for m in hypothesis if m != MISSED_DETECTION)
        key = (detected, used)
        if key not in best or weight > best[key][1]:
            best[key] = (hypothesis, weight)

    hypotheses = [h for h, _ in best.values()]
    weights = np.array([w for _, w in best.values()])

    logger.debug(f"JPDA*: kept {len(hypotheses)} of {n_total} joint hypotheses")

    return _marginalize(lm, hypotheses, weights, use_log)


def single_target_assoc_probs(lm: LikelihoodMatrix, target: int,
                              use_log: bool = True) -> np.ndarray:
    """PDA probabilities of one target, ignoring all other targets."""
    return exact_assoc_probs(lm.row(target), use_log)[0]
