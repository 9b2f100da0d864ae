"""
Single-scan measurement update for multi-target tracking.

Given, for every target, the state and covariance updated under each
measurement hypothesis (missed detection last) and the matrix of
association likelihoods, this module produces one Gaussian estimate per
target using one of:
- GNN-JPDA: GNN estimate with a JPDA mean-squared-error covariance
- JPDA: exact association probabilities, mixture reduction
- GNN: optimal one-to-one assignment
- Parallel single-target PDAs
- Naive nearest neighbor: best hypothesis per target, duplicates allowed
- JPDA*: JPDA without permuted hypotheses
- Approximate GNN-JPDA and approximate JPDA

References:
    Y. Bar-Shalom, P. K. Willett, and X. Tian, Tracking and Data Fusion.
    YBS Publishing, 2011, Chapter 6.2.

    H. A. Blom and E. A. Bloem, "Probabilistic data association avoiding
    track coalescence," IEEE Transactions on Automatic Control, vol. 45,
    no. 2, pp. 247-259, 2000.

    O. E. Drummond, "Best hypothesis target tracking and sensor fusion,"
    Proc. SPIE 3809, 1999, pp. 586-600.

Author: RadarSim Project
"""

import numpy as np
from typing import Callable, Dict, Optional, Tuple, Union
from dataclasses import dataclass
import logging

from .likelihood import LikelihoodMatrix, as_likelihood_matrix
from .assignment import HardAssignment, gnn_assignment, naive_nearest_neighbor
from .exact_probs import exact_assoc_probs, exact_star_assoc_probs, single_target_assoc_probs
from .approx_probs import compute_approx_assoc_probs
from .permanent import PermanentBound, get_permanent_bound
from .mixture import calc_mixture_moments
from ..constants import (
    AssociationAlgorithm, ApproximationType,
    DEFAULT_APPROXIMATION, DEFAULT_PERMANENT_BOUND,
    DEFAULT_SINGLE_TARGET_ALGORITHM, DEFAULT_MULTI_TARGET_ALGORITHM,
    DEFAULT_MULTI_TARGET_APPROXIMATION
)
from ..validators import parse_algorithm, parse_approximation, validate_hypotheses


@dataclass
class SingleScanResult:
    """Result of a single-scan update."""
    state_estimates: np.ndarray       # (num_targets, x_dim)
    covariance_estimates: np.ndarray  # (num_targets, x_dim, x_dim)
    log_likelihoods: np.ndarray       # (num_targets,)
    algorithm: AssociationAlgorithm
    approximation: Optional[ApproximationType] = None
    association_probabilities: Optional[np.ndarray] = None  # Not for GNN / naive NN
    hypothesis_indices: Optional[np.ndarray] = None         # Hard assignments only

    def as_tuple(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.state_estimates, self.covariance_estimates, self.log_likelihoods


def log_likelihood_from_beta(lm: LikelihoodMatrix, beta: np.ndarray) -> np.ndarray:
    """
    Expected log-likelihood of each target under the association probabilities.

    Non-finite terms, which arise from zero likelihoods, contribute zero.

    Args:
        lm: Likelihood matrix
        beta: numTar x (numMeas + 1) association probabilities

    Returns:
        Per-target weighted log-likelihood
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        weighted = np.log(lm.with_missed_column()) * beta
    weighted[~np.isfinite(weighted)] = 0.0
    return weighted.sum(axis=1)


class SingleScanUpdater:
    """
    Single-scan update orchestrator.

    Dispatches on the selected AssociationAlgorithm; every algorithm is
    either a hard assignment (estimate taken from one hypothesis) or a soft
    assignment (mixture reduction over all hypotheses).
    """

    def __init__(self, permanent_bound: Union[str, PermanentBound] = DEFAULT_PERMANENT_BOUND,
                 use_log_domain: bool = True,
                 algorithm: Union[int, str, AssociationAlgorithm, None] = None,
                 approximation: Union[int, str, ApproximationType, None] = None):
        """
        Initialize single-scan updater.

        Args:
            permanent_bound: Permanent bound used by Uhlmann's approximation
            use_log_domain: Accumulate exact hypothesis weights as log sums
            algorithm: Algorithm used when update() is given none
            approximation: Approximation used when update() is given none
        """
        self.permanent_bound = get_permanent_bound(permanent_bound)
        self.use_log_domain = use_log_domain
        self.algorithm = None if algorithm is None else parse_algorithm(algorithm)
        self.approximation = None if approximation is None else parse_approximation(approximation)
        self.logger = logging.getLogger(__name__)

        self._handlers: Dict[AssociationAlgorithm, Callable] = {
            AssociationAlgorithm.GNN_JPDA: self._gnn_jpda,
            AssociationAlgorithm.JPDA: self._jpda,
            AssociationAlgorithm.GNN: self._gnn,
            AssociationAlgorithm.PARALLEL_PDA: self._parallel_pda,
            AssociationAlgorithm.NAIVE_NN: self._naive_nn,
            AssociationAlgorithm.JPDA_STAR: self._jpda_star,
            AssociationAlgorithm.APPROX_GNN_JPDA: self._approx_gnn_jpda,
            AssociationAlgorithm.APPROX_JPDA: self._approx_jpda,
        }

    @classmethod
    def from_config(cls, config) -> 'SingleScanUpdater':
        """Create an updater from an UpdateConfig."""
        return cls(permanent_bound=config.permanent_bound,
                   use_log_domain=config.use_log_domain,
                   algorithm=config.algorithm,
                   approximation=config.approximation)

    def select_algorithm(self, num_targets: int, alg_sel1=None,
                         alg_sel2=None) -> Tuple[AssociationAlgorithm, ApproximationType]:
        """
        Resolve the algorithm and approximation to use.

        With no algorithm, a single target uses the JPDA (a PDA) and several
        targets use the approximate GNN-JPDA with Uhlmann's approximation,
        which is exact for two targets. An algorithm given without an
        approximation uses Fitzgerald's cheap JPDA.
        """
        if alg_sel1 is None:
            alg_sel1 = self.algorithm
        if alg_sel2 is None:
            alg_sel2 = self.approximation

        if alg_sel1 is None:
            if num_targets == 1:
                algorithm = DEFAULT_SINGLE_TARGET_ALGORITHM
            else:
                algorithm = DEFAULT_MULTI_TARGET_ALGORITHM
                if alg_sel2 is None:
                    alg_sel2 = DEFAULT_MULTI_TARGET_APPROXIMATION
        else:
            algorithm = parse_algorithm(alg_sel1)

        if alg_sel2 is None:
            alg_sel2 = DEFAULT_APPROXIMATION

        return algorithm, parse_approximation(alg_sel2)

    def update(self, x_hyp, P_hyp, A, alg_sel1=None, alg_sel2=None) -> SingleScanResult:
        """
        Perform the single-scan measurement update.

        Args:
            x_hyp: (num_targets, num_meas + 1, x_dim) states updated with each
                   measurement, missed detection last, in the column order of A
            P_hyp: (num_targets, num_meas + 1, x_dim, x_dim) matching covariances
            A: numTar x (numMeas + numTar) likelihoods or likelihood ratios
            alg_sel1: AssociationAlgorithm selector (0-7)
            alg_sel2: ApproximationType selector (0-3) for the approximate
                      algorithms

        Returns:
            SingleScanResult
        """
        lm = as_likelihood_matrix(A)
        x_hyp, P_hyp = validate_hypotheses(x_hyp, P_hyp, lm.num_targets, lm.num_hypotheses)
        algorithm, approximation = self.select_algorithm(lm.num_targets, alg_sel1, alg_sel2)

        result = self._handlers[algorithm](lm, x_hyp, P_hyp, approximation)

        self.logger.info(f"{algorithm.name}: updated {lm.num_targets} targets "
                         f"with {lm.num_measurements} measurements")
        return result

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def _hard_update(self, x_hyp: np.ndarray, P_hyp: np.ndarray,
                     assignment: HardAssignment, algorithm: AssociationAlgorithm,
                     beta: Optional[np.ndarray] = None,
                     approximation: Optional[ApproximationType] = None) -> SingleScanResult:
        """
        Estimate from the assigned hypothesis. For algorithms that use
        association probabilities, the covariance is the mixture second
        moment about that estimate rather than the hypothesis covariance.
        """
        targets = np.arange(x_hyp.shape[0])
        idx = assignment.hypothesis_indices

        x_est = x_hyp[targets, idx].copy()
        if not algorithm.uses_probabilities:
            P_est = P_hyp[targets, idx].copy()
        else:
            P_est = np.empty((x_hyp.shape[0], x_hyp.shape[2], x_hyp.shape[2]))
            for t in targets:
                _, P_est[t] = calc_mixture_moments(x_hyp[t], beta[t], P_hyp[t],
                                                   mean_about=x_est[t])

        return SingleScanResult(
            state_estimates=x_est,
            covariance_estimates=P_est,
            log_likelihoods=assignment.log_likelihoods,
            algorithm=algorithm,
            approximation=approximation,
            association_probabilities=beta,
            hypothesis_indices=idx
        )

    def _soft_update(self, lm: LikelihoodMatrix, x_hyp: np.ndarray, P_hyp: np.ndarray,
                     beta: np.ndarray, algorithm: AssociationAlgorithm,
                     approximation: Optional[ApproximationType] = None) -> SingleScanResult:
        """Mixture mean and covariance over all hypotheses."""
        num_tar, _, x_dim = x_hyp.shape
        x_est = np.empty((num_tar, x_dim))
        P_est = np.empty((num_tar, x_dim, x_dim))

        for t in range(num_tar):
            x_est[t], P_est[t] = calc_mixture_moments(x_hyp[t], beta[t], P_hyp[t])

        return SingleScanResult(
            state_estimates=x_est,
            covariance_estimates=P_est,
            log_likelihoods=log_likelihood_from_beta(lm, beta),
            algorithm=algorithm,
            approximation=approximation,
            association_probabilities=beta
        )

    # ------------------------------------------------------------------
    # Algorithms
    # ------------------------------------------------------------------

    def _gnn_jpda(self, lm, x_hyp, P_hyp, approximation):
        beta = exact_assoc_probs(lm, self.use_log_domain)
        return self._hard_update(x_hyp, P_hyp, gnn_assignment(lm),
                                 AssociationAlgorithm.GNN_JPDA, beta=beta)

    def _jpda(self, lm, x_hyp, P_hyp, approximation):
        beta = exact_assoc_probs(lm, self.use_log_domain)
        return self._soft_update(lm, x_hyp, P_hyp, beta, AssociationAlgorithm.JPDA)

    def _gnn(self, lm, x_hyp, P_hyp, approximation):
        return self._hard_update(x_hyp, P_hyp, gnn_assignment(lm), AssociationAlgorithm.GNN)

    def _parallel_pda(self, lm, x_hyp, P_hyp, approximation):
        beta = np.zeros((lm.num_targets, lm.num_hypotheses))
        for t in range(lm.num_targets):
            beta[t] = single_target_assoc_probs(lm, t, self.use_log_domain)
        return self._soft_update(lm, x_hyp, P_hyp, beta, AssociationAlgorithm.PARALLEL_PDA)

    def _naive_nn(self, lm, x_hyp, P_hyp, approximation):
        return self._hard_update(x_hyp, P_hyp, naive_nearest_neighbor(lm),
                                 AssociationAlgorithm.NAIVE_NN)

    def _jpda_star(self, lm, x_hyp, P_hyp, approximation):
        beta = exact_star_assoc_probs(lm, self.use_log_domain)
        return self._soft_update(lm, x_hyp, P_hyp, beta, AssociationAlgorithm.JPDA_STAR)

    def _approx_gnn_jpda(self, lm, x_hyp, P_hyp, approximation):
        beta = compute_approx_assoc_probs(lm, approximation, self.permanent_bound)
        return self._hard_update(x_hyp, P_hyp, gnn_assignment(lm),
                                 AssociationAlgorithm.APPROX_GNN_JPDA,
                                 beta=beta, approximation=approximation)

    def _approx_jpda(self, lm, x_hyp, P_hyp, approximation):
        beta = compute_approx_assoc_probs(lm, approximation, self.permanent_bound)
        return self._soft_update(lm, x_hyp, P_hyp, beta, AssociationAlgorithm.APPROX_JPDA,
                                 approximation=approximation)


def single_scan_update(x_hyp, P_hyp, A, alg_sel1=None,
                       alg_sel2=None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Single-scan update with the default updater.

    Args:
        x_hyp: (num_targets, num_meas + 1, x_dim) hypothesis states
        P_hyp: (num_targets, num_meas + 1, x_dim, x_dim) hypothesis covariances
        A: numTar x (numMeas + numTar) likelihood matrix
        alg_sel1: Algorithm selector (0-7), chosen by target count if omitted
        alg_sel2: Approximation selector (0-3)

    Returns:
        Tuple of (x_est, P_est, log_likes)
    """
    return SingleScanUpdater().update(x_hyp, P_hyp, A, alg_sel1, alg_sel2).as_tuple()
