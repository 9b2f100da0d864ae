"""
Single-scan data association module

This module provides the association-probability engine of a multi-target
tracker and the single-scan update that consumes it, fusing the
per-hypothesis estimates of each target into one Gaussian.

Association probabilities:
- Exact JPDA and JPDA* by joint hypothesis enumeration
- Fitzgerald's cheap JPDA
- Quan, Hongcai, Peide and Zhou modified cheap JPDA
- Bakhtiar and Alavi product algorithm
- Uhlmann's matrix permanent approximation

Single-scan updates:
- GNN, GNN-JPDA and approximate GNN-JPDA (hard assignment)
- JPDA, JPDA*, parallel PDAs and approximate JPDA (mixture reduction)
- Naive nearest neighbor
"""

from .likelihood import LikelihoodMatrix, as_likelihood_matrix, normalize_rows

from .permanent import (
    PermanentBound,
    SoulesPermanentBound,
    RowSumPermanentBound,
    ExactPermanent,
    get_permanent_bound,
)

from .assignment import (
    HardAssignment,
    optimal_assignment,
    gnn_assignment,
    naive_nearest_neighbor,
)

from .exact_probs import (
    enumerate_joint_hypotheses,
    exact_assoc_probs,
    exact_star_assoc_probs,
    single_target_assoc_probs,
)

from .approx_probs import (
    cheap_jpda,
    quan_cheap_jpda,
    bakhtiar_alavi,
    uhlmann_permanent,
    compute_approx_assoc_probs,
)

from .mixture import calc_mixture_moments

from .single_scan import (
    SingleScanUpdater,
    SingleScanResult,
    log_likelihood_from_beta,
    single_scan_update,
)

__all__ = [
    # Likelihood representation
    'LikelihoodMatrix',
    'as_likelihood_matrix',
    'normalize_rows',

    # Permanent bounds
    'PermanentBound',
    'SoulesPermanentBound',
    'RowSumPermanentBound',
    'ExactPermanent',
    'get_permanent_bound',

    # Hard assignment
    'HardAssignment',
    'optimal_assignment',
    'gnn_assignment',
    'naive_nearest_neighbor',

    # Exact probabilities
    'enumerate_joint_hypotheses',
    'exact_assoc_probs',
    'exact_star_assoc_probs',
    'single_target_assoc_probs',

    # Approximate probabilities
    'cheap_jpda',
    'quan_cheap_jpda',
    'bakhtiar_alavi',
    'uhlmann_permanent',
    'compute_approx_assoc_probs',

    # Mixture reduction
    'calc_mixture_moments',

    # Single-scan update
    'SingleScanUpdater',
    'SingleScanResult',
    'log_likelihood_from_beta',
    'single_scan_update',
]
