"""
Gaussian mixture moment matching.

Author: RadarSim Project
"""

import numpy as np
from typing import Optional, Tuple

from ..validators import DimensionMismatchError


def calc_mixture_moments(x: np.ndarray, w: np.ndarray,
                         P: Optional[np.ndarray] = None,
                         mean_about: Optional[np.ndarray] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Mean and covariance of a weighted mixture of Gaussians.

    Args:
        x: Component means, shape (num_components, x_dim)
        w: Component weights, shape (num_components,), summing to one
        P: Component covariances, shape (num_components, x_dim, x_dim).
           If omitted the components are treated as points
        mean_about: If given, the second moment is taken about this point
                    instead of the mixture mean, giving a mean-squared-error
                    matrix for an estimate located there

    Returns:
        Tuple of (mixture mean, covariance about mean_about or the mean)
    """
    x = np.asarray(x, dtype=float)
    w = np.asarray(w, dtype=float)
    num_components, x_dim = x.shape

    if w.shape != (num_components,):
        raise DimensionMismatchError("w", (num_components,), w.shape)

    # Combined state: x = sum_i(w_i * x_i)
    mean = w @ x

    center = mean if mean_about is None else np.asarray(mean_about, dtype=float)
    diffs = x - center

    # Combined covariance: P = sum_i(w_i * [P_i + (x_i - c)(x_i - c)'])
    cov = np.einsum('i,ij,ik->jk', w, diffs, diffs)
    if P is not None:
        P = np.asarray(P, dtype=float)
        if P.shape != (num_components, x_dim, x_dim):
            raise DimensionMismatchError("P", (num_components, x_dim, x_dim), P.shape)
        cov = cov + np.einsum('i,ijk->jk', w, P)

    return mean, cov
