"""
Canonical likelihood representation for single-scan data association.

Upstream gating produces an augmented matrix whose trailing square block
holds the missed-detection likelihoods on its diagonal. The association
algorithms read the same information in different layouts, so the matrix
is held once as a dense measurement block plus a missed-detection vector
and converted at the boundary of each algorithm.

Author: RadarSim Project
"""

import numpy as np
from dataclasses import dataclass
import logging

from ..validators import validate_likelihood_matrix


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikelihoodMatrix:
    """Target-to-measurement likelihoods with explicit missed-detection terms."""
    measurement: np.ndarray  # (num_targets, num_measurements)
    missed: np.ndarray       # (num_targets,)

    @classmethod
    def from_augmented(cls, A) -> 'LikelihoodMatrix':
        """
        Build from a numTar x (numMeas + numTar) augmented matrix.

        Args:
            A: Augmented likelihood matrix, missed detections on the
               diagonal of the trailing block

        Returns:
            LikelihoodMatrix
        """
        A = validate_likelihood_matrix(A)
        num_tar = A.shape[0]
        num_meas = A.shape[1] - num_tar

        measurement = A[:, :num_meas].copy()
        missed = np.diag(A[:, num_meas:]).copy()

        lm = cls(measurement=measurement, missed=missed)
        lm.warn_if_degenerate()
        return lm

    @property
    def num_targets(self) -> int:
        return self.measurement.shape[0]

    @property
    def num_measurements(self) -> int:
        return self.measurement.shape[1]

    @property
    def num_hypotheses(self) -> int:
        """Measurement hypotheses plus the missed detection."""
        return self.num_measurements + 1

    def augmented(self) -> np.ndarray:
        """Augmented layout with the missed detections on a diagonal block."""
        return np.hstack([self.measurement, np.diag(self.missed)])

    def with_missed_column(self) -> np.ndarray:
        """Layout with the missed detections as one extra final column."""
        return np.hstack([self.measurement, self.missed[:, np.newaxis]])

    def row(self, target: int) -> 'LikelihoodMatrix':
        """Single-target sub-problem ignoring all other targets."""
        return LikelihoodMatrix(
            measurement=self.measurement[target:target + 1, :].copy(),
            missed=self.missed[target:target + 1].copy()
        )

    def warn_if_degenerate(self) -> None:
        """Log rows with no non-zero likelihood; their probabilities are NaN."""
        row_sums = self.measurement.sum(axis=1) + self.missed
        degenerate = np.flatnonzero(row_sums == 0)
        if degenerate.size > 0:
            logger.warning(f"Targets {degenerate.tolist()} have all-zero likelihoods; "
                           f"association probabilities will be undefined")


def as_likelihood_matrix(A) -> LikelihoodMatrix:
    """Accept either a LikelihoodMatrix or an augmented array."""
    if isinstance(A, LikelihoodMatrix):
        return A
    return LikelihoodMatrix.from_augmented(A)


def normalize_rows(weights: np.ndarray) -> np.ndarray:
    """
    Normalize each row to sum to one.

    All-zero rows become NaN rather than being silently repaired.
    """
    totals = weights.sum(axis=1, keepdims=True)
    with np.errstate(invalid='ignore', divide='ignore'):
        return weights / totals
