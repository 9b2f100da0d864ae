"""
jpda_assoc: association probabilities and single-scan updates for
multi-target tracking
"""

from .constants import AssociationAlgorithm, ApproximationType
from .validators import (
    ValidationError,
    InvalidArgumentError,
    DimensionMismatchError,
    UnknownSelectorError,
)
from .tracking import (
    LikelihoodMatrix,
    compute_approx_assoc_probs,
    exact_assoc_probs,
    exact_star_assoc_probs,
    single_scan_update,
    SingleScanUpdater,
    SingleScanResult,
)
from .config_loader import ConfigLoader, UpdateConfig, setup_logging

__version__ = "1.0.0"

__all__ = [
    "AssociationAlgorithm",
    "ApproximationType",
    "ValidationError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "UnknownSelectorError",
    "LikelihoodMatrix",
    "compute_approx_assoc_probs",
    "exact_assoc_probs",
    "exact_star_assoc_probs",
    "single_scan_update",
    "SingleScanUpdater",
    "SingleScanResult",
    "ConfigLoader",
    "UpdateConfig",
    "setup_logging",
]
