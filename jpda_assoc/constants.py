"""
Selector Enumerations and Numeric Constants for Association Probabilities

This module contains the algorithm selectors, tolerances and default
choices used throughout the single-scan association package.
"""

from enum import IntEnum


# ============================================================================
# NUMERIC TOLERANCES
# ============================================================================

# Relative tolerance for rows of an association probability matrix summing to 1
PROBABILITY_TOLERANCE = 1e-9

# Column index used by hypothesis enumerations for "no detection"
MISSED_DETECTION = -1


# ============================================================================
# ALGORITHM SELECTORS
# ============================================================================

class AssociationAlgorithm(IntEnum):
    """Single-scan update algorithms, numbered as in the classic selector codes"""
    GNN_JPDA = 0
    JPDA = 1
    GNN = 2
    PARALLEL_PDA = 3
    NAIVE_NN = 4
    JPDA_STAR = 5
    APPROX_GNN_JPDA = 6
    APPROX_JPDA = 7

    @property
    def is_hard_assignment(self) -> bool:
        """True when the state estimate is taken from a single hypothesis"""
        return self in (AssociationAlgorithm.GNN_JPDA,
                        AssociationAlgorithm.GNN,
                        AssociationAlgorithm.NAIVE_NN,
                        AssociationAlgorithm.APPROX_GNN_JPDA)

    @property
    def is_approximate(self) -> bool:
        """True when the betas come from an approximation"""
        return self in (AssociationAlgorithm.APPROX_GNN_JPDA,
                        AssociationAlgorithm.APPROX_JPDA)

    @property
    def uses_probabilities(self) -> bool:
        """True when the update computes an association probability matrix"""
        return self not in (AssociationAlgorithm.GNN, AssociationAlgorithm.NAIVE_NN)


class ApproximationType(IntEnum):
    """Approximate association probability algorithms"""
    FITZGERALD = 0       # Cheap JPDA
    QUAN = 1             # Quan, Hongcai, Peide and Zhou
    BAKHTIAR_ALAVI = 2   # Product-of-sums
    UHLMANN = 3          # Matrix permanent bound

    @property
    def description(self) -> str:
        return _APPROXIMATION_DESCRIPTIONS[self]


_APPROXIMATION_DESCRIPTIONS = {
    ApproximationType.FITZGERALD: "Fitzgerald's cheap JPDA",
    ApproximationType.QUAN: "Quan, Hongcai, Peide and Zhou modified cheap JPDA",
    ApproximationType.BAKHTIAR_ALAVI: "Bakhtiar and Alavi product algorithm",
    ApproximationType.UHLMANN: "Uhlmann's matrix permanent approximation",
}


# ============================================================================
# DEFAULTS
# ============================================================================

# Used when no algorithm is requested
DEFAULT_SINGLE_TARGET_ALGORITHM = AssociationAlgorithm.JPDA
DEFAULT_MULTI_TARGET_ALGORITHM = AssociationAlgorithm.APPROX_GNN_JPDA

# Exact for two targets, cheap for more
DEFAULT_MULTI_TARGET_APPROXIMATION = ApproximationType.UHLMANN

# Used when an algorithm is requested without an approximation
DEFAULT_APPROXIMATION = ApproximationType.FITZGERALD

DEFAULT_PERMANENT_BOUND = "soules"
