"""
Input Validation Module for Association Probability Computations

This module provides validation for likelihood matrices, hypothesis
bundles and algorithm selectors, raising descriptive exceptions as soon
as malformed input reaches the association core.
"""

import numpy as np
from typing import Tuple, Union

from .constants import AssociationAlgorithm, ApproximationType


# ============================================================================
# CUSTOM EXCEPTIONS
# ============================================================================

class ValidationError(Exception):
    """Base exception for validation errors"""
    pass

class InvalidArgumentError(ValidationError, ValueError):
    """Raised when an argument can never be processed"""
    pass

class DimensionMismatchError(InvalidArgumentError):
    """Raised when array shapes are inconsistent with each other"""
    def __init__(self, name: str, expected: Tuple, actual: Tuple):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{name} has shape {actual}, expected {expected}"
        )

class UnknownSelectorError(InvalidArgumentError):
    """Raised when an algorithm or approximation selector is not defined"""
    def __init__(self, kind: str, value):
        self.kind = kind
        self.value = value
        super().__init__(f"Unknown {kind} selected: {value!r}")


# ============================================================================
# SELECTOR PARSING
# ============================================================================

def _parse_selector(enum_cls, value, kind: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace('-', '_').replace(' ', '_')
        if key in enum_cls.__members__:
            return enum_cls[key]
        if key.lstrip('-').isdigit():
            value = int(key)
        else:
            raise UnknownSelectorError(kind, value)
    # Codes read from float arrays arrive as integral floats
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        value = int(value)
    # bool is an int subclass but never a meaningful selector
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        try:
            return enum_cls(int(value))
        except ValueError:
            raise UnknownSelectorError(kind, value) from None
    raise UnknownSelectorError(kind, value)


def parse_algorithm(value: Union[int, str, AssociationAlgorithm]) -> AssociationAlgorithm:
    """
    Resolve a single-scan algorithm selector.

    Args:
        value: Integer code 0-7, enum member or member name

    Returns:
        AssociationAlgorithm member
    """
    return _parse_selector(AssociationAlgorithm, value, "algorithm")


def parse_approximation(value: Union[int, str, ApproximationType]) -> ApproximationType:
    """
    Resolve an approximation selector.

    Args:
        value: Integer code 0-3, enum member or member name

    Returns:
        ApproximationType member
    """
    return _parse_selector(ApproximationType, value, "approximation")


# ============================================================================
# ARRAY VALIDATORS
# ============================================================================

def validate_likelihood_matrix(A) -> np.ndarray:
    """
    Validate an augmented likelihood matrix.

    The matrix must be numTar x (numMeas + numTar) with non-negative
    entries. The off-diagonal terms of the trailing missed-detection
    block are not checked.

    Args:
        A: Likelihoods or likelihood ratios (not log-likelihoods)

    Returns:
        A as a float array
    """
    A = np.asarray(A, dtype=float)

    if A.ndim != 2:
        raise InvalidArgumentError(
            f"Likelihood matrix must be 2-dimensional, got {A.ndim} dimensions")

    num_tar, num_cols = A.shape
    if num_cols < num_tar:
        raise InvalidArgumentError(
            f"Likelihood matrix with {num_tar} targets needs at least {num_tar} "
            f"columns for the missed-detection block, got {num_cols}")

    if not np.all(np.isfinite(A)):
        raise InvalidArgumentError("Likelihood matrix contains non-finite entries")

    if np.any(A < 0):
        raise InvalidArgumentError(
            "Likelihood matrix entries must be non-negative likelihoods, "
            "not log-likelihoods")

    return A


def validate_hypotheses(x_hyp, P_hyp, num_targets: int,
                        num_hypotheses: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate the per-target, per-hypothesis states and covariances.

    Args:
        x_hyp: States, shape (num_targets, num_hypotheses, x_dim)
        P_hyp: Covariances, shape (num_targets, num_hypotheses, x_dim, x_dim)
        num_targets: Number of rows of the likelihood matrix
        num_hypotheses: Number of measurements plus one

    Returns:
        Tuple of float arrays (x_hyp, P_hyp)
    """
    x_hyp = np.asarray(x_hyp, dtype=float)
    P_hyp = np.asarray(P_hyp, dtype=float)

    if x_hyp.ndim != 3 or x_hyp.shape[:2] != (num_targets, num_hypotheses):
        raise DimensionMismatchError(
            "x_hyp", (num_targets, num_hypotheses, "x_dim"), x_hyp.shape)

    x_dim = x_hyp.shape[2]
    expected = (num_targets, num_hypotheses, x_dim, x_dim)
    if P_hyp.shape != expected:
        raise DimensionMismatchError("P_hyp", expected, P_hyp.shape)

    return x_hyp, P_hyp
