"""
Pytest configuration and shared fixtures for association tests.

This module provides likelihood matrices and hypothesis bundles used
across the association test modules.

Author: RadarSim Project
"""

import pytest
import numpy as np

from ...constants import PROBABILITY_TOLERANCE


@pytest.fixture
def random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
    return 42


@pytest.fixture
def separated_likelihoods():
    """
    Two well separated targets, three measurements.

    Target 0 sees measurement 0 (missed likelihood 2), target 1 sees
    measurement 1 (missed likelihood 3), measurement 2 is clutter.
    """
    return np.array([[10.0, 0.0, 0.0, 2.0, 0.0],
                     [0.0, 8.0, 0.0, 0.0, 3.0]])


@pytest.fixture
def shared_likelihoods():
    """Two targets competing for measurement 0."""
    return np.array([[4.0, 1.0, 1.0, 0.0],
                     [2.0, 0.0, 0.0, 1.0]])


@pytest.fixture
def crossing_likelihoods():
    """Two targets each gating both measurements."""
    return np.array([[3.0, 1.0, 1.0, 0.0],
                     [1.0, 3.0, 0.0, 1.0]])


@pytest.fixture
def single_target_likelihoods():
    """One target, two measurements, missed likelihood 1."""
    return np.array([[2.0, 5.0, 1.0]])


@pytest.fixture
def missed_only_likelihoods():
    """Three targets and no measurements."""
    return np.diag([0.5, 2.0, 1.5])


@pytest.fixture
def random_likelihoods(random_seed):
    """Random dense problem with three targets and four measurements."""
    def _generate(num_tar: int = 3, num_meas: int = 4) -> np.ndarray:
        measurement = np.random.uniform(0.0, 5.0, (num_tar, num_meas))
        # Some targets do not gate some measurements
        measurement[np.random.uniform(size=measurement.shape) < 0.25] = 0.0
        missed = np.random.uniform(0.5, 2.0, num_tar)
        return np.hstack([measurement, np.diag(missed)])

    return _generate


@pytest.fixture
def hypothesis_bundle():
    """Hypothesis states and covariances matching a likelihood matrix."""
    def _generate(A: np.ndarray, x_dim: int = 2):
        num_tar = A.shape[0]
        num_hyp = A.shape[1] - num_tar + 1

        x_hyp = np.zeros((num_tar, num_hyp, x_dim))
        for t in range(num_tar):
            for h in range(num_hyp):
                x_hyp[t, h] = 10.0 * t + h + np.arange(x_dim)

        P_hyp = np.zeros((num_tar, num_hyp, x_dim, x_dim))
        for t in range(num_tar):
            for h in range(num_hyp):
                P_hyp[t, h] = np.eye(x_dim) * (1.0 + h)

        return x_hyp, P_hyp

    return _generate


@pytest.fixture
def assert_probabilities_valid():
    """Utility to assert association probability rows are valid."""
    def _check_probabilities(beta: np.ndarray, tolerance: float = PROBABILITY_TOLERANCE):
        """Check probabilities are non-negative and every row sums to 1."""
        assert np.all(beta >= -tolerance), f"Negative probabilities found: {beta}"
        np.testing.assert_allclose(beta.sum(axis=1), 1.0, rtol=tolerance, atol=tolerance)
        return True

    return _check_probabilities


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
