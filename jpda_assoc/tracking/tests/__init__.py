"""
Test suite for the single-scan association module.

Test Structure:
- test_likelihood.py: Likelihood matrix layouts and validation
- test_permanent.py: Matrix permanent bounds
- test_exact_probs.py: Exact JPDA and JPDA* probabilities
- test_approx_probs.py: Approximate association probabilities
- test_assignment.py: GNN and naive nearest neighbor assignment
- test_mixture.py: Gaussian mixture moment matching
- test_single_scan.py: Single-scan update algorithms

To run all tests:
    pytest jpda_assoc/tracking/tests/

To run with coverage:
    pytest jpda_assoc/tracking/tests/ --cov=jpda_assoc --cov-report=html

Author: RadarSim Project
"""

__all__ = [
    'test_likelihood',
    'test_permanent',
    'test_exact_probs',
    'test_approx_probs',
    'test_assignment',
    'test_mixture',
    'test_single_scan',
]
