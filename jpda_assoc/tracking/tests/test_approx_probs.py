"""
Comprehensive test suite for approximate association probabilities.

Tests all four approximations:
- Fitzgerald's cheap JPDA
- Quan, Hongcai, Peide and Zhou
- Bakhtiar and Alavi
- Uhlmann's permanent approximation

Author: RadarSim Project
"""

import pytest
import numpy as np
import numpy.testing as npt

from ..approx_probs import (
    cheap_jpda, quan_cheap_jpda, bakhtiar_alavi,
    uhlmann_permanent, compute_approx_assoc_probs
)
from ..exact_probs import exact_assoc_probs
from ..likelihood import LikelihoodMatrix
from ..permanent import ExactPermanent, RowSumPermanentBound
from ...constants import ApproximationType
from ...validators import UnknownSelectorError, InvalidArgumentError


ALL_APPROXIMATIONS = list(ApproximationType)


class TestCheapJPDA:
    """Test Fitzgerald's cheap JPDA."""

    def test_hand_computed(self, shared_likelihoods):
        """Test against the closed form."""
        beta = cheap_jpda(LikelihoodMatrix.from_augmented(shared_likelihoods))

        npt.assert_allclose(beta, [[1 / 2, 1 / 6, 1 / 3],
                                   [2 / 7, 0.0, 5 / 7]], rtol=1e-12)

    def test_missed_is_remaining_mass(self, random_likelihoods):
        """Test the missed-detection column completes each row."""
        beta = cheap_jpda(LikelihoodMatrix.from_augmented(random_likelihoods()))
        npt.assert_allclose(beta[:, -1], 1.0 - beta[:, :-1].sum(axis=1))
        assert np.all(beta[:, -1] > 0)


class TestQuanCheapJPDA:
    """Test the modified cheap JPDA."""

    def test_hand_computed(self, shared_likelihoods):
        """Test against the closed form."""
        beta = quan_cheap_jpda(LikelihoodMatrix.from_augmented(shared_likelihoods))

        npt.assert_allclose(beta, [[1 / 2, 1 / 6, 1 / 3],
                                   [10 / 31, 0.0, 21 / 31]], rtol=1e-12)

    def test_target_without_measurements(self):
        """Test a target gating nothing does not poison the others."""
        A = np.array([[3.0, 0.0, 1.0, 0.0],
                      [0.0, 0.0, 0.0, 2.0]])
        beta = quan_cheap_jpda(LikelihoodMatrix.from_augmented(A))

        assert np.all(np.isfinite(beta))
        npt.assert_allclose(beta[1], [0.0, 0.0, 1.0])
        npt.assert_allclose(beta[0], [0.75, 0.0, 0.25])


class TestBakhtiarAlavi:
    """Test the product-of-sums algorithm."""

    def test_exact_for_two_targets(self, shared_likelihoods):
        """Test against the exact JPDA."""
        beta = bakhtiar_alavi(LikelihoodMatrix.from_augmented(shared_likelihoods))
        npt.assert_allclose(beta, [[0.4, 0.3, 0.3],
                                   [0.4, 0.0, 0.6]], rtol=1e-12)

    def test_crossing_two_targets(self, crossing_likelihoods):
        """Test exactness when both targets gate both measurements."""
        beta = bakhtiar_alavi(LikelihoodMatrix.from_augmented(crossing_likelihoods))
        npt.assert_allclose(beta, exact_assoc_probs(crossing_likelihoods), rtol=1e-12)


class TestUhlmannPermanent:
    """Test the permanent-based approximation."""

    def test_exact_with_exact_permanent(self, random_likelihoods):
        """Test exact permanents reproduce the JPDA for any target count."""
        A = random_likelihoods(num_tar=4, num_meas=3)
        beta = uhlmann_permanent(LikelihoodMatrix.from_augmented(A), ExactPermanent())
        npt.assert_allclose(beta, exact_assoc_probs(A), rtol=1e-10)

    def test_row_sum_bound_matches_bakhtiar_alavi(self, random_likelihoods):
        """Test the row-sum bound reduces to the product-of-sums algorithm."""
        lm = LikelihoodMatrix.from_augmented(random_likelihoods())
        npt.assert_allclose(uhlmann_permanent(lm, RowSumPermanentBound()),
                            bakhtiar_alavi(lm), rtol=1e-10)

    def test_default_bound(self, crossing_likelihoods):
        """Test the default bound is exact for two targets."""
        beta = uhlmann_permanent(LikelihoodMatrix.from_augmented(crossing_likelihoods))
        npt.assert_allclose(beta, exact_assoc_probs(crossing_likelihoods), rtol=1e-12)


class TestComputeApproxAssocProbs:
    """Properties shared by all approximations."""

    @pytest.mark.parametrize("approx_type", ALL_APPROXIMATIONS)
    def test_rows_sum_to_one(self, approx_type, random_likelihoods, assert_probabilities_valid):
        """Test every row is a probability distribution."""
        for num_tar, num_meas in [(1, 3), (3, 4), (5, 2)]:
            beta = compute_approx_assoc_probs(random_likelihoods(num_tar, num_meas), approx_type)
            assert beta.shape == (num_tar, num_meas + 1)
            assert_probabilities_valid(beta)

    @pytest.mark.parametrize("approx_type", ALL_APPROXIMATIONS)
    def test_single_target_is_exact(self, approx_type, single_target_likelihoods):
        """Test there is no approximation error without competition."""
        beta = compute_approx_assoc_probs(single_target_likelihoods, approx_type)
        npt.assert_allclose(beta, [[2 / 8, 5 / 8, 1 / 8]], rtol=1e-12)
        npt.assert_allclose(beta, exact_assoc_probs(single_target_likelihoods), rtol=1e-12)

    @pytest.mark.parametrize("approx_type", [ApproximationType.BAKHTIAR_ALAVI,
                                             ApproximationType.UHLMANN])
    def test_exact_for_two_targets(self, approx_type, random_likelihoods):
        """Test the product and permanent algorithms are exact for two targets."""
        A = random_likelihoods(num_tar=2, num_meas=4)
        npt.assert_allclose(compute_approx_assoc_probs(A, approx_type),
                            exact_assoc_probs(A), rtol=1e-10, atol=1e-14)

    @pytest.mark.parametrize("approx_type", ALL_APPROXIMATIONS)
    def test_idempotent(self, approx_type, random_likelihoods):
        """Test repeated calls give identical results."""
        A = random_likelihoods()
        A_copy = A.copy()

        first = compute_approx_assoc_probs(A, approx_type)
        second = compute_approx_assoc_probs(A, approx_type)

        npt.assert_array_equal(first, second)
        npt.assert_array_equal(A, A_copy)

    @pytest.mark.parametrize("approx_type", ALL_APPROXIMATIONS)
    def test_no_measurements(self, approx_type, missed_only_likelihoods):
        """Test all targets are missed with certainty."""
        beta = compute_approx_assoc_probs(missed_only_likelihoods, approx_type)
        npt.assert_allclose(beta, np.ones((3, 1)))

    @pytest.mark.parametrize("approx_type", ALL_APPROXIMATIONS)
    def test_separated_targets(self, approx_type, separated_likelihoods,
                               assert_probabilities_valid):
        """Test well separated targets prefer their own measurements."""
        beta = compute_approx_assoc_probs(separated_likelihoods, approx_type)

        assert np.argmax(beta[0]) == 0
        assert np.argmax(beta[1]) == 1
        npt.assert_allclose(beta, exact_assoc_probs(separated_likelihoods), rtol=1e-12)
        assert_probabilities_valid(beta)

    def test_default_is_cheap_jpda(self, shared_likelihoods):
        """Test the default approximation."""
        npt.assert_array_equal(compute_approx_assoc_probs(shared_likelihoods),
                               cheap_jpda(LikelihoodMatrix.from_augmented(shared_likelihoods)))

    def test_selector_forms(self, shared_likelihoods):
        """Test integer, enum and name selectors agree."""
        expected = compute_approx_assoc_probs(shared_likelihoods, 1)
        npt.assert_array_equal(compute_approx_assoc_probs(shared_likelihoods, ApproximationType.QUAN),
                               expected)
        npt.assert_array_equal(compute_approx_assoc_probs(shared_likelihoods, "quan"), expected)

    def test_permanent_bound_name(self, crossing_likelihoods):
        """Test the permanent bound can be chosen by name."""
        beta = compute_approx_assoc_probs(crossing_likelihoods, 3, permanent_bound="exact")
        npt.assert_allclose(beta, exact_assoc_probs(crossing_likelihoods), rtol=1e-12)

    @pytest.mark.parametrize("approx_type", list(ApproximationType))
    def test_invalid_permanent_bound(self, approx_type, shared_likelihoods):
        """Test an unknown permanent bound fails whichever approximation is used."""
        with pytest.raises(UnknownSelectorError, match="ryser"):
            compute_approx_assoc_probs(shared_likelihoods, approx_type, permanent_bound="ryser")

    def test_integral_float_selector(self, shared_likelihoods):
        """Test float codes such as 2.0 select the same approximation as 2."""
        npt.assert_array_equal(compute_approx_assoc_probs(shared_likelihoods, np.float64(2.0)),
                               compute_approx_assoc_probs(shared_likelihoods, 2))

    @pytest.mark.parametrize("approx_type", [4, -1, "ryser"])
    def test_invalid_approximation(self, approx_type, shared_likelihoods):
        """Test undefined approximations fail naming the selector."""
        with pytest.raises(UnknownSelectorError, match=str(approx_type)):
            compute_approx_assoc_probs(shared_likelihoods, approx_type)

    def test_invalid_approximation_is_invalid_argument(self, shared_likelihoods):
        """Test the error belongs to the invalid argument family."""
        with pytest.raises(InvalidArgumentError):
            compute_approx_assoc_probs(shared_likelihoods, 9)
