"""
Tests for Box-Cox transform math: transform, derivative, inversion and the
Jacobian helpers.
"""

import math

import numpy as np
import pytest

from boxcox_ep.common.errors import InvalidInput
from boxcox_ep.common.param_models import InversionParams
from boxcox_ep.backend.operators.boxcox_math import (
    derivative,
    geometric_mean,
    invert,
    jacobian_factor,
    standardize,
    sum_log,
    transform,
    transform_array,
)


class TestTransform:

    def test_known_values(self):
        assert transform(2.0, 1.0) == pytest.approx(1.0)
        assert transform(2.0, 0.5) == pytest.approx((math.sqrt(2.0) - 1.0) / 0.5)
        assert transform(4.0, -1.0) == pytest.approx(0.75)

    def test_zero_lambda_is_log(self):
        assert transform(3.0, 0.0) == pytest.approx(math.log(3.0))

    def test_continuous_across_zero(self):
        """Both branches agree near the removable singularity."""
        for lam in (-2e-8, -5e-9, 5e-9, 2e-8, 1e-6):
            assert transform(2.0, lam) == pytest.approx(math.log(2.0), abs=1e-6)

    def test_unit_observation_maps_to_zero(self):
        for lam in (-3.0, 0.0, 0.7, 4.0):
            assert transform(1.0, lam) == pytest.approx(0.0, abs=1e-15)

    def test_array_matches_scalar(self):
        lams = np.array([-2.0, -1e-9, 0.0, 0.3, 1.5])
        out = transform_array(2.7, lams)
        assert out.shape == lams.shape
        for lam, z in zip(lams, out):
            assert z == pytest.approx(transform(2.7, lam))

    def test_overflow_is_infinite_not_error(self):
        assert transform(1e10, 40.0) == math.inf

    @pytest.mark.parametrize("y", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_observation(self, y):
        with pytest.raises(InvalidInput):
            transform(y, 1.0)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            transform_array(-2.0, np.zeros(3))


class TestDerivative:

    def test_matches_finite_difference(self):
        y, lam, h = 2.5, 0.7, 1e-5
        numeric = (transform(y, lam + h) - transform(y, lam - h)) / (2 * h)
        assert derivative(y, lam) == pytest.approx(numeric, rel=1e-6)

    def test_limit_at_zero(self):
        assert derivative(3.0, 0.0) == pytest.approx(0.5 * math.log(3.0) ** 2)

    def test_continuous_near_zero(self):
        limit = 0.5 * math.log(3.0) ** 2
        assert derivative(3.0, 1e-5) == pytest.approx(limit, abs=1e-4)
        assert derivative(3.0, -1e-5) == pytest.approx(limit, abs=1e-4)

    def test_invalid_observation(self):
        with pytest.raises(InvalidInput):
            derivative(0.0, 1.0)


class TestInvert:

    def test_round_trip(self):
        target = transform(2.0, 0.5)
        assert invert(2.0, target, 0.0) == pytest.approx(0.5, abs=1e-6)

    @pytest.mark.parametrize("lam", [-1.5, -0.2, 0.0, 0.8, 2.0])
    def test_round_trip_grid(self, lam):
        target = transform(3.0, lam)
        assert invert(3.0, target, 0.5) == pytest.approx(lam, abs=1e-6)

    def test_flat_transform_returns_initial_guess(self):
        """y = 1 gives BoxCox ≡ 0, so Newton stops on the derivative floor."""
        assert invert(1.0, 1.0, 0.3) == pytest.approx(0.3)

    def test_already_converged(self):
        assert invert(1.0, 0.0, -0.4) == -0.4

    def test_iterate_stays_bounded(self):
        params = InversionParams(lambda_bound=5.0)
        lam = invert(2.0, 1e6, 0.0, params)
        assert -5.0 <= lam <= 5.0

    def test_iteration_budget(self):
        params = InversionParams(max_iterations=1)
        target = transform(2.0, 1.5)
        one_step = invert(2.0, target, 0.0, params)
        assert one_step != pytest.approx(1.5, abs=1e-8)
        assert invert(2.0, target, 0.0) == pytest.approx(1.5, abs=1e-6)


class TestJacobianHelpers:

    def test_jacobian_factor(self):
        assert jacobian_factor(1.0, 5.0) == 1.0
        assert jacobian_factor(0.0, 2.0) == pytest.approx(math.exp(-2.0))
        assert jacobian_factor(3.0, 0.5) == pytest.approx(math.e)

    def test_sum_log(self):
        assert sum_log([math.e, math.e ** 2]) == pytest.approx(3.0)

    def test_sum_log_rejects_bad_input(self):
        with pytest.raises(InvalidInput):
            sum_log([1.0, 0.0])
        with pytest.raises(InvalidInput):
            sum_log([])

    def test_geometric_mean(self):
        assert geometric_mean([1.0, 4.0]) == pytest.approx(2.0)

    def test_standardize_removes_log_sum(self, observations):
        u = standardize(observations)
        assert u.shape == (len(observations),)
        assert sum_log(u) == pytest.approx(0.0, abs=1e-12)
        assert np.all(u > 0)
