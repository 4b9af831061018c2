"""
Tests for the Box-Cox Jacobian reweighting factor.
"""

import math

import pytest

from boxcox_ep.common.belief import GaussianBelief
from boxcox_ep.common.errors import InvalidInput
from boxcox_ep.backend.fusion.gaussian_info import make_belief
from boxcox_ep.backend.operators.boxcox_math import jacobian_factor, sum_log
from boxcox_ep.backend.operators.jacobian_op import JacobianFactor, jacobian_report


@pytest.fixture
def factor():
    return JacobianFactor()


class TestLambdaMessage:

    @pytest.mark.parametrize("s", [-3.2, 0.5, 2.0, 7.0])
    def test_natural_parameter_shift(self, factor, wide_lambda, s):
        msg = factor.lambda_message(s, wide_lambda)
        assert msg.precision == 0.0
        assert msg.precision_mean == s

    def test_independent_of_lambda(self, factor, wide_lambda):
        assert factor.lambda_message(1.5, wide_lambda) == factor.lambda_message(1.5, GaussianBelief.point_mass(3.0))
        assert factor.lambda_message(1.5) == factor.lambda_message(1.5, wide_lambda)

    def test_zero_sum_is_uniform(self, factor):
        assert factor.lambda_message(0.0).is_uniform

    def test_from_observations(self, factor, observations):
        s = sum_log(observations)
        assert factor.lambda_message(s).precision_mean == pytest.approx(sum(math.log(y) for y in observations))


class TestValueMessage:

    def test_log_normal_mean(self, factor):
        """λ ~ N(0, 1), S = 2: (0 - 1)·2 + ½·1·4 = 0, so E[w] = 1."""
        msg = factor.value_message(make_belief(0.0, 1.0), 2.0)
        assert msg.mean == pytest.approx(1.0, rel=1e-12)
        assert msg.variance == pytest.approx(math.expm1(4.0), rel=1e-9)

    def test_point_mass(self, factor):
        msg = factor.value_message(GaussianBelief.point_mass(0.5), 2.0)
        assert msg.is_point_mass
        assert msg.point == pytest.approx(math.exp(-1.0))

    def test_uniform(self, factor, uniform):
        assert factor.value_message(uniform, 2.0).is_uniform

    def test_improper_lambda(self, factor):
        assert factor.value_message(GaussianBelief.from_natural(1.0, -1.0), 2.0).is_uniform

    def test_variance_floor(self, factor):
        msg = factor.value_message(make_belief(0.0, 1e-20), 1.0)
        assert msg.mean == pytest.approx(math.exp(-1.0))
        assert msg.variance == pytest.approx(factor.params.min_variance)

    def test_overflow_returns_uniform(self, factor):
        assert factor.value_message(make_belief(500.0, 1.0), 2.0).is_uniform

    def test_point_mass_overflow_returns_uniform(self, factor):
        """exp((λ - 1)·S) overflows for λ = 100, S = 100."""
        assert factor.value_message(GaussianBelief.point_mass(100.0), 100.0).is_uniform

    def test_belief_valued_sum(self, factor, wide_lambda):
        expected = factor.value_message(wide_lambda, 0.3)
        assert factor.value_message(wide_lambda, GaussianBelief.point_mass(0.3)) == expected
        assert factor.value_message(wide_lambda, make_belief(0.3, 0.5)) == expected

    def test_non_finite_sum_rejected(self, factor, wide_lambda):
        with pytest.raises(InvalidInput):
            factor.value_message(wide_lambda, math.inf)
        with pytest.raises(InvalidInput):
            factor.lambda_message(math.nan)
        with pytest.raises(InvalidInput):
            factor.value_message(wide_lambda, GaussianBelief.uniform())


class TestEvidence:

    def test_closed_form(self, factor):
        # (0.5 - 1)·2 + ½·0.25·4
        assert factor.log_average_factor(2.0, make_belief(0.5, 0.25)) == pytest.approx(-0.5)

    def test_point_mass_is_exact_log_factor(self, factor):
        value = factor.log_average_factor(1.5, GaussianBelief.point_mass(3.0))
        assert value == pytest.approx(math.log(jacobian_factor(3.0, 1.5)))

    def test_matches_log_of_value_mean(self, factor):
        lam = make_belief(0.3, 0.4)
        assert factor.log_average_factor(1.1, lam) == pytest.approx(math.log(factor.value_message(lam, 1.1).mean))

    def test_uninformative(self, factor, uniform):
        assert factor.log_average_factor(2.0, uniform) == 0.0
        assert factor.log_average_factor(2.0, GaussianBelief.from_natural(1.0, -1.0)) == 0.0

    def test_evidence_ratio_matches_average(self, factor, wide_lambda):
        assert factor.log_evidence_ratio(2.0, wide_lambda) == factor.log_average_factor(2.0, wide_lambda)


class TestReport:

    def test_exact_lambda_message(self, wide_lambda):
        report = jacobian_report(wide_lambda, 2.0)
        report.validate()
        assert report.exact
        assert report.closed_form
        assert report.family_out == "LogNormal"

    def test_moment_matched_value_message(self, wide_lambda):
        report = jacobian_report(wide_lambda, 2.0, moment_matched=True)
        report.validate()
        assert not report.exact
        assert report.approximation_triggers == ["MomentMatch"]

    def test_point_mass_value_is_exact(self):
        report = jacobian_report(GaussianBelief.point_mass(1.0), 2.0, moment_matched=True)
        assert report.exact
        assert report.family_in == "PointMass"
