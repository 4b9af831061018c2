"""
EP message operator for the Box-Cox transform factor z = BoxCox(y, λ).

Roles:
    output   z   transformed value (Gaussian belief)
    lambda   λ   transform parameter (Gaussian belief)
    y            observed positive value (scalar, or a belief collapsed to its mean)

Messages are moment-matched from the quadrature engine:
- toward z: the predictive of z under the λ belief, ignoring z's own belief
  (no feedback of the output into its own message)
- toward λ: tilted λ posterior divided by the λ cavity, forced proper
- evidence: log-normalizer of the tilted integral

Every call is a pure function of its arguments.
"""

import logging
import math
from typing import Optional

from boxcox_ep.common.belief import GaussianBelief
from boxcox_ep.common.param_models import QuadratureParams
from boxcox_ep.backend.fusion.gaussian_info import (
    BeliefOrScalar,
    divide,
    moment_match,
    observed_value,
)
from boxcox_ep.backend.operators.boxcox_math import transform
from boxcox_ep.backend.operators.quadrature import (
    IntegralStats,
    compute_integral_stats,
    output_log_likelihood,
)

_logger = logging.getLogger(__name__)


class TransformFactor:
    """
    Message computations for the Box-Cox transform factor.

    Holds only immutable configuration; safe to share across threads.
    """

    kind = "transform"

    def __init__(self, params: Optional[QuadratureParams] = None):
        self.params = params or QuadratureParams()

    def integral_stats(
        self,
        output: GaussianBelief,
        y: BeliefOrScalar,
        lam: GaussianBelief,
    ) -> IntegralStats:
        """Raw quadrature statistics (with OpReport) for diagnostics."""
        return compute_integral_stats(lam, output, observed_value(y), self.params)

    def output_message(self, y: BeliefOrScalar, lam: GaussianBelief) -> GaussianBelief:
        """Message toward the transform output z."""
        y_value = observed_value(y)

        if lam.is_point_mass:
            z = transform(y_value, lam.point)
            if not math.isfinite(z):
                _logger.warning(f"Transform output overflow at λ={lam.point}; returning uniform")
                return GaussianBelief.uniform()
            return GaussianBelief.point_mass(z)
        if lam.is_uniform:
            _logger.debug("Transform output message: uninformative λ, returning uniform")
            return GaussianBelief.uniform()

        stats = compute_integral_stats(lam, GaussianBelief.uniform(), y_value, self.params)
        if not math.isfinite(stats.z_mean):
            _logger.warning(f"Transform output moments overflow (z mean {stats.z_mean}); returning uniform")
            return GaussianBelief.uniform()
        return moment_match(stats.z_mean, stats.z_second_moment, self.params.min_variance)

    def lambda_message(
        self,
        output: GaussianBelief,
        y: BeliefOrScalar,
        lam: GaussianBelief,
    ) -> GaussianBelief:
        """Message toward λ: tilted posterior over λ divided by the λ cavity."""
        y_value = observed_value(y)

        if lam.is_uniform or output.is_uniform:
            _logger.debug("Transform λ message: uninformative input, returning uniform")
            return GaussianBelief.uniform()
        if lam.is_point_mass:
            return GaussianBelief.point_mass(lam.point)

        stats = compute_integral_stats(lam, output, y_value, self.params)
        posterior = moment_match(stats.lambda_mean, stats.lambda_second_moment, self.params.min_variance)
        return divide(posterior, lam, force_proper=True)

    def log_average_factor(
        self,
        output: GaussianBelief,
        y: BeliefOrScalar,
        lam: GaussianBelief,
    ) -> float:
        """Log-evidence contribution of the factor."""
        y_value = observed_value(y)

        if lam.is_uniform:
            return 0.0
        if lam.is_point_mass:
            z = transform(y_value, lam.point)
            return float(output_log_likelihood(output, z, self.params.point_mass_variance))

        return compute_integral_stats(lam, output, y_value, self.params).log_normalizer

    def log_evidence_ratio(
        self,
        output: GaussianBelief,
        y: BeliefOrScalar,
        lam: GaussianBelief,
        to_lambda: Optional[GaussianBelief] = None,
    ) -> float:
        """Same quantity as log_average_factor; `to_lambda` is accepted for signature parity."""
        return self.log_average_factor(output, y, lam)
