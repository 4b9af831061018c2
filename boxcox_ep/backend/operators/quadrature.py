"""
Quadrature engine for the Box-Cox transform factor.

Approximates, with the λ belief as prior, the tilted integrals

    Z      = ∫ N(λ; m, v) · p_z(BoxCox(y, λ)) dλ
    E[λ^k] = (1/Z) ∫ λ^k   N(λ; m, v) · p_z(BoxCox(y, λ)) dλ      k = 1, 2
    E[z^k] = (1/Z) ∫ z(λ)^k N(λ; m, v) · p_z(BoxCox(y, λ)) dλ     k = 1, 2

by composite Simpson's rule over [m - kσ, m + kσ].

Key invariants:
- Log weights are max-subtracted before exponentiation; log Z is reassembled
  additively (max_logw + ln integral), so wide windows never underflow to 0
- Step count is forced even (Simpson parity)
- A point-mass λ short-circuits to the deterministic transform value
- A non-positive / non-finite integral (or non-finite moments) falls back to
  moments at the λ mean; the fallback log Z is an approximation, not a bound
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from boxcox_ep.common import constants
from boxcox_ep.common.belief import GaussianBelief
from boxcox_ep.common.op_report import OpReport
from boxcox_ep.common.param_models import QuadratureParams
from boxcox_ep.backend.fusion.gaussian_info import log_density
from boxcox_ep.backend.operators.boxcox_math import transform, transform_array

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntegralStats:
    """
    Ephemeral quadrature result; built fresh per invocation.

    `norm` is the integral in the rescaled domain (weights divided by
    exp(max_logw)); `log_normalizer` is the unscaled ln Z.
    """
    norm: float
    lambda_mean: float
    lambda_second_moment: float
    z_mean: float
    z_second_moment: float
    log_normalizer: float
    fallback: bool = False
    report: Optional[OpReport] = field(default=None, compare=False, repr=False)

    @property
    def lambda_variance(self) -> float:
        return self.lambda_second_moment - self.lambda_mean * self.lambda_mean

    @property
    def z_variance(self) -> float:
        return self.z_second_moment - self.z_mean * self.z_mean


def output_log_likelihood(z_belief: GaussianBelief, z, point_mass_variance: float):
    """
    Log-likelihood of transformed value(s) z under the output belief.

    Uninformative → 0. A point-mass output is treated as a narrow Gaussian of
    variance `point_mass_variance` centred on the point, not as exact equality.
    """
    if z_belief.is_uniform:
        return 0.0 if np.ndim(z) == 0 else np.zeros(np.shape(z), dtype=float)
    if z_belief.is_point_mass:
        narrow = GaussianBelief.from_mean_variance(z_belief.point, point_mass_variance)
        return log_density(narrow, z)
    return log_density(z_belief, z)


def simpson_coefficients(steps: int) -> np.ndarray:
    """Composite Simpson coefficients 1, 4, 2, 4, ..., 2, 4, 1 for an even step count."""
    if steps < 2 or steps % 2 == 1:
        raise ValueError(f"simpson_coefficients: steps must be even and >= 2, got {steps}")
    coeff = np.ones(steps + 1, dtype=float)
    coeff[1:-1:2] = 4.0
    coeff[2:-1:2] = 2.0
    return coeff


def _point_mass_stats(
    lambda_belief: GaussianBelief,
    z_belief: GaussianBelief,
    y: float,
    params: QuadratureParams,
) -> IntegralStats:
    lam = float(lambda_belief.point)
    z = transform(y, lam)
    log_like = float(output_log_likelihood(z_belief, z, params.point_mass_variance))

    triggers = ["PointMassLikelihood"] if z_belief.is_point_mass else []
    report = OpReport(
        name="BoxCoxQuadrature",
        exact=not triggers,
        approximation_triggers=triggers,
        family_in="PointMass",
        family_out="PointMass",
        closed_form=True,
        metrics={"lambda": lam, "z": z, "log_normalizer": log_like},
        notes="Point-mass λ: deterministic transform, no integration",
    )
    return IntegralStats(
        norm=1.0,
        lambda_mean=lam,
        lambda_second_moment=lam * lam,
        z_mean=z,
        z_second_moment=z * z,
        log_normalizer=log_like,
        report=report,
    )


def compute_integral_stats(
    lambda_belief: GaussianBelief,
    z_belief: GaussianBelief,
    y: float,
    params: Optional[QuadratureParams] = None,
) -> IntegralStats:
    """
    Zero-th, first and second moments of λ and z = BoxCox(y, λ) under the
    tilted distribution N(λ; λ_belief) · p_z(z).

    Args:
        lambda_belief: Belief over λ (prior for the integral)
        z_belief: Belief over the transform output (likelihood term)
        y: Positive observation
        params: Quadrature configuration (defaults from constants)

    Returns:
        IntegralStats with an attached OpReport
    """
    params = params or QuadratureParams()

    if lambda_belief.is_point_mass:
        return _point_mass_stats(lambda_belief, z_belief, y, params)

    triggers = ["Quadrature", "Truncation"]
    if lambda_belief.is_proper:
        mean_lambda, var_lambda = lambda_belief.mean_variance()
        prior = lambda_belief
    else:
        mean_lambda, var_lambda = params.fallback_mean, params.fallback_variance
        prior = GaussianBelief.from_mean_variance(mean_lambda, var_lambda)
        triggers.append("FallbackPrior")

    variance_floored = var_lambda < params.min_variance
    if variance_floored:
        var_lambda = params.min_variance
        prior = GaussianBelief.from_mean_variance(mean_lambda, var_lambda)
        triggers.append("VarianceFloor")
    sigma_lambda = math.sqrt(var_lambda)

    half_width = params.truncation_std_devs * sigma_lambda
    lower = mean_lambda - half_width
    upper = mean_lambda + half_width
    steps = params.even_steps
    h = (upper - lower) / steps

    lambdas = lower + h * np.arange(steps + 1, dtype=float)
    zs = transform_array(y, lambdas)
    log_w = log_density(prior, lambdas) + output_log_likelihood(z_belief, zs, params.point_mass_variance)
    log_w = np.where(np.isnan(log_w), -np.inf, log_w)
    max_log_w = float(np.max(log_w))

    integral = 0.0
    moments = (math.nan, math.nan, math.nan, math.nan)
    if math.isfinite(max_log_w):
        weights = simpson_coefficients(steps) * np.exp(log_w - max_log_w)
        active = weights > 0.0
        w = weights[active]
        lam_a = lambdas[active]
        z_a = zs[active]
        with np.errstate(over="ignore", invalid="ignore"):
            sum_w = float(np.sum(w))
            moments = (
                float(np.sum(w * lam_a)),
                float(np.sum(w * lam_a * lam_a)),
                float(np.sum(w * z_a)),
                float(np.sum(w * z_a * z_a)),
            )
        integral = sum_w * h / 3.0

    metrics = {
        "steps": steps,
        "half_width": half_width,
        "max_log_weight": max_log_w,
        "integral": integral,
    }

    degenerate = (
        not math.isfinite(integral)
        or integral <= 0.0
        or not all(math.isfinite(m) for m in moments)
    )
    if degenerate:
        fallback_z = transform(y, mean_lambda)
        safe_integral = integral if integral > constants.QUAD_INTEGRAL_EPS else constants.QUAD_INTEGRAL_EPS
        log_normalizer = max_log_w + math.log(safe_integral)
        _logger.warning(
            f"Box-Cox quadrature degenerate (integral={integral}, max_log_w={max_log_w}); "
            f"falling back to moments at λ mean {mean_lambda}"
        )
        report = OpReport(
            name="BoxCoxQuadrature",
            exact=False,
            approximation_triggers=triggers + ["DegenerateIntegralFallback"],
            family_in="Gaussian",
            family_out="Gaussian",
            closed_form=True,
            domain_projection=True,
            metrics=metrics,
            notes="Fallback log-normalizer is an approximation, not a verified lower bound",
        )
        return IntegralStats(
            norm=constants.QUAD_INTEGRAL_EPS,
            lambda_mean=mean_lambda,
            lambda_second_moment=mean_lambda * mean_lambda + var_lambda,
            z_mean=fallback_z,
            z_second_moment=fallback_z * fallback_z + params.min_variance,
            log_normalizer=log_normalizer,
            fallback=True,
            report=report,
        )

    lambda_sum, lambda_sq_sum, z_sum, z_sq_sum = moments
    lambda_mean = lambda_sum / sum_w
    z_mean = z_sum / sum_w
    # Central moments never drop below the variance floor (cancellation guard).
    lambda_second = max(lambda_sq_sum / sum_w, lambda_mean * lambda_mean + params.min_variance)
    z_second = max(z_sq_sum / sum_w, z_mean * z_mean + params.min_variance)

    report = OpReport(
        name="BoxCoxQuadrature",
        exact=False,
        approximation_triggers=triggers,
        family_in="Gaussian",
        family_out="Gaussian",
        closed_form=True,
        domain_projection=variance_floored,
        metrics=metrics,
    )
    return IntegralStats(
        norm=integral,
        lambda_mean=lambda_mean,
        lambda_second_moment=lambda_second,
        z_mean=z_mean,
        z_second_moment=z_second,
        log_normalizer=max_log_w + math.log(integral),
        report=report,
    )
