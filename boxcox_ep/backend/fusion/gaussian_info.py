"""
Scalar Gaussian operations in information (natural parameter) form.

Beliefs are represented in canonical coordinates θ = (Λ, η) with Λ = 1/σ²,
η = μ/σ². In these coordinates:
- Multiplying beliefs is EXACT addition of natural parameters
- Dividing out a cavity is EXACT subtraction of natural parameters
- Moment matching maps (E[x], E[x²]) back to θ

Division is the only step that can leave the proper domain (Λ <= 0). With
force_proper the result is projected back to a tiny positive precision that
preserves the matched marginal mean when multiplied back into the cavity.
"""

import math
from typing import Union

import numpy as np
from scipy.stats import norm

from boxcox_ep.common import constants
from boxcox_ep.common.belief import GaussianBelief
from boxcox_ep.common.errors import InvalidInput


BeliefOrScalar = Union[GaussianBelief, float, int]


def is_uninformative(belief: GaussianBelief) -> bool:
    return belief.is_uniform


def is_degenerate(belief: GaussianBelief) -> bool:
    return belief.is_point_mass


def mean_of(belief: GaussianBelief) -> float:
    """Representative scalar: the point value if degenerate, else the mean."""
    if belief.is_point_mass:
        return float(belief.point)
    return belief.mean


def observed_value(value: BeliefOrScalar) -> float:
    """
    Collapse an observed argument to a scalar.

    Scalars pass through; a belief-valued observation is linearized at its
    mean (not marginalized).
    """
    if isinstance(value, GaussianBelief):
        if not value.has_moments:
            raise InvalidInput(f"observed_value: belief without a mean cannot stand in for an observation: {value!r}")
        return mean_of(value)
    return float(value)


def make_belief(mean: float, variance: float) -> GaussianBelief:
    return GaussianBelief.from_mean_variance(mean, variance)


def make_belief_natural(precision_mean: float, precision: float) -> GaussianBelief:
    return GaussianBelief.from_natural(precision_mean, precision)


def log_density(belief: GaussianBelief, x):
    """
    Log-density of `belief` at x (scalar or array).

    - proper: normal log-pdf
    - point mass: 0 at the point, -inf elsewhere
    - uninformative / improper: unnormalized kernel η·x - ½Λx²
      (exactly 0 for an uninformative belief)
    """
    scalar_in = np.ndim(x) == 0
    x = np.asarray(x, dtype=float)

    if belief.is_proper:
        out = norm.logpdf(x, loc=belief.mean, scale=math.sqrt(belief.variance))
    elif belief.is_point_mass:
        out = np.where(x == belief.point, 0.0, -np.inf)
    else:
        out = belief.precision_mean * x - 0.5 * belief.precision * x * x

    return float(out) if scalar_in else np.asarray(out, dtype=float)


def multiply(a: GaussianBelief, b: GaussianBelief) -> GaussianBelief:
    """Product of two beliefs (natural parameters add)."""
    if a.is_point_mass and b.is_point_mass:
        if a.point != b.point:
            raise ValueError(f"multiply: conflicting point masses {a.point} and {b.point}")
        return a
    if a.is_point_mass:
        return a
    if b.is_point_mass:
        return b
    return GaussianBelief.from_natural(
        a.precision_mean + b.precision_mean,
        a.precision + b.precision,
    )


def divide(
    marginal: GaussianBelief,
    cavity: GaussianBelief,
    force_proper: bool = False,
    precision_floor: float = constants.DIVIDE_PRECISION_FLOOR,
) -> GaussianBelief:
    """
    Ratio marginal / cavity: the message that, multiplied into `cavity`,
    reproduces `marginal`.

    With force_proper, a non-positive precision difference is clamped to
    `precision_floor` and η is chosen so that (cavity × message) keeps the
    marginal mean. The result is then effectively uninformative.
    """
    if marginal.is_point_mass:
        return marginal
    if cavity.is_point_mass:
        # Nothing can be isolated from a point-mass cavity.
        return GaussianBelief.uniform()
    if cavity.is_uniform:
        return marginal

    precision = marginal.precision - cavity.precision
    precision_mean = marginal.precision_mean - cavity.precision_mean

    if force_proper and precision <= 0.0:
        precision = float(precision_floor)
        if marginal.is_proper:
            precision_mean = (cavity.precision + precision) * marginal.mean - cavity.precision_mean
        else:
            precision_mean = 0.0

    return GaussianBelief.from_natural(precision_mean, precision)


def moment_match(first: float, second: float, min_variance: float) -> GaussianBelief:
    """Gaussian with mean E[x] and variance max(E[x²] - E[x]², min_variance)."""
    variance = second - first * first
    if not variance >= min_variance:
        # Also catches NaN from cancellation on huge moments.
        variance = min_variance
    return GaussianBelief.from_mean_variance(first, variance)
