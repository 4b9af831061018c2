"""
Box-Cox transform math.

    z = BoxCox(y, λ) = (y^λ - 1) / λ     (λ ≠ 0)
                     = ln y              (λ → 0, removable singularity)

    dz/dλ = (λ y^λ ln y - (y^λ - 1)) / λ²   →   ½ (ln y)²  as λ → 0

Key invariants:
- y must be strictly positive and finite (InvalidInput otherwise)
- Branch thresholds are small enough that both branches agree to float noise
- Overflow of y^λ yields ±inf rather than an exception
- Inversion is a bounded damped Newton solve, not a bracketing method
"""

import math
from typing import Optional, Sequence

import numpy as np

from boxcox_ep.common import constants
from boxcox_ep.common.errors import InvalidInput
from boxcox_ep.common.param_models import InversionParams


def _check_observation(y: float) -> float:
    y = float(y)
    if not math.isfinite(y) or y <= 0.0:
        raise InvalidInput(f"Box-Cox requires a strictly positive finite observation, got {y}")
    return y


def transform_array(y: float, lam: np.ndarray) -> np.ndarray:
    """Vectorized transform over an array of λ values for a single observation."""
    y = _check_observation(y)
    lam = np.asarray(lam, dtype=float)
    log_y = math.log(y)

    small = np.abs(lam) < constants.BOXCOX_ZERO_LAMBDA_EPS
    lam_safe = np.where(small, 1.0, lam)
    with np.errstate(over="ignore"):
        power_term = np.expm1(lam_safe * log_y) / lam_safe
    return np.where(small, log_y, power_term)


def transform(y: float, lam: float) -> float:
    """Box-Cox transform of a single positive observation."""
    return float(transform_array(y, np.array(float(lam))))


def derivative(y: float, lam: float) -> float:
    """dBoxCox(y, λ)/dλ with the ½(ln y)² limit near λ = 0."""
    y = _check_observation(y)
    lam = float(lam)
    log_y = math.log(y)
    if abs(lam) < constants.BOXCOX_DERIVATIVE_ZERO_LAMBDA_EPS:
        return 0.5 * log_y * log_y

    with np.errstate(over="ignore", invalid="ignore"):
        y_pow = np.exp(lam * log_y)
        numerator = lam * y_pow * log_y - (y_pow - 1.0)
    return float(numerator / (lam * lam))


def invert(
    y: float,
    target: float,
    initial_guess: float = 0.0,
    params: Optional[InversionParams] = None,
) -> float:
    """
    Solve BoxCox(y, λ) = target for λ by damped Newton iteration.

    Stops when the residual is below tolerance, when |dz/dλ| drops below the
    derivative floor, or after max_iterations. λ is clamped to
    [-lambda_bound, lambda_bound] after every step. Returns the current
    estimate in all cases.
    """
    params = params or InversionParams()
    y = _check_observation(y)
    target = float(target)
    lam = float(initial_guess)
    bound = params.lambda_bound

    for _ in range(params.max_iterations):
        residual = transform(y, lam) - target
        if abs(residual) < params.tolerance:
            break

        slope = derivative(y, lam)
        if not math.isfinite(slope) or abs(slope) < params.derivative_floor:
            break

        lam -= residual / slope
        lam = min(max(lam, -bound), bound)

    return lam


def jacobian_factor(lam: float, sum_log_y: float) -> float:
    """Value of the reweighting factor w(λ) = exp((λ - 1)·S)."""
    with np.errstate(over="ignore"):
        return float(np.exp((float(lam) - 1.0) * float(sum_log_y)))


def sum_log(values: Sequence[float]) -> float:
    """S = Σ ln y_i over strictly positive observations."""
    arr = np.asarray(values, dtype=float).reshape(-1)
    if arr.size == 0:
        raise InvalidInput("sum_log: no observations")
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0.0):
        raise InvalidInput("sum_log: observations must be strictly positive and finite")
    return float(np.sum(np.log(arr)))


def geometric_mean(values: Sequence[float]) -> float:
    arr = np.asarray(values, dtype=float).reshape(-1)
    return math.exp(sum_log(arr) / arr.size)


def standardize(values: Sequence[float]) -> np.ndarray:
    """
    Geometric-mean standardization u_i = y_i / GM(y).

    After standardization Σ ln u_i = 0, so the Jacobian factor is constant in
    λ and the transform becomes scale invariant.
    """
    arr = np.asarray(values, dtype=float).reshape(-1)
    return arr / geometric_mean(arr)
