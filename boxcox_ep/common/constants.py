"""
Box-Cox EP numeric constants only.

=============================================================================
CONVENTION QUICK REFERENCE
=============================================================================

TRANSFORM:
  z = BoxCox(y, λ) = (y^λ - 1) / λ      for |λ| >= BOXCOX_ZERO_LAMBDA_EPS
                   = ln y               otherwise
  y must be strictly positive and finite.

JACOBIAN FACTOR:
  w(λ) = exp((λ - 1) · S),  S = Σ ln y_i  (sum of logs, a scalar)

BELIEFS:
  Natural parameters (precision, precision_mean) = (1/σ², μ/σ²)
  Uninformative: precision == 0
  Point mass:    precision == +inf (value carried separately)
=============================================================================
"""

# =============================================================================
# TRANSFORM (removable singularity at λ = 0)
# =============================================================================

BOXCOX_ZERO_LAMBDA_EPS = 1e-8  # |λ| below this evaluates ln y
BOXCOX_DERIVATIVE_ZERO_LAMBDA_EPS = 1e-6  # |λ| below this uses ½(ln y)²

# =============================================================================
# NEWTON INVERSION (bounded, best-effort)
# =============================================================================

BOXCOX_INVERT_MAX_ITER = 50
BOXCOX_INVERT_TOL = 1e-8  # |BoxCox(y, λ) - target| convergence threshold
BOXCOX_INVERT_DERIVATIVE_FLOOR = 1e-10  # Stop when |dz/dλ| falls below
BOXCOX_INVERT_LAMBDA_BOUND = 20.0  # λ clamped to [-bound, +bound] each step

# =============================================================================
# QUADRATURE (composite Simpson over a truncated window)
# =============================================================================

QUAD_TRUNCATION_STD_DEVS = 6.0  # Half-width of window in σ_λ
QUAD_INTEGRATION_STEPS = 240  # Must be even for Simpson; odd values are bumped
QUAD_MIN_VARIANCE = 1e-8  # Floor on λ variance and matched message variance
QUAD_POINT_MASS_VARIANCE = 1e-6  # Width used for a point-mass output likelihood

# Used when the λ belief exposes no usable (mean, variance)
QUAD_FALLBACK_MEAN = 0.0
QUAD_FALLBACK_VARIANCE = 1e2

# Smallest positive subnormal double; stands in for an underflowed integral in logs
QUAD_INTEGRAL_EPS = 5e-324

# =============================================================================
# JACOBIAN FACTOR
# =============================================================================

JACOBIAN_MIN_VARIANCE = 1e-12  # Floor on log-normal value-message variance

# =============================================================================
# BELIEF DIVISION
# =============================================================================

# Precision assigned when a forced-proper ratio would be non-positive.
# Tiny but positive: the message is effectively uninformative.
DIVIDE_PRECISION_FLOOR = 1e-12
