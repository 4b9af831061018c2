"""
Belief representation for Box-Cox EP message operators.

GaussianBelief is a univariate Gaussian in natural-parameter (information) form:

    precision      Λ = 1/σ²
    precision_mean η = μ/σ²

Three states are distinguished explicitly rather than by catching failures:

    uninformative   Λ == 0, η == 0       flat, acts as a multiplicative identity
    point mass      Λ == +inf            all mass at `point`
    proper          0 < Λ < inf          finite mean and positive variance

A finite non-positive Λ with η != 0 is an improper message (legal as an EP
message, but it has no mean/variance). Callers branch on `has_moments`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class GaussianBelief:
    """Univariate Gaussian belief in natural parameters."""
    precision: float
    precision_mean: float
    point: Optional[float] = None

    def __post_init__(self):
        if math.isnan(self.precision) or math.isnan(self.precision_mean):
            raise ValueError(
                f"GaussianBelief: NaN natural parameters ({self.precision}, {self.precision_mean})"
            )
        if self.point is not None and not math.isinf(self.precision):
            raise ValueError("GaussianBelief: point value given for a non point-mass belief")
        if math.isinf(self.precision) and (self.point is None or self.precision < 0):
            raise ValueError("GaussianBelief: point mass requires +inf precision and a point value")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def uniform(cls) -> "GaussianBelief":
        return cls(precision=0.0, precision_mean=0.0)

    @classmethod
    def point_mass(cls, value: float) -> "GaussianBelief":
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"GaussianBelief.point_mass: non-finite value {value}")
        return cls(precision=math.inf, precision_mean=0.0, point=value)

    @classmethod
    def from_mean_variance(cls, mean: float, variance: float) -> "GaussianBelief":
        """
        Build from moments.

        variance == 0 yields a point mass, variance == inf yields uniform.
        """
        mean = float(mean)
        variance = float(variance)
        if variance < 0.0 or math.isnan(variance):
            raise ValueError(f"GaussianBelief.from_mean_variance: invalid variance {variance}")
        if variance == 0.0:
            return cls.point_mass(mean)
        if math.isinf(variance):
            return cls.uniform()
        if not math.isfinite(mean):
            raise ValueError(f"GaussianBelief.from_mean_variance: non-finite mean {mean}")
        precision = 1.0 / variance
        return cls(precision=precision, precision_mean=precision * mean)

    @classmethod
    def from_natural(cls, precision_mean: float, precision: float) -> "GaussianBelief":
        """Build from (η, Λ); argument order follows the usual (mean-times-precision, precision)."""
        return cls(precision=float(precision), precision_mean=float(precision_mean))

    # ------------------------------------------------------------------
    # State predicates
    # ------------------------------------------------------------------

    @property
    def is_point_mass(self) -> bool:
        return math.isinf(self.precision)

    @property
    def is_uniform(self) -> bool:
        return self.precision == 0.0 and self.precision_mean == 0.0

    @property
    def is_proper(self) -> bool:
        return 0.0 < self.precision < math.inf

    @property
    def has_moments(self) -> bool:
        """True when (mean, variance) are available: proper or point mass."""
        return self.is_proper or self.is_point_mass

    # ------------------------------------------------------------------
    # Moments
    # ------------------------------------------------------------------

    @property
    def mean(self) -> float:
        if self.is_point_mass:
            return float(self.point)
        if not self.is_proper:
            raise ValueError("GaussianBelief.mean: improper belief has no mean")
        return self.precision_mean / self.precision

    @property
    def variance(self) -> float:
        if self.is_point_mass:
            return 0.0
        if not self.is_proper:
            raise ValueError("GaussianBelief.variance: improper belief has no variance")
        return 1.0 / self.precision

    def mean_variance(self) -> Tuple[float, float]:
        return self.mean, self.variance

    def __repr__(self) -> str:
        if self.is_point_mass:
            return f"GaussianBelief.point_mass({self.point})"
        if self.is_uniform:
            return "GaussianBelief.uniform()"
        if self.is_proper:
            return f"GaussianBelief(mean={self.mean:.6g}, variance={self.variance:.6g})"
        return f"GaussianBelief(precision={self.precision:.6g}, precision_mean={self.precision_mean:.6g})"
