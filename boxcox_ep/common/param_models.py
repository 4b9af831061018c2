"""Pydantic parameter models for Box-Cox EP operators."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from boxcox_ep.common import constants


class _FrozenParams(BaseModel):
    """Immutable, strict base: operators share one instance across calls."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class QuadratureParams(_FrozenParams):
    """Composite Simpson quadrature over a truncated window of the λ belief."""

    truncation_std_devs: float = Field(constants.QUAD_TRUNCATION_STD_DEVS, gt=0.0)
    integration_steps: int = Field(constants.QUAD_INTEGRATION_STEPS, ge=2)
    min_variance: float = Field(constants.QUAD_MIN_VARIANCE, gt=0.0)
    point_mass_variance: float = Field(constants.QUAD_POINT_MASS_VARIANCE, gt=0.0)
    fallback_mean: float = constants.QUAD_FALLBACK_MEAN
    fallback_variance: float = Field(constants.QUAD_FALLBACK_VARIANCE, gt=0.0)

    @property
    def even_steps(self) -> int:
        """Step count bumped to the next even number (Simpson parity)."""
        steps = int(self.integration_steps)
        return steps + 1 if steps % 2 == 1 else steps


class JacobianParams(_FrozenParams):
    """Closed-form Jacobian reweighting factor."""

    min_variance: float = Field(constants.JACOBIAN_MIN_VARIANCE, gt=0.0)


class InversionParams(_FrozenParams):
    """Damped Newton inversion of the transform in λ."""

    max_iterations: int = Field(constants.BOXCOX_INVERT_MAX_ITER, ge=1)
    tolerance: float = Field(constants.BOXCOX_INVERT_TOL, gt=0.0)
    derivative_floor: float = Field(constants.BOXCOX_INVERT_DERIVATIVE_FLOOR, gt=0.0)
    lambda_bound: float = Field(constants.BOXCOX_INVERT_LAMBDA_BOUND, gt=0.0)


class BoxCoxParams(_FrozenParams):
    """Aggregate configuration for all operators."""

    quadrature: QuadratureParams = Field(default_factory=QuadratureParams)
    jacobian: JacobianParams = Field(default_factory=JacobianParams)
    inversion: InversionParams = Field(default_factory=InversionParams)


DEFAULT_PARAMS = BoxCoxParams()
