"""
Box-Cox EP message operators.

Import specific submodules directly, or rely on lazy attribute access via this
package.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    # Transform math
    "transform",
    "transform_array",
    "derivative",
    "invert",
    "jacobian_factor",
    "sum_log",
    "geometric_mean",
    "standardize",
    # Quadrature
    "IntegralStats",
    "compute_integral_stats",
    # Factors
    "TransformFactor",
    "JacobianFactor",
    # Dispatch
    "FactorKind",
    "Role",
    "build_dispatch_table",
    "dispatch",
]

_LAZY_ATTRS: dict[str, tuple[str, str]] = {
    "transform": ("boxcox_ep.backend.operators.boxcox_math", "transform"),
    "transform_array": ("boxcox_ep.backend.operators.boxcox_math", "transform_array"),
    "derivative": ("boxcox_ep.backend.operators.boxcox_math", "derivative"),
    "invert": ("boxcox_ep.backend.operators.boxcox_math", "invert"),
    "jacobian_factor": ("boxcox_ep.backend.operators.boxcox_math", "jacobian_factor"),
    "sum_log": ("boxcox_ep.backend.operators.boxcox_math", "sum_log"),
    "geometric_mean": ("boxcox_ep.backend.operators.boxcox_math", "geometric_mean"),
    "standardize": ("boxcox_ep.backend.operators.boxcox_math", "standardize"),
    "IntegralStats": ("boxcox_ep.backend.operators.quadrature", "IntegralStats"),
    "compute_integral_stats": ("boxcox_ep.backend.operators.quadrature", "compute_integral_stats"),
    "TransformFactor": ("boxcox_ep.backend.operators.transform_op", "TransformFactor"),
    "JacobianFactor": ("boxcox_ep.backend.operators.jacobian_op", "JacobianFactor"),
    "FactorKind": ("boxcox_ep.backend.operators.dispatch", "FactorKind"),
    "Role": ("boxcox_ep.backend.operators.dispatch", "Role"),
    "build_dispatch_table": ("boxcox_ep.backend.operators.dispatch", "build_dispatch_table"),
    "dispatch": ("boxcox_ep.backend.operators.dispatch", "dispatch"),
}


def __getattr__(name: str) -> Any:
    target = _LAZY_ATTRS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = import_module(module_name)
    return getattr(module, attr_name)


def __dir__() -> list[str]:
    return sorted(set(globals().keys()) | set(_LAZY_ATTRS.keys()))
