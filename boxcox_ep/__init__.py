"""
boxcox_ep: expectation-propagation message operators for the Box-Cox transform.

Two factors are covered:
- TransformFactor: z = BoxCox(y, λ), messages by Simpson quadrature + moment matching
- JacobianFactor:  w = exp((λ - 1)·S), messages in closed form

Public names are resolved lazily from their submodules.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    "GaussianBelief",
    "InvalidInput",
    "UnsupportedRequest",
    "BoxCoxParams",
    "load_params",
    "TransformFactor",
    "JacobianFactor",
    "FactorKind",
    "Role",
    "build_dispatch_table",
    "dispatch",
]

_LAZY_ATTRS: dict[str, tuple[str, str]] = {
    "GaussianBelief": ("boxcox_ep.common.belief", "GaussianBelief"),
    "InvalidInput": ("boxcox_ep.common.errors", "InvalidInput"),
    "UnsupportedRequest": ("boxcox_ep.common.errors", "UnsupportedRequest"),
    "BoxCoxParams": ("boxcox_ep.common.param_models", "BoxCoxParams"),
    "load_params": ("boxcox_ep.common.config", "load_params"),
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
