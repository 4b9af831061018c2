"""
Scalar Gaussian belief utilities for boxcox_ep.

Import from `boxcox_ep.backend.fusion.gaussian_info` directly, or rely on lazy
attribute access via this package.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "is_uninformative",
    "is_degenerate",
    "mean_of",
    "observed_value",
    "make_belief",
    "make_belief_natural",
    "log_density",
    "multiply",
    "divide",
    "moment_match",
]

_LAZY_ATTRS: dict[str, tuple[str, str]] = {
    name: ("boxcox_ep.backend.fusion.gaussian_info", name) for name in __all__
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
