"""
Common package for boxcox_ep.

Shared belief type, configuration, constants and audit records used by the
backend operators.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "GaussianBelief",
    "OpReport",
    "InvalidInput",
    "UnsupportedRequest",
    "BoxCoxParams",
    "constants",
]

_LAZY_ATTRS: dict[str, tuple[str, str | None]] = {
    "GaussianBelief": ("boxcox_ep.common.belief", "GaussianBelief"),
    "OpReport": ("boxcox_ep.common.op_report", "OpReport"),
    "InvalidInput": ("boxcox_ep.common.errors", "InvalidInput"),
    "UnsupportedRequest": ("boxcox_ep.common.errors", "UnsupportedRequest"),
    "BoxCoxParams": ("boxcox_ep.common.param_models", "BoxCoxParams"),
    # Expose as submodule without eager import.
    "constants": ("boxcox_ep.common.constants", None),
}


def __getattr__(name: str) -> Any:
    target = _LAZY_ATTRS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = import_module(module_name)
    return module if attr_name is None else getattr(module, attr_name)


def __dir__() -> list[str]:
    return sorted(set(globals().keys()) | set(_LAZY_ATTRS.keys()))
