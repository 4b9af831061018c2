"""
YAML configuration loading for Box-Cox EP operators.

Files may wrap parameters under a top-level `boxcox_ep:` key (as the shipped
config/boxcox_ep_base.yaml does) or provide the sections directly.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

import yaml

from boxcox_ep.common.param_models import BoxCoxParams

_logger = logging.getLogger(__name__)

CONFIG_ROOT_KEY = "boxcox_ep"


def load_yaml_file(path: str) -> Dict[str, Any]:
    """Load a YAML config file, unwrapping the `boxcox_ep:` section if present."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")

    if CONFIG_ROOT_KEY in data:
        data = data[CONFIG_ROOT_KEY] or {}
    return data


def params_from_dict(data: Dict[str, Any]) -> BoxCoxParams:
    """Validate a plain mapping into BoxCoxParams (raises pydantic.ValidationError)."""
    return BoxCoxParams.model_validate(data)


def load_params(path: str) -> BoxCoxParams:
    """Load and validate operator parameters from a YAML file."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"boxcox_ep config not found: {path}")
    params = params_from_dict(load_yaml_file(path))
    _logger.debug(f"Loaded boxcox_ep params from {path}: {params.model_dump()}")
    return params


def default_config_path() -> str:
    """Path of the base config shipped in the source tree."""
    pkg_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(pkg_dir), "config", "boxcox_ep_base.yaml")
