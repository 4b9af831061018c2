import os
import sys
import pytest
from typing import Dict, Any

# Ensure local package import works for pytest collection.
_TEST_DIR = os.path.dirname(__file__)
_PKG_ROOT = os.path.abspath(os.path.join(_TEST_DIR, ".."))
if _PKG_ROOT not in sys.path:
    sys.path.insert(0, _PKG_ROOT)

# =============================================================================
# Config Fixtures
# =============================================================================
# These fixtures load the shipped base configuration, so tests exercise the
# same parameter values a host engine would load.


def _load_yaml_file(path: str) -> Dict[str, Any]:
    """Load a YAML config file, handling the boxcox_ep: wrapper."""
    import yaml
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if "boxcox_ep" in data:
        return data["boxcox_ep"] or {}
    return data


@pytest.fixture
def base_config_path() -> str:
    return os.path.join(_PKG_ROOT, "config", "boxcox_ep_base.yaml")


@pytest.fixture
def base_config(base_config_path) -> Dict[str, Any]:
    """
    Raw mapping from config/boxcox_ep_base.yaml.

    Usage:
        def test_something(base_config):
            assert base_config["quadrature"]["integration_steps"] == 240
    """
    if not os.path.exists(base_config_path):
        pytest.skip("boxcox_ep_base.yaml not found")
    return _load_yaml_file(base_config_path)


@pytest.fixture
def default_params():
    from boxcox_ep.common.param_models import BoxCoxParams
    return BoxCoxParams()


# =============================================================================
# Belief Fixtures
# =============================================================================


@pytest.fixture
def uniform():
    from boxcox_ep.common.belief import GaussianBelief
    return GaussianBelief.uniform()


@pytest.fixture
def wide_lambda():
    """λ ~ N(0, 4), the prior used by the reference model."""
    from boxcox_ep.common.belief import GaussianBelief
    return GaussianBelief.from_mean_variance(0.0, 4.0)


@pytest.fixture
def observations():
    """Positive responses used by the reference model."""
    return [1.2, 3.5, 2.7, 4.1, 2.0]
