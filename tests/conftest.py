import pytest

from cpf_planner.core.scenarios import default_assets, default_profile

START_YEAR = 2026


@pytest.fixture
def profile():
    return default_profile()


@pytest.fixture
def assets():
    return default_assets()


@pytest.fixture
def liquid_rate(assets):
    """Value-weighted growth of the default liquid holdings."""
    total = sum(a.current_value for a in assets)
    return sum(a.current_value * a.projected_appreciation_rate for a in assets) / total
