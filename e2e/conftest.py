import pathlib

import pytest

from schemas.policy import Policy, load_policy

FIXTURES = pathlib.Path(__file__).parents[1] / "fixtures"


@pytest.fixture
def fixtures_dir() -> pathlib.Path:
    return FIXTURES


@pytest.fixture
def scenario_policy() -> Policy:
    """The reference policy: prod x2, flaky x0.5, api 10 / db 20, checkout 5, cap 25."""
    return load_policy({
        "multipliers": {
            "by_environment": {"prod": 2.0},
            "by_failure_type": {"flaky": 0.5},
        },
        "minutes_per_impacted_layer": {"api": 10, "db": 20},
        "module_priority_score": {"checkout": 5},
        "caps": {"per_incident_minutes_max": 25},
    })
