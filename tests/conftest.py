"""
fcdesign Test Configuration and Fixtures

Shared constraint boxes, objectives and a resettable global config.
"""

import pytest

from fcdesign.bootstrap import config as config_module
from fcdesign.bootstrap.config import FCDesignConfig
from fcdesign.optimization import (
    DesignParameters,
    FuelCellType,
    ObjectiveType,
    OptimizationConstraints,
    OptimizationObjective,
    Range,
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep the module-level config from leaking between tests."""
    monkeypatch.setattr(config_module, "_config", FCDesignConfig())
    yield


@pytest.fixture
def pem_constraints():
    """Typical PEM search box, humidity unboxed."""
    return OptimizationConstraints(
        cell_count=Range(10, 100),
        active_area=Range(10, 500),
        temperature=Range(60, 100),
        pressure=Range(1, 5),
        fuel_flow_rate=Range(0.1, 50),
        air_flow_rate=Range(1, 500),
    )


@pytest.fixture
def pem_design():
    """Feasible design inside pem_constraints."""
    return DesignParameters(
        fuel_cell_type=FuelCellType.PEM,
        cell_count=50,
        active_area=200.0,
        operating_temperature=80.0,
        operating_pressure=2.0,
        fuel_flow_rate=10.0,
        air_flow_rate=100.0,
    )


@pytest.fixture
def power_objective():
    return OptimizationObjective(type=ObjectiveType.MAXIMIZE_POWER)


@pytest.fixture
def cost_objective():
    return OptimizationObjective(type=ObjectiveType.MINIMIZE_COST)
