"""
tests/unit/test_optimization_request.py - Tests for the request schema.
"""

import copy

import pytest
from pydantic import ValidationError

from fcdesign.optimization import (
    AlgorithmType,
    FuelCellType,
    ObjectiveType,
    OptimizationRequest,
    Range,
    parse_request,
)


BASE_REQUEST = {
    "fuelCellType": "PEM",
    "objective": {"type": "MAXIMIZE_POWER"},
    "constraints": {
        "cellCount": {"min": 10, "max": 100},
        "activeArea": {"min": 10, "max": 500},
        "temperature": {"min": 60, "max": 100},
        "pressure": {"min": 1, "max": 5},
        "fuelFlowRate": {"min": 0.1, "max": 50},
        "airFlowRate": {"min": 1, "max": 500},
    },
    "parameters": {
        "algorithm": "GRADIENT_DESCENT",
        "maxIterations": 50,
        "convergenceTolerance": 0.001,
    },
}


def make_request(**changes):
    data = copy.deepcopy(BASE_REQUEST)
    for key, value in changes.items():
        data[key] = value
    return data


class TestValidRequests:
    """Tests for accepted requests."""

    def test_to_domain(self):
        request = parse_request(make_request(initialGuess={"activeArea": 300, "cellCount": 20}))

        fuel_cell_type, objective, constraints, parameters, overrides = request.to_domain()

        assert fuel_cell_type == FuelCellType.PEM
        assert objective.type == ObjectiveType.MAXIMIZE_POWER
        assert constraints.active_area == Range(10, 500)
        assert constraints.humidity is None
        assert parameters.algorithm == AlgorithmType.GRADIENT_DESCENT
        assert parameters.max_iterations == 50
        assert overrides == {"active_area": 300, "cell_count": 20}

    def test_parameters_default(self):
        data = make_request()
        del data["parameters"]
        _, _, _, parameters, overrides = parse_request(data).to_domain()
        assert parameters.algorithm == AlgorithmType.GENETIC_ALGORITHM
        assert overrides == {}

    def test_materials_and_targets(self):
        data = make_request(objective={
            "type": "MULTI_OBJECTIVE",
            "weights": {"power": 0.7, "cost": 0.3},
            "targets": {"minEfficiency": 45},
        })
        data["constraints"]["availableMaterials"] = {"anodeCatalysts": ["pt-c", "non-pgm"]}

        _, objective, constraints, _, _ = parse_request(data).to_domain()

        assert objective.weights.power == 0.7
        assert objective.weights.efficiency is None
        assert objective.targets.min_efficiency == 45
        assert constraints.allowed_materials("anode_catalyst") == ("pt-c", "non-pgm")

    def test_fallback_algorithms_accepted(self):
        data = make_request(parameters={"algorithm": "SIMULATED_ANNEALING", "temperatureSchedule": "LINEAR"})
        request = OptimizationRequest.model_validate(data)
        assert request.parameters.algorithm == AlgorithmType.SIMULATED_ANNEALING


class TestInvalidRequests:
    """Tests for rejected requests."""

    def test_unknown_fuel_cell_type(self):
        with pytest.raises(ValidationError):
            parse_request(make_request(fuelCellType="DMFC"))

    @pytest.mark.parametrize("parameters", [
        {"maxIterations": 5},
        {"maxIterations": 5000},
        {"convergenceTolerance": 0.5},
        {"populationSize": 3},
        {"algorithm": "HILL_CLIMBING"},
    ])
    def test_parameter_ranges(self, parameters):
        with pytest.raises(ValidationError):
            parse_request(make_request(parameters=parameters))

    def test_weight_out_of_range(self):
        objective = {"type": "MULTI_OBJECTIVE", "weights": {"power": 1.5}}
        with pytest.raises(ValidationError):
            parse_request(make_request(objective=objective))

    def test_efficiency_target_above_100(self):
        objective = {"type": "MAXIMIZE_EFFICIENCY", "targets": {"minEfficiency": 120}}
        with pytest.raises(ValidationError):
            parse_request(make_request(objective=objective))

    def test_inverted_box(self):
        data = make_request()
        data["constraints"]["cellCount"] = {"min": 100, "max": 10}

        with pytest.raises(ValidationError) as exc_info:
            parse_request(data)
        assert "Invalid cell_count range" in str(exc_info.value)

    def test_cell_count_minimum(self):
        data = make_request()
        data["constraints"]["cellCount"] = {"min": 0, "max": 10}
        with pytest.raises(ValidationError):
            parse_request(data)

    def test_empty_material_list(self):
        data = make_request()
        data["constraints"]["availableMaterials"] = {"anodeCatalysts": []}

        with pytest.raises(ValidationError) as exc_info:
            parse_request(data)
        assert "anode catalyst" in str(exc_info.value)

    def test_multi_objective_needs_weight(self):
        objective = {"type": "MULTI_OBJECTIVE", "weights": {"power": 0, "cost": 0}}
        with pytest.raises(ValidationError) as exc_info:
            parse_request(make_request(objective=objective))
        assert "non-zero weight" in str(exc_info.value)

    def test_multi_objective_without_weights(self):
        with pytest.raises(ValidationError):
            parse_request(make_request(objective={"type": "MULTI_OBJECTIVE"}))

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            parse_request(make_request(seedling=1))
