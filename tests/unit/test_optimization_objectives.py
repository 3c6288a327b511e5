"""
tests/unit/test_optimization_objectives.py - Tests for the objective model.

Cost and durability formulas, objective signs and soft target checks.
"""

import math

import pytest
from fcdesign.optimization import (
    CostTables,
    DurabilityModel,
    FuelCellType,
    ObjectiveModel,
    ObjectiveTargets,
    ObjectiveType,
    ObjectiveWeights,
    OptimizationObjective,
    OracleAdapter,
)
from fcdesign.optimization.objectives import (
    CATALYST_COSTS,
    MEMBRANE_COSTS,
    OPTIMAL_TEMPERATURES,
)


class FixedOracle:
    """Returns the same prediction for every design."""

    def __init__(self, power=1000.0, efficiency=50.0):
        self.power = power
        self.efficiency = efficiency

    async def predict(self, params):
        return {"predictedPower": self.power, "efficiency": self.efficiency}


def make_model(power=1000.0, efficiency=50.0, fuel_cell_type=FuelCellType.PEM, **kwargs):
    adapter = OracleAdapter(FixedOracle(power, efficiency))
    return ObjectiveModel(adapter, fuel_cell_type, **kwargs)


class TestCost:
    """Tests for ObjectiveModel.cost."""

    def test_default_materials(self, pem_design):
        model = make_model()
        params = pem_design.replace(cell_count=10, active_area=100.0)
        # 1000 + 50*10 + 10*100 + (50 + 50 + 40)*100
        assert model.cost(params) == 16500.0

    def test_known_materials(self, pem_design):
        model = make_model()
        params = pem_design.replace(
            cell_count=10,
            active_area=100.0,
            anode_catalyst="pt-c",
            cathode_catalyst="pt-c",
            membrane_type="nafion",
        )
        assert model.cost(params) == 27500.0

    def test_unknown_material_uses_default(self, pem_design):
        model = make_model()
        known = pem_design.replace(anode_catalyst=None)
        unknown = pem_design.replace(anode_catalyst="unobtainium")
        assert model.cost(known) == model.cost(unknown)

    def test_injected_tables(self, pem_design):
        model = make_model(cost_tables=CostTables(base_cost=0.0))
        assert model.cost(pem_design) == make_model().cost(pem_design) - 1000.0


class TestDurability:
    """Tests for ObjectiveModel.durability."""

    def test_optimal_temperature(self, pem_design):
        assert make_model().durability(pem_design) == pytest.approx(40000.0)

    def test_temperature_decay(self, pem_design):
        params = pem_design.replace(operating_temperature=180.0)
        assert make_model().durability(params) == pytest.approx(40000.0 * math.exp(-1))

    def test_pressure_and_membrane_penalties(self, pem_design):
        params = pem_design.replace(operating_pressure=6.0, membrane_type="hydrocarbon")
        assert make_model().durability(params) == pytest.approx(40000.0 * 0.9 * 0.8)

    def test_pressure_threshold_is_exclusive(self, pem_design):
        params = pem_design.replace(operating_pressure=5.0)
        assert make_model().durability(params) == pytest.approx(40000.0)

    def test_fuel_cell_type_override(self, pem_design):
        params = pem_design.replace(operating_temperature=750.0)
        assert make_model().durability(params, FuelCellType.SOFC) == pytest.approx(40000.0)


class TestLookupTables:
    """Tests for the default lookup tables."""

    def test_defaults_share_read_only_tables(self):
        tables = CostTables()
        assert tables.catalyst_costs is CATALYST_COSTS
        assert tables.membrane_costs is MEMBRANE_COSTS
        assert DurabilityModel().optimal_temperatures is OPTIMAL_TEMPERATURES

        with pytest.raises(TypeError):
            tables.catalyst_costs["pt-c"] = 0.0

    def test_tables_compare_equal(self):
        assert CostTables() == CostTables()
        assert DurabilityModel() == DurabilityModel()

    def test_injected_catalyst_table(self, pem_design):
        tables = CostTables(catalyst_costs={"pt-c": 1.0})
        model = make_model(cost_tables=tables)
        params = pem_design.replace(cell_count=10, active_area=100.0, anode_catalyst="pt-c")
        # 1000 + 50*10 + 10*100 + (1 + 50 + 40)*100
        assert model.cost(params) == 11600.0


class TestScalarObjective:
    """Tests for objective signs and oracle usage."""

    @pytest.mark.asyncio
    async def test_maximize_power_negated(self, pem_design, power_objective):
        model = make_model(power=1234.0)
        assert await model.scalar_objective(pem_design, power_objective) == -1234.0
        assert await model.objective_value(pem_design, power_objective) == 1234.0

    @pytest.mark.asyncio
    async def test_maximize_efficiency(self, pem_design):
        model = make_model(efficiency=61.0)
        objective = OptimizationObjective(type=ObjectiveType.MAXIMIZE_EFFICIENCY)
        assert await model.scalar_objective(pem_design, objective) == -61.0

    @pytest.mark.asyncio
    async def test_minimize_cost_skips_oracle(self, pem_design, cost_objective):
        model = make_model()
        value = await model.scalar_objective(pem_design, cost_objective)
        assert value == model.cost(pem_design)
        assert model.oracle.calls == 0

    @pytest.mark.asyncio
    async def test_maximize_durability_skips_oracle(self, pem_design):
        model = make_model()
        objective = OptimizationObjective(type=ObjectiveType.MAXIMIZE_DURABILITY)
        assert await model.scalar_objective(pem_design, objective) == pytest.approx(-40000.0)
        assert model.oracle.calls == 0

    @pytest.mark.asyncio
    async def test_multi_objective(self, pem_design):
        model = make_model(power=1000.0, efficiency=50.0)
        objective = OptimizationObjective(
            type=ObjectiveType.MULTI_OBJECTIVE,
            weights=ObjectiveWeights(power=0.5, cost=0.1),
        )
        expected = -(0.5 * 1000.0 - 0.1 * model.cost(pem_design))
        assert await model.scalar_objective(pem_design, objective) == pytest.approx(expected)
        assert model.oracle.calls == 1

    @pytest.mark.asyncio
    async def test_multi_objective_without_weights_is_zero(self, pem_design):
        model = make_model()
        objective = OptimizationObjective(type=ObjectiveType.MULTI_OBJECTIVE)
        assert await model.scalar_objective(pem_design, objective) == 0


class TestTargetViolations:
    """Tests for soft target checks."""

    @pytest.mark.asyncio
    async def test_no_targets(self, pem_design, power_objective):
        model = make_model()
        assert await model.target_violations(pem_design, power_objective) == []
        assert model.oracle.calls == 0

    @pytest.mark.asyncio
    async def test_power_and_efficiency_targets(self, pem_design):
        model = make_model(power=800.0, efficiency=40.0)
        objective = OptimizationObjective(
            type=ObjectiveType.MAXIMIZE_POWER,
            targets=ObjectiveTargets(min_power=1000.0, min_efficiency=45.0),
        )

        violations = await model.target_violations(pem_design, objective)

        assert violations == [
            "Power 800W below minimum 1000W",
            "Efficiency 40% below minimum 45%",
        ]
        assert model.oracle.calls == 1

    @pytest.mark.asyncio
    async def test_cost_target_skips_oracle(self, pem_design, cost_objective):
        model = make_model()
        objective = OptimizationObjective(
            type=ObjectiveType.MINIMIZE_COST,
            targets=ObjectiveTargets(max_cost=100.0),
        )

        violations = await model.target_violations(pem_design, objective)

        assert len(violations) == 1
        assert violations[0].startswith("Cost ")
        assert model.oracle.calls == 0

    @pytest.mark.asyncio
    async def test_targets_met(self, pem_design):
        model = make_model(power=2000.0)
        objective = OptimizationObjective(
            type=ObjectiveType.MAXIMIZE_POWER,
            targets=ObjectiveTargets(min_power=1000.0, min_durability=1000.0),
        )
        assert await model.target_violations(pem_design, objective) == []
