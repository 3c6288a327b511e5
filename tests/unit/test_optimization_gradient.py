"""
tests/unit/test_optimization_gradient.py - Tests for gradient descent.
"""

import asyncio

import pytest
from fcdesign.optimization import (
    AlgorithmType,
    ConstraintChecker,
    FuelCellType,
    GradientDescentOptimizer,
    ObjectiveModel,
    OptimizationParameters,
    OptimizerStatus,
    OracleAdapter,
    build_initial_guess,
)


class QuadraticOracle:
    """Power peaks at active_area == 300, independent of other fields."""

    async def predict(self, params):
        return {
            "predictedPower": -25.0 * (params.active_area - 300.0) ** 2,
            "efficiency": 50.0,
        }


class FlatOracle:
    """Constant prediction."""

    async def predict(self, params):
        return {"predictedPower": 500.0, "efficiency": 50.0}


def make_optimizer(oracle, objective, constraints, **params):
    model = ObjectiveModel(OracleAdapter(oracle), FuelCellType.PEM)
    return GradientDescentOptimizer(
        objective=objective,
        constraints=constraints,
        parameters=OptimizationParameters(algorithm=AlgorithmType.GRADIENT_DESCENT, **params),
        model=model,
        checker=ConstraintChecker(constraints),
    )


class TestGradientDescentConvergence:
    """Tests for convergence behaviour."""

    @pytest.mark.asyncio
    async def test_converges_on_convex_quadratic(self, pem_constraints, power_objective):
        optimizer = make_optimizer(
            QuadraticOracle(), power_objective, pem_constraints,
            max_iterations=100, convergence_tolerance=1e-3,
        )
        guess = build_initial_guess(FuelCellType.PEM, pem_constraints)

        result = await optimizer.optimize(guess)

        assert result.status == OptimizerStatus.CONVERGED
        assert result.iterations < 100
        assert result.optimized_parameters.active_area == pytest.approx(300.0, abs=1e-3)
        assert result.objective_value == pytest.approx(0.0, abs=1e-3)
        assert result.success

    @pytest.mark.asyncio
    async def test_flat_objective_converges_immediately(self, pem_constraints, power_objective):
        optimizer = make_optimizer(FlatOracle(), power_objective, pem_constraints, max_iterations=50)
        guess = build_initial_guess(FuelCellType.PEM, pem_constraints)

        result = await optimizer.optimize(guess)

        assert result.status == OptimizerStatus.CONVERGED
        assert result.iterations == 0
        assert len(result.convergence_history) == 1
        assert result.optimized_parameters == guess
        # one pre-step value, 14 gradient probes, one final value
        assert result.evaluations == 16

    @pytest.mark.asyncio
    async def test_max_iterations(self, pem_constraints, cost_objective):
        optimizer = make_optimizer(FlatOracle(), cost_objective, pem_constraints, max_iterations=10)
        guess = build_initial_guess(FuelCellType.PEM, pem_constraints)

        result = await optimizer.optimize(guess)

        assert result.status == OptimizerStatus.MAX_ITERATIONS
        assert result.iterations == 10
        assert len(result.convergence_history) == 10


class TestGradientDescentSteps:
    """Tests for individual steps."""

    @pytest.mark.asyncio
    async def test_cost_descent_lowers_area(self, pem_constraints, cost_objective):
        optimizer = make_optimizer(FlatOracle(), cost_objective, pem_constraints, max_iterations=20)
        guess = build_initial_guess(FuelCellType.PEM, pem_constraints)

        result = await optimizer.optimize(guess)

        assert result.optimized_parameters.active_area < guess.active_area
        assert result.optimized_parameters.cell_count <= guess.cell_count
        # history is recorded before each step and never gets worse for a linear cost
        values = [record.objective_value for record in result.convergence_history]
        assert values == sorted(values)

    @pytest.mark.asyncio
    async def test_categorical_fields_untouched(self, pem_constraints, cost_objective):
        optimizer = make_optimizer(FlatOracle(), cost_objective, pem_constraints, max_iterations=5)
        guess = build_initial_guess(
            FuelCellType.PEM, pem_constraints, {"anode_catalyst": "pt-c"},
        )

        result = await optimizer.optimize(guess)

        assert result.optimized_parameters.anode_catalyst == "pt-c"
        assert result.optimized_parameters.fuel_cell_type == FuelCellType.PEM

    @pytest.mark.asyncio
    async def test_steps_stay_in_box(self, pem_constraints, cost_objective):
        optimizer = make_optimizer(FlatOracle(), cost_objective, pem_constraints, max_iterations=100)
        guess = build_initial_guess(
            FuelCellType.PEM, pem_constraints, {"active_area": 11.0},
        )

        result = await optimizer.optimize(guess)

        assert result.optimized_parameters.active_area == 10
        checker = ConstraintChecker(pem_constraints)
        for record in result.convergence_history:
            assert checker.is_within_bounds(record.parameters)


class SlowFlatOracle:
    """Constant prediction after a short delay."""

    def __init__(self, delay=0.002):
        self.delay = delay

    async def predict(self, params):
        await asyncio.sleep(self.delay)
        return {"predictedPower": 500.0, "efficiency": 50.0}


class TestGradientDescentRuns:
    """Tests for reusing one optimizer instance."""

    @pytest.mark.asyncio
    async def test_overlapping_runs_keep_own_timing(self, pem_constraints, power_objective):
        optimizer = make_optimizer(SlowFlatOracle(), power_objective, pem_constraints, max_iterations=10)
        guess = build_initial_guess(FuelCellType.PEM, pem_constraints)

        first = asyncio.ensure_future(optimizer.optimize(guess))
        await asyncio.sleep(0.01)
        second = asyncio.ensure_future(optimizer.optimize(guess))
        a, b = await asyncio.gather(first, second)

        assert a.started_at < b.started_at
        assert a.started_at < a.completed_at
        assert b.started_at < b.completed_at
