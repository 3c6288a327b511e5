"""
optimization/engine.py - Optimization engine.

Builds the initial guess, picks a search strategy, runs it, and attaches
target checks and sensitivity analysis to the result.
"""

from __future__ import annotations
from dataclasses import replace
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from ..bootstrap.config import FCDesignConfig, get_config
from .bayesian import BayesianOptimizer
from .constraints import ConstraintChecker, round_half_up, validate_constraints
from .enums import AlgorithmType, FuelCellType, ModelFidelity, ObjectiveType
from .genetic import GeneticAlgorithmOptimizer
from .gradient import GradientDescentOptimizer
from .objectives import CostTables, DurabilityModel, ObjectiveModel
from .optimizer import Optimizer
from .oracle import OracleAdapter, OracleLike
from .schema import (
    CONTINUOUS_FIELDS,
    DEFAULT_HUMIDITY,
    DesignParameters,
    OptimizationConstraints,
    OptimizationObjective,
    OptimizationParameters,
    OptimizationResult,
    SensitivityEntry,
)
from .sensitivity import SensitivityAnalyzer

logger = logging.getLogger(__name__)


OPTIMIZERS: Dict[AlgorithmType, Type[Optimizer]] = {
    AlgorithmType.GRADIENT_DESCENT: GradientDescentOptimizer,
    AlgorithmType.GENETIC_ALGORITHM: GeneticAlgorithmOptimizer,
    AlgorithmType.BAYESIAN: BayesianOptimizer,
}

FALLBACK_ALGORITHM = AlgorithmType.GENETIC_ALGORITHM


def resolve_algorithm(algorithm: Any) -> AlgorithmType:
    """
    Map a requested algorithm to one that is implemented.

    PARTICLE_SWARM, SIMULATED_ANNEALING and unrecognized values fall back
    to the genetic algorithm.
    """
    parsed = AlgorithmType.parse(algorithm)
    if parsed in OPTIMIZERS:
        return parsed

    logger.warning(f"Algorithm {algorithm!r} not implemented, falling back to {FALLBACK_ALGORITHM.value}")
    return FALLBACK_ALGORITHM


def build_initial_guess(
    fuel_cell_type: FuelCellType,
    constraints: OptimizationConstraints,
    overrides: Optional[Mapping[str, Any]] = None,
) -> DesignParameters:
    """
    Midpoint of every box, with caller overrides applied.

    Humidity defaults to 100 %RH when it has no box. Override keys are
    DesignParameters field names.
    """
    values: Dict[str, Any] = {}
    for name in CONTINUOUS_FIELDS:
        bounds = constraints.bounds_for(name)
        values[name] = bounds.midpoint if bounds is not None else DEFAULT_HUMIDITY
    values["cell_count"] = round_half_up(values["cell_count"])

    guess = DesignParameters(
        fuel_cell_type=fuel_cell_type,
        model_fidelity=ModelFidelity.INTERMEDIATE,
        **values,
    )

    if overrides:
        overrides = {k: v for k, v in overrides.items() if v is not None}
        guess = guess.replace(**overrides)

    return guess


class OptimizationEngine:
    """
    Entry point for design optimization runs.

    Usage:
        engine = OptimizationEngine(oracle)
        result = await engine.optimize(
            FuelCellType.PEM, objective, constraints, parameters,
        )
    """

    def __init__(
        self,
        oracle: OracleLike,
        config: Optional[FCDesignConfig] = None,
        cost_tables: Optional[CostTables] = None,
        durability_model: Optional[DurabilityModel] = None,
    ):
        self.oracle = oracle if isinstance(oracle, OracleAdapter) else OracleAdapter(oracle)
        self.config = config or get_config()
        self.cost_tables = cost_tables or CostTables()
        self.durability_model = durability_model or DurabilityModel()

    def create_model(self, fuel_cell_type: FuelCellType) -> ObjectiveModel:
        return ObjectiveModel(
            self.oracle,
            fuel_cell_type,
            cost_tables=self.cost_tables,
            durability_model=self.durability_model,
        )

    def create_optimizer(
        self,
        fuel_cell_type: FuelCellType,
        objective: OptimizationObjective,
        constraints: OptimizationConstraints,
        parameters: OptimizationParameters,
    ) -> Optimizer:
        """Factory: concrete optimizer for parameters.algorithm."""
        optimizer_cls = OPTIMIZERS[resolve_algorithm(parameters.algorithm)]

        if parameters.seed is None and self.config.seed is not None:
            parameters = replace(parameters, seed=self.config.seed)

        return optimizer_cls(
            objective=objective,
            constraints=constraints,
            parameters=parameters,
            model=self.create_model(fuel_cell_type),
            checker=ConstraintChecker(constraints),
            config=self.config,
        )

    async def optimize(
        self,
        fuel_cell_type: FuelCellType,
        objective: OptimizationObjective,
        constraints: OptimizationConstraints,
        parameters: OptimizationParameters,
        initial_guess_override: Optional[Mapping[str, Any]] = None,
    ) -> OptimizationResult:
        """
        Run one optimization.

        Args:
            fuel_cell_type: Stack chemistry, fixed for the run
            objective: What to optimize
            constraints: Search box and material sets
            parameters: Algorithm selection and stopping rules
            initial_guess_override: Field values replacing the midpoint guess

        Returns:
            OptimizationResult; infeasible optima are reported with
            success=False rather than raised

        Raises:
            ConstraintDefinitionError: if a box or material list is malformed
            OracleError: if any oracle call fails; no partial result is kept
        """
        validate_constraints(constraints)

        if objective.type == ObjectiveType.MULTI_OBJECTIVE and (
            objective.weights is None or objective.weights.total == 0
        ):
            logger.warning("MULTI_OBJECTIVE without non-zero weights: objective is identically 0")

        initial_guess = build_initial_guess(fuel_cell_type, constraints, initial_guess_override)
        optimizer = self.create_optimizer(fuel_cell_type, objective, constraints, parameters)

        result = await optimizer.optimize(initial_guess)

        result.target_violations = await optimizer.model.target_violations(
            result.optimized_parameters, objective
        )

        # Gated on the requested algorithm; GA fallbacks still get sensitivity
        requested = AlgorithmType.parse(parameters.algorithm)
        if result.success and requested != AlgorithmType.GENETIC_ALGORITHM:
            result.sensitivity = await self.analyze_sensitivity(
                fuel_cell_type, result.optimized_parameters, objective, constraints
            )

        return result

    async def analyze_sensitivity(
        self,
        fuel_cell_type: FuelCellType,
        optimum: DesignParameters,
        objective: OptimizationObjective,
        constraints: OptimizationConstraints,
    ) -> List[SensitivityEntry]:
        """Sensitivity of the objective around optimum."""
        analyzer = SensitivityAnalyzer(self.create_model(fuel_cell_type), self.config.sensitivity)
        return await analyzer.analyze(optimum, objective, constraints)
