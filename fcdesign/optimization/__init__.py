"""
optimization/ - Fuel-cell design optimization.

Constrained search over stack design parameters against an external
prediction oracle, with gradient descent, genetic and simplified Bayesian
strategies, followed by sensitivity analysis.
"""

from .enums import (
    FuelCellType,
    ModelFidelity,
    ObjectiveType,
    AlgorithmType,
    OptimizerStatus,
    TemperatureSchedule,
    AcquisitionFunction,
)

from .schema import (
    Range,
    DesignParameters,
    MaterialOptions,
    ObjectiveWeights,
    ObjectiveTargets,
    OptimizationObjective,
    OptimizationConstraints,
    OptimizationParameters,
    ConvergenceRecord,
    Observation,
    SensitivityEntry,
    ParetoPoint,
    OptimizationResult,
)

from .errors import (
    OptimizationErrorCategory,
    OptimizationError,
    OracleError,
    ConstraintDefinitionError,
    ObjectiveDefinitionError,
)

from .oracle import PredictionOracle, PredictionResult, OracleAdapter
from .objectives import CostTables, DurabilityModel, ObjectiveModel
from .constraints import ConstraintChecker, validate_constraints

from .optimizer import Optimizer
from .gradient import GradientDescentOptimizer
from .genetic import GeneticAlgorithmOptimizer
from .bayesian import BayesianOptimizer
from .sensitivity import SensitivityAnalyzer

from .engine import OptimizationEngine, build_initial_guess, resolve_algorithm

from .presets import (
    get_default_constraints,
    get_all_default_constraints,
    get_capabilities,
)

from .request import OptimizationRequest, parse_request

__all__ = [
    # Enums
    "FuelCellType",
    "ModelFidelity",
    "ObjectiveType",
    "AlgorithmType",
    "OptimizerStatus",
    "TemperatureSchedule",
    "AcquisitionFunction",
    # Schema
    "Range",
    "DesignParameters",
    "MaterialOptions",
    "ObjectiveWeights",
    "ObjectiveTargets",
    "OptimizationObjective",
    "OptimizationConstraints",
    "OptimizationParameters",
    "ConvergenceRecord",
    "Observation",
    "SensitivityEntry",
    "ParetoPoint",
    "OptimizationResult",
    # Errors
    "OptimizationErrorCategory",
    "OptimizationError",
    "OracleError",
    "ConstraintDefinitionError",
    "ObjectiveDefinitionError",
    # Evaluation
    "PredictionOracle",
    "PredictionResult",
    "OracleAdapter",
    "CostTables",
    "DurabilityModel",
    "ObjectiveModel",
    "ConstraintChecker",
    "validate_constraints",
    # Optimizers
    "Optimizer",
    "GradientDescentOptimizer",
    "GeneticAlgorithmOptimizer",
    "BayesianOptimizer",
    "SensitivityAnalyzer",
    # Engine
    "OptimizationEngine",
    "build_initial_guess",
    "resolve_algorithm",
    # Presets
    "get_default_constraints",
    "get_all_default_constraints",
    "get_capabilities",
    # Requests
    "OptimizationRequest",
    "parse_request",
]
