"""
optimization/presets.py - Default constraint templates and capabilities.

Typical operating envelopes per fuel-cell chemistry, and a description of
the objectives and algorithms the engine supports.
"""

from typing import Any, Dict, Optional, Union

from .enums import AlgorithmType, FuelCellType, ObjectiveType
from .schema import OptimizationConstraints, Range


# (min, max) per box; humidity only for chemistries with humidified feeds
_DEFAULT_BOXES: Dict[FuelCellType, Dict[str, tuple]] = {
    FuelCellType.PEM: {
        "cell_count": (10, 200),
        "active_area": (10, 500),
        "temperature": (40, 90),
        "pressure": (1, 10),
        "humidity": (50, 100),
        "fuel_flow_rate": (0.1, 50),
        "air_flow_rate": (1, 500),
    },
    FuelCellType.SOFC: {
        "cell_count": (5, 100),
        "active_area": (50, 1000),
        "temperature": (600, 1000),
        "pressure": (1, 20),
        "fuel_flow_rate": (0.5, 100),
        "air_flow_rate": (5, 1000),
    },
    FuelCellType.PAFC: {
        "cell_count": (20, 150),
        "active_area": (50, 600),
        "temperature": (150, 220),
        "pressure": (1, 8),
        "humidity": (60, 95),
        "fuel_flow_rate": (0.5, 60),
        "air_flow_rate": (2, 600),
    },
    FuelCellType.MCFC: {
        "cell_count": (10, 80),
        "active_area": (100, 1200),
        "temperature": (600, 700),
        "pressure": (1, 15),
        "fuel_flow_rate": (1, 150),
        "air_flow_rate": (10, 1500),
    },
    FuelCellType.AFC: {
        "cell_count": (15, 120),
        "active_area": (20, 400),
        "temperature": (50, 90),
        "pressure": (1, 6),
        "humidity": (80, 100),
        "fuel_flow_rate": (0.2, 40),
        "air_flow_rate": (1, 400),
    },
}

OBJECTIVE_DESCRIPTIONS: Dict[ObjectiveType, Dict[str, Any]] = {
    ObjectiveType.MAXIMIZE_POWER: {
        "description": "Maximize total power output",
        "requiredParams": [],
    },
    ObjectiveType.MAXIMIZE_EFFICIENCY: {
        "description": "Maximize system efficiency",
        "requiredParams": [],
    },
    ObjectiveType.MINIMIZE_COST: {
        "description": "Minimize total system cost",
        "requiredParams": [],
    },
    ObjectiveType.MAXIMIZE_DURABILITY: {
        "description": "Maximize expected lifetime",
        "requiredParams": [],
    },
    ObjectiveType.MULTI_OBJECTIVE: {
        "description": "Balance multiple objectives",
        "requiredParams": ["weights"],
    },
}

ALGORITHM_DESCRIPTIONS: Dict[AlgorithmType, Dict[str, Any]] = {
    AlgorithmType.GENETIC_ALGORITHM: {
        "description": "Population-based evolutionary algorithm",
        "strengths": ["Global optimization", "Handles discrete variables", "No gradient required"],
        "parameters": ["populationSize"],
    },
    AlgorithmType.GRADIENT_DESCENT: {
        "description": "Local optimization using finite-difference gradients",
        "strengths": ["Fast convergence", "Efficient for smooth objectives"],
        "parameters": ["maxIterations", "convergenceTolerance"],
    },
    AlgorithmType.BAYESIAN: {
        "description": "Sequential sampling with a distance-based acquisition heuristic",
        "strengths": ["Sample efficient", "Handles expensive evaluations"],
        "parameters": ["maxIterations", "convergenceTolerance"],
    },
}

OPTIMIZATION_TIPS = [
    "Start with broader constraints and narrow them based on results",
    "Use GENETIC_ALGORITHM for initial exploration",
    "Switch to GRADIENT_DESCENT for fine-tuning",
    "Multi-objective optimization may require more iterations",
    "Consider computational cost vs accuracy trade-offs",
]


def _coerce_type(fuel_cell_type: Union[FuelCellType, str]) -> FuelCellType:
    if isinstance(fuel_cell_type, FuelCellType):
        return fuel_cell_type
    try:
        return FuelCellType(str(fuel_cell_type).upper())
    except ValueError:
        return FuelCellType.PEM


def get_default_constraints(fuel_cell_type: Union[FuelCellType, str]) -> OptimizationConstraints:
    """
    Typical search envelope for a chemistry.

    Unknown chemistries get the PEM envelope.
    """
    boxes = _DEFAULT_BOXES[_coerce_type(fuel_cell_type)]
    ranges = {name: Range(float(lo), float(hi)) for name, (lo, hi) in boxes.items()}
    return OptimizationConstraints(**ranges)


def get_all_default_constraints() -> Dict[FuelCellType, OptimizationConstraints]:
    return {cell_type: get_default_constraints(cell_type) for cell_type in FuelCellType}


def get_capabilities(fuel_cell_type: Optional[Union[FuelCellType, str]] = None) -> Dict[str, Any]:
    """Supported objectives, algorithms and default constraints."""
    if fuel_cell_type is not None:
        defaults = get_default_constraints(fuel_cell_type).to_dict()
    else:
        defaults = {
            cell_type.value: constraints.to_dict()
            for cell_type, constraints in get_all_default_constraints().items()
        }

    return {
        "supportedObjectives": [
            {"type": kind.value, **info} for kind, info in OBJECTIVE_DESCRIPTIONS.items()
        ],
        "supportedAlgorithms": [
            {"name": kind.value, **info} for kind, info in ALGORITHM_DESCRIPTIONS.items()
        ],
        "fallbackAlgorithms": [
            AlgorithmType.PARTICLE_SWARM.value,
            AlgorithmType.SIMULATED_ANNEALING.value,
        ],
        "defaultConstraints": defaults,
        "optimizationTips": list(OPTIMIZATION_TIPS),
    }
