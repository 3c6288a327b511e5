"""
optimization/schema.py - Optimization data structures.

Design vector, objective, constraint, and result types for fuel-cell
stack design optimization.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from .enums import (
    AcquisitionFunction,
    AlgorithmType,
    FuelCellType,
    ModelFidelity,
    ObjectiveType,
    OptimizerStatus,
    TemperatureSchedule,
)


# Continuous decision variables, in the order optimizers visit them
CONTINUOUS_FIELDS: Tuple[str, ...] = (
    "cell_count",
    "active_area",
    "operating_temperature",
    "operating_pressure",
    "humidity",
    "fuel_flow_rate",
    "air_flow_rate",
)

MATERIAL_FIELDS: Tuple[str, ...] = (
    "anode_catalyst",
    "cathode_catalyst",
    "membrane_type",
)

# Design field -> OptimizationConstraints attribute
CONSTRAINT_KEYS: Dict[str, str] = {
    "cell_count": "cell_count",
    "active_area": "active_area",
    "operating_temperature": "temperature",
    "operating_pressure": "pressure",
    "humidity": "humidity",
    "fuel_flow_rate": "fuel_flow_rate",
    "air_flow_rate": "air_flow_rate",
}

# Design field -> external (camelCase) name
EXTERNAL_NAMES: Dict[str, str] = {
    "fuel_cell_type": "fuelCellType",
    "cell_count": "cellCount",
    "active_area": "activeArea",
    "operating_temperature": "operatingTemperature",
    "operating_pressure": "operatingPressure",
    "humidity": "humidity",
    "fuel_flow_rate": "fuelFlowRate",
    "air_flow_rate": "airFlowRate",
    "anode_catalyst": "anodeCatalyst",
    "cathode_catalyst": "cathodeCatalyst",
    "membrane_type": "membraneType",
    "model_fidelity": "modelFidelity",
}

DEFAULT_HUMIDITY = 100.0


@dataclass(frozen=True)
class Range:
    """Closed interval [min, max]."""
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    @property
    def is_degenerate(self) -> bool:
        return self.min == self.max

    def clamp(self, value: float) -> float:
        """Clamp value to bounds."""
        return max(self.min, min(self.max, value))

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


# Physical humidity limits, used when the caller supplies no humidity box
HUMIDITY_LIMITS = Range(0.0, 100.0)


@dataclass(frozen=True)
class DesignParameters:
    """
    Decision vector for one fuel-cell stack design.

    Instances are never mutated; optimizers derive new candidates
    with replace().
    """
    fuel_cell_type: FuelCellType
    cell_count: int
    active_area: float                  # cm^2
    operating_temperature: float        # degC
    operating_pressure: float           # bar
    humidity: float = DEFAULT_HUMIDITY  # % RH
    fuel_flow_rate: float = 0.0
    air_flow_rate: float = 0.0
    anode_catalyst: Optional[str] = None
    cathode_catalyst: Optional[str] = None
    membrane_type: Optional[str] = None
    model_fidelity: ModelFidelity = ModelFidelity.INTERMEDIATE

    def replace(self, **changes: Any) -> "DesignParameters":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def get(self, name: str) -> Any:
        return getattr(self, name)

    def continuous_values(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in CONTINUOUS_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name, external in EXTERNAL_NAMES.items():
            value = getattr(self, name)
            if value is None:
                continue
            data[external] = value.value if hasattr(value, "value") else value
        return data


@dataclass(frozen=True)
class MaterialOptions:
    """Allowed categorical material choices. None means unrestricted."""
    anode_catalysts: Optional[Tuple[str, ...]] = None
    cathode_catalysts: Optional[Tuple[str, ...]] = None
    membrane_types: Optional[Tuple[str, ...]] = None

    def allowed_for(self, name: str) -> Optional[Tuple[str, ...]]:
        """Allowed values for a design field (anode_catalyst, ...)."""
        return {
            "anode_catalyst": self.anode_catalysts,
            "cathode_catalyst": self.cathode_catalysts,
            "membrane_type": self.membrane_types,
        }[name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "anodeCatalysts": list(self.anode_catalysts) if self.anode_catalysts is not None else None,
            "cathodeCatalysts": list(self.cathode_catalysts) if self.cathode_catalysts is not None else None,
            "membraneTypes": list(self.membrane_types) if self.membrane_types is not None else None,
        }


@dataclass(frozen=True)
class ObjectiveWeights:
    """MULTI_OBJECTIVE weights. Unset weights count as 0."""
    power: Optional[float] = None
    efficiency: Optional[float] = None
    cost: Optional[float] = None
    durability: Optional[float] = None

    @property
    def total(self) -> float:
        return (self.power or 0) + (self.efficiency or 0) + (self.cost or 0) + (self.durability or 0)


@dataclass(frozen=True)
class ObjectiveTargets:
    """Soft thresholds, used for reporting only."""
    min_power: Optional[float] = None
    min_efficiency: Optional[float] = None
    max_cost: Optional[float] = None
    min_durability: Optional[float] = None


@dataclass(frozen=True)
class OptimizationObjective:
    """What the search maximizes or minimizes."""
    type: ObjectiveType
    weights: Optional[ObjectiveWeights] = None
    targets: Optional[ObjectiveTargets] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        if self.weights is not None:
            data["weights"] = {
                "power": self.weights.power,
                "efficiency": self.weights.efficiency,
                "cost": self.weights.cost,
                "durability": self.weights.durability,
            }
        if self.targets is not None:
            data["targets"] = {
                "minPower": self.targets.min_power,
                "minEfficiency": self.targets.min_efficiency,
                "maxCost": self.targets.max_cost,
                "minDurability": self.targets.min_durability,
            }
        return data


@dataclass(frozen=True)
class OptimizationConstraints:
    """Box bounds, material sets and (reporting-only) economic caps."""
    cell_count: Range
    active_area: Range
    temperature: Range
    pressure: Range
    fuel_flow_rate: Range
    air_flow_rate: Range
    humidity: Optional[Range] = None
    available_materials: Optional[MaterialOptions] = None
    max_system_cost: Optional[float] = None
    max_operating_cost: Optional[float] = None

    def bounds_for(self, name: str) -> Optional[Range]:
        """Caller-supplied box for a design field, or None if unboxed."""
        return getattr(self, CONSTRAINT_KEYS[name])

    def box_for(self, name: str) -> Range:
        """Box used for clipping; unboxed humidity uses physical limits."""
        bounds = self.bounds_for(name)
        return bounds if bounds is not None else HUMIDITY_LIMITS

    def boxed_fields(self) -> List[str]:
        """Continuous fields that carry a caller-supplied box."""
        return [name for name in CONTINUOUS_FIELDS if self.bounds_for(name) is not None]

    def allowed_materials(self, name: str) -> Optional[Tuple[str, ...]]:
        if self.available_materials is None:
            return None
        return self.available_materials.allowed_for(name)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "cellCount": self.cell_count.to_dict(),
            "activeArea": self.active_area.to_dict(),
            "temperature": self.temperature.to_dict(),
            "pressure": self.pressure.to_dict(),
            "fuelFlowRate": self.fuel_flow_rate.to_dict(),
            "airFlowRate": self.air_flow_rate.to_dict(),
        }
        if self.humidity is not None:
            data["humidity"] = self.humidity.to_dict()
        if self.available_materials is not None:
            data["availableMaterials"] = self.available_materials.to_dict()
        if self.max_system_cost is not None:
            data["maxSystemCost"] = self.max_system_cost
        if self.max_operating_cost is not None:
            data["maxOperatingCost"] = self.max_operating_cost
        return data


@dataclass(frozen=True)
class OptimizationParameters:
    """Algorithm selection and stopping rules."""
    algorithm: Union[AlgorithmType, str] = AlgorithmType.GENETIC_ALGORITHM
    max_iterations: int = 100
    convergence_tolerance: float = 1e-3
    population_size: Optional[int] = None
    temperature_schedule: Optional[TemperatureSchedule] = None
    acquisition_function: Optional[AcquisitionFunction] = None
    seed: Optional[int] = None


@dataclass(frozen=True)
class ConvergenceRecord:
    """One entry of the convergence history (user-facing sign)."""
    iteration: int
    objective_value: float
    parameters: DesignParameters

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iteration": self.iteration,
            "objectiveValue": self.objective_value,
            "parameters": self.parameters.to_dict(),
        }


@dataclass(frozen=True)
class Observation:
    """Evaluated point of a Bayesian run."""
    parameters: DesignParameters
    value: float


@dataclass(frozen=True)
class SensitivityEntry:
    """Local sensitivity and near-optimal range of one parameter."""
    parameter: str
    sensitivity: float
    optimal_range: Range

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameter": EXTERNAL_NAMES.get(self.parameter, self.parameter),
            "sensitivity": self.sensitivity,
            "optimalRange": self.optimal_range.to_dict(),
        }


@dataclass(frozen=True)
class ParetoPoint:
    """Reserved for multi-objective fronts; never populated."""
    power: float
    efficiency: float
    cost: float
    parameters: DesignParameters

    def to_dict(self) -> Dict[str, Any]:
        return {
            "power": self.power,
            "efficiency": self.efficiency,
            "cost": self.cost,
            "parameters": self.parameters.to_dict(),
        }


@dataclass
class OptimizationResult:
    """Optimization result."""
    success: bool
    optimized_parameters: DesignParameters
    objective_value: float
    constraint_violations: List[str] = field(default_factory=list)
    iterations: int = 0
    convergence_history: List[ConvergenceRecord] = field(default_factory=list)
    pareto_front: Optional[List[ParetoPoint]] = None
    sensitivity: Optional[List[SensitivityEntry]] = None

    # Run metadata
    algorithm: Optional[AlgorithmType] = None
    status: OptimizerStatus = OptimizerStatus.MAX_ITERATIONS
    evaluations: int = 0
    elapsed_time_s: float = 0.0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Soft target checks, reported separately from constraint violations
    target_violations: List[str] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.status == OptimizerStatus.CONVERGED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "optimizedParameters": self.optimized_parameters.to_dict(),
            "objectiveValue": self.objective_value,
            "constraintViolations": list(self.constraint_violations),
            "iterations": self.iterations,
            "convergenceHistory": [r.to_dict() for r in self.convergence_history],
            "paretoFront": [p.to_dict() for p in self.pareto_front] if self.pareto_front is not None else None,
            "sensitivity": [s.to_dict() for s in self.sensitivity] if self.sensitivity is not None else None,
            "algorithm": self.algorithm.value if self.algorithm else None,
            "status": self.status.value,
            "targetViolations": list(self.target_violations),
            "statistics": {
                "evaluations": self.evaluations,
                "elapsed_time_s": round(self.elapsed_time_s, 3),
            },
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
