"""
optimization/request.py - External request schema.

Validates a camelCase optimization request and converts it to the engine's
domain objects.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constraints import validate_constraints
from .enums import (
    AcquisitionFunction,
    AlgorithmType,
    FuelCellType,
    ObjectiveType,
    TemperatureSchedule,
)
from .errors import ObjectiveDefinitionError
from .schema import (
    MaterialOptions,
    ObjectiveTargets,
    ObjectiveWeights,
    OptimizationConstraints,
    OptimizationObjective,
    OptimizationParameters,
    Range,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


# =============================================================================
# Objective
# =============================================================================


class WeightsModel(_CamelModel):
    power: Optional[float] = Field(None, ge=0.0, le=1.0)
    efficiency: Optional[float] = Field(None, ge=0.0, le=1.0)
    cost: Optional[float] = Field(None, ge=0.0, le=1.0)
    durability: Optional[float] = Field(None, ge=0.0, le=1.0)


class TargetsModel(_CamelModel):
    min_power: Optional[float] = Field(None, alias="minPower", ge=0.0)
    min_efficiency: Optional[float] = Field(None, alias="minEfficiency", ge=0.0, le=100.0)
    max_cost: Optional[float] = Field(None, alias="maxCost", ge=0.0)
    min_durability: Optional[float] = Field(None, alias="minDurability", ge=0.0)


class ObjectiveSpec(_CamelModel):
    type: ObjectiveType
    weights: Optional[WeightsModel] = None
    targets: Optional[TargetsModel] = None

    def to_domain(self) -> OptimizationObjective:
        weights = ObjectiveWeights(**self.weights.model_dump()) if self.weights else None
        targets = ObjectiveTargets(**self.targets.model_dump()) if self.targets else None
        return OptimizationObjective(type=self.type, weights=weights, targets=targets)


# =============================================================================
# Constraints
# =============================================================================


class RangeModel(_CamelModel):
    min: float
    max: float

    def to_domain(self) -> Range:
        return Range(self.min, self.max)


class MaterialsModel(_CamelModel):
    anode_catalysts: Optional[List[str]] = Field(None, alias="anodeCatalysts")
    cathode_catalysts: Optional[List[str]] = Field(None, alias="cathodeCatalysts")
    membrane_types: Optional[List[str]] = Field(None, alias="membraneTypes")

    def to_domain(self) -> MaterialOptions:
        def as_tuple(values: Optional[List[str]]) -> Optional[Tuple[str, ...]]:
            return tuple(values) if values is not None else None

        return MaterialOptions(
            anode_catalysts=as_tuple(self.anode_catalysts),
            cathode_catalysts=as_tuple(self.cathode_catalysts),
            membrane_types=as_tuple(self.membrane_types),
        )


class ConstraintsModel(_CamelModel):
    cell_count: RangeModel = Field(alias="cellCount")
    active_area: RangeModel = Field(alias="activeArea")
    temperature: RangeModel
    pressure: RangeModel
    humidity: Optional[RangeModel] = None
    fuel_flow_rate: RangeModel = Field(alias="fuelFlowRate")
    air_flow_rate: RangeModel = Field(alias="airFlowRate")
    available_materials: Optional[MaterialsModel] = Field(None, alias="availableMaterials")
    max_system_cost: Optional[float] = Field(None, alias="maxSystemCost", ge=0.0)
    max_operating_cost: Optional[float] = Field(None, alias="maxOperatingCost", ge=0.0)

    @model_validator(mode="after")
    def _check_minimums(self) -> "ConstraintsModel":
        if self.cell_count.min < 1:
            raise ValueError("cellCount.min must be at least 1")
        if self.humidity is not None and not (
            0 <= self.humidity.min <= 100 and 0 <= self.humidity.max <= 100
        ):
            raise ValueError("humidity bounds must lie within [0, 100]")
        validate_constraints(self.to_domain())
        return self

    def to_domain(self) -> OptimizationConstraints:
        return OptimizationConstraints(
            cell_count=self.cell_count.to_domain(),
            active_area=self.active_area.to_domain(),
            temperature=self.temperature.to_domain(),
            pressure=self.pressure.to_domain(),
            fuel_flow_rate=self.fuel_flow_rate.to_domain(),
            air_flow_rate=self.air_flow_rate.to_domain(),
            humidity=self.humidity.to_domain() if self.humidity else None,
            available_materials=self.available_materials.to_domain() if self.available_materials else None,
            max_system_cost=self.max_system_cost,
            max_operating_cost=self.max_operating_cost,
        )


# =============================================================================
# Parameters and request
# =============================================================================


class ParametersModel(_CamelModel):
    algorithm: AlgorithmType = AlgorithmType.GENETIC_ALGORITHM
    max_iterations: int = Field(100, alias="maxIterations", ge=10, le=1000)
    convergence_tolerance: float = Field(1e-3, alias="convergenceTolerance", ge=1e-5, le=0.1)
    population_size: Optional[int] = Field(None, alias="populationSize", ge=10, le=200)
    temperature_schedule: Optional[TemperatureSchedule] = Field(None, alias="temperatureSchedule")
    acquisition_function: Optional[AcquisitionFunction] = Field(None, alias="acquisitionFunction")
    seed: Optional[int] = None

    def to_domain(self) -> OptimizationParameters:
        return OptimizationParameters(**self.model_dump())


class InitialGuessModel(_CamelModel):
    cell_count: Optional[int] = Field(None, alias="cellCount")
    active_area: Optional[float] = Field(None, alias="activeArea")
    operating_temperature: Optional[float] = Field(None, alias="operatingTemperature")
    operating_pressure: Optional[float] = Field(None, alias="operatingPressure")
    humidity: Optional[float] = None
    fuel_flow_rate: Optional[float] = Field(None, alias="fuelFlowRate")
    air_flow_rate: Optional[float] = Field(None, alias="airFlowRate")
    anode_catalyst: Optional[str] = Field(None, alias="anodeCatalyst")
    cathode_catalyst: Optional[str] = Field(None, alias="cathodeCatalyst")
    membrane_type: Optional[str] = Field(None, alias="membraneType")


class OptimizationRequest(_CamelModel):
    """
    Complete optimization request.

    Example:
        {
            "fuelCellType": "PEM",
            "objective": {"type": "MAXIMIZE_POWER"},
            "constraints": {"cellCount": {"min": 10, "max": 100}, ...},
            "parameters": {"algorithm": "GRADIENT_DESCENT", "maxIterations": 50}
        }
    """

    fuel_cell_type: FuelCellType = Field(alias="fuelCellType")
    objective: ObjectiveSpec
    constraints: ConstraintsModel
    parameters: ParametersModel = Field(default_factory=ParametersModel)
    initial_guess: Optional[InitialGuessModel] = Field(None, alias="initialGuess")

    @model_validator(mode="after")
    def _check_weights(self) -> "OptimizationRequest":
        if self.objective.type == ObjectiveType.MULTI_OBJECTIVE:
            weights = self.objective.to_domain().weights or ObjectiveWeights()
            if weights.total == 0:
                raise ObjectiveDefinitionError(
                    "Multi-objective optimization requires at least one non-zero weight"
                )
        return self

    def to_domain(self) -> Tuple[
        FuelCellType,
        OptimizationObjective,
        OptimizationConstraints,
        OptimizationParameters,
        Dict[str, Any],
    ]:
        """Engine arguments: (type, objective, constraints, parameters, overrides)."""
        overrides: Dict[str, Any] = {}
        if self.initial_guess is not None:
            overrides = self.initial_guess.model_dump(exclude_none=True)

        return (
            self.fuel_cell_type,
            self.objective.to_domain(),
            self.constraints.to_domain(),
            self.parameters.to_domain(),
            overrides,
        )


def parse_request(data: Dict[str, Any]) -> OptimizationRequest:
    """Validate a decoded JSON request."""
    return OptimizationRequest.model_validate(data)


