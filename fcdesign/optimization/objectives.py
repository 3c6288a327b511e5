"""
optimization/objectives.py - Objective model.

Cost and durability estimates plus the scalar objective the optimizers
minimize. Lookup tables are immutable and injected, so alternative cost
bases can be supplied per engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
import logging
import math
from typing import FrozenSet, List, Mapping, Optional

from .enums import FuelCellType, ObjectiveType
from .oracle import OracleAdapter, PredictionResult
from .schema import DesignParameters, OptimizationObjective

logger = logging.getLogger(__name__)


CATALYST_COSTS: Mapping[str, float] = MappingProxyType({
    "pt-c": 100.0,
    "pt-alloy": 80.0,
    "non-pgm": 20.0,
    "ni-based": 10.0,
})

MEMBRANE_COSTS: Mapping[str, float] = MappingProxyType({
    "nafion": 50.0,
    "pfsa": 40.0,
    "hydrocarbon": 30.0,
    "ceramic": 60.0,
})

# Operating temperature (degC) at which stack degradation is slowest
OPTIMAL_TEMPERATURES: Mapping[FuelCellType, float] = MappingProxyType({
    FuelCellType.PEM: 80.0,
    FuelCellType.SOFC: 750.0,
    FuelCellType.PAFC: 200.0,
    FuelCellType.MCFC: 650.0,
    FuelCellType.AFC: 70.0,
})


@dataclass(frozen=True)
class CostTables:
    """Linear system cost model (currency units, per cm^2 for materials)."""
    base_cost: float = 1000.0
    cost_per_cell: float = 50.0
    cost_per_area: float = 10.0
    catalyst_costs: Mapping[str, float] = field(default_factory=lambda: CATALYST_COSTS)
    membrane_costs: Mapping[str, float] = field(default_factory=lambda: MEMBRANE_COSTS)
    default_catalyst_cost: float = 50.0
    default_membrane_cost: float = 40.0

    def catalyst_price(self, catalyst: Optional[str]) -> float:
        if not catalyst:
            return self.default_catalyst_cost
        return self.catalyst_costs.get(catalyst, self.default_catalyst_cost)

    def membrane_price(self, membrane: Optional[str]) -> float:
        if not membrane:
            return self.default_membrane_cost
        return self.membrane_costs.get(membrane, self.default_membrane_cost)


@dataclass(frozen=True)
class DurabilityModel:
    """Lifetime estimate (hours) from temperature, pressure and membrane."""
    base_hours: float = 40000.0
    temperature_decay: float = 100.0
    optimal_temperatures: Mapping[FuelCellType, float] = field(default_factory=lambda: OPTIMAL_TEMPERATURES)
    high_pressure_threshold: float = 5.0
    high_pressure_factor: float = 0.9
    hydrocarbon_membranes: FrozenSet[str] = frozenset({"hydrocarbon"})
    hydrocarbon_factor: float = 0.8


class ObjectiveModel:
    """
    Evaluates designs against an OptimizationObjective.

    scalar_objective() follows the minimization convention used by every
    optimizer: maximization objectives are negated. objective_value() is
    the user-facing sign reported in histories and results.
    """

    def __init__(
        self,
        oracle: OracleAdapter,
        fuel_cell_type: FuelCellType,
        cost_tables: Optional[CostTables] = None,
        durability_model: Optional[DurabilityModel] = None,
    ):
        self.oracle = oracle
        self.fuel_cell_type = fuel_cell_type
        self.cost_tables = cost_tables or CostTables()
        self.durability_model = durability_model or DurabilityModel()

    def cost(self, params: DesignParameters) -> float:
        """System cost estimate."""
        tables = self.cost_tables
        area = params.active_area

        anode = tables.catalyst_price(params.anode_catalyst) * area
        cathode = tables.catalyst_price(params.cathode_catalyst) * area
        membrane = tables.membrane_price(params.membrane_type) * area

        return (
            tables.base_cost
            + tables.cost_per_cell * params.cell_count
            + tables.cost_per_area * area
            + anode
            + cathode
            + membrane
        )

    def durability(
        self,
        params: DesignParameters,
        fuel_cell_type: Optional[FuelCellType] = None,
    ) -> float:
        """Expected stack lifetime in hours."""
        model = self.durability_model
        cell_type = fuel_cell_type or self.fuel_cell_type

        optimal = model.optimal_temperatures[cell_type]
        hours = model.base_hours * math.exp(
            -abs(params.operating_temperature - optimal) / model.temperature_decay
        )

        if params.operating_pressure > model.high_pressure_threshold:
            hours *= model.high_pressure_factor

        if params.membrane_type in model.hydrocarbon_membranes:
            hours *= model.hydrocarbon_factor

        return hours

    async def scalar_objective(
        self,
        params: DesignParameters,
        objective: OptimizationObjective,
    ) -> float:
        """Value to minimize."""
        kind = objective.type
        prediction: Optional[PredictionResult] = None
        if kind.requires_prediction:
            prediction = await self.oracle.predict(params)

        if kind == ObjectiveType.MAXIMIZE_POWER:
            return -prediction.predicted_power
        if kind == ObjectiveType.MAXIMIZE_EFFICIENCY:
            return -prediction.efficiency
        if kind == ObjectiveType.MINIMIZE_COST:
            return self.cost(params)
        if kind == ObjectiveType.MAXIMIZE_DURABILITY:
            return -self.durability(params)

        # MULTI_OBJECTIVE
        weights = objective.weights
        w_power = (weights.power if weights else None) or 0
        w_eff = (weights.efficiency if weights else None) or 0
        w_cost = (weights.cost if weights else None) or 0
        w_dur = (weights.durability if weights else None) or 0

        return -(
            w_power * prediction.predicted_power
            + w_eff * prediction.efficiency
            - w_cost * self.cost(params)
            + w_dur * self.durability(params)
        )

    async def objective_value(
        self,
        params: DesignParameters,
        objective: OptimizationObjective,
    ) -> float:
        """Objective in user-facing sign (higher is better)."""
        return -(await self.scalar_objective(params, objective))

    async def target_violations(
        self,
        params: DesignParameters,
        objective: OptimizationObjective,
    ) -> List[str]:
        """
        Check the objective's soft targets against one fresh estimate.

        Targets never influence the search; this runs once on the final
        design and makes at most one oracle call.
        """
        targets = objective.targets
        if targets is None:
            return []

        violations: List[str] = []

        if targets.min_power is not None or targets.min_efficiency is not None:
            prediction = await self.oracle.predict(params)
            if targets.min_power is not None and prediction.predicted_power < targets.min_power:
                violations.append(
                    f"Power {prediction.predicted_power:g}W below minimum {targets.min_power:g}W"
                )
            if targets.min_efficiency is not None and prediction.efficiency < targets.min_efficiency:
                violations.append(
                    f"Efficiency {prediction.efficiency:g}% below minimum {targets.min_efficiency:g}%"
                )

        if targets.max_cost is not None:
            cost = self.cost(params)
            if cost > targets.max_cost:
                violations.append(f"Cost {cost:g} above maximum {targets.max_cost:g}")

        if targets.min_durability is not None:
            hours = self.durability(params)
            if hours < targets.min_durability:
                violations.append(
                    f"Durability {hours:g}h below minimum {targets.min_durability:g}h"
                )

        return violations
