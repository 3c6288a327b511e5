"""
optimization/constraints.py - Constraint checking and box projection.

Violations are reported, never used to reject candidates: optimizers keep
candidates feasible by clipping into the box after every move.
"""

from __future__ import annotations
import math
from typing import List

from .errors import ConstraintDefinitionError
from .schema import (
    CONTINUOUS_FIELDS,
    CONSTRAINT_KEYS,
    MATERIAL_FIELDS,
    DesignParameters,
    OptimizationConstraints,
)


# Human-readable labels for violation messages
FIELD_LABELS = {
    "cell_count": "Cell count",
    "active_area": "Active area",
    "operating_temperature": "Temperature",
    "operating_pressure": "Pressure",
    "humidity": "Humidity",
    "fuel_flow_rate": "Fuel flow rate",
    "air_flow_rate": "Air flow rate",
    "anode_catalyst": "Anode catalyst",
    "cathode_catalyst": "Cathode catalyst",
    "membrane_type": "Membrane type",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def validate_constraints(constraints: OptimizationConstraints) -> None:
    """
    Check that a constraint definition is usable.

    Raises:
        ConstraintDefinitionError: if a box has min > max or a supplied
            material list is empty
    """
    for name in CONTINUOUS_FIELDS:
        bounds = constraints.bounds_for(name)
        if bounds is not None and bounds.min > bounds.max:
            key = CONSTRAINT_KEYS[name]
            raise ConstraintDefinitionError(
                f"Invalid {key} range: min ({bounds.min}) > max ({bounds.max})",
                field=key,
            )

    for name in MATERIAL_FIELDS:
        allowed = constraints.allowed_materials(name)
        if allowed is not None and len(allowed) == 0:
            raise ConstraintDefinitionError(
                f"At least one {FIELD_LABELS[name].lower()} must be available",
                field=name,
            )


class ConstraintChecker:
    """Box and material-set checks for one OptimizationConstraints."""

    def __init__(self, constraints: OptimizationConstraints):
        self.constraints = constraints

    def clip(self, name: str, value: float) -> float:
        """Project one continuous value into its box."""
        box = self.constraints.box_for(name)
        clipped = box.clamp(value)
        if name != "cell_count":
            return clipped

        # Keep the rounded count inside fractional bounds
        count = round_half_up(clipped)
        if count > box.max:
            count = math.floor(box.max)
        elif count < box.min:
            count = math.ceil(box.min)
        return count

    def clip_parameters(self, params: DesignParameters) -> DesignParameters:
        """Project every continuous field into its box."""
        return params.replace(**{
            name: self.clip(name, getattr(params, name)) for name in CONTINUOUS_FIELDS
        })

    def is_within_bounds(self, params: DesignParameters) -> bool:
        return all(
            self.constraints.box_for(name).contains(getattr(params, name))
            for name in CONTINUOUS_FIELDS
        )

    def violations(self, params: DesignParameters) -> List[str]:
        """Human-readable violations of the box and material constraints."""
        violations: List[str] = []

        for name in CONTINUOUS_FIELDS:
            bounds = self.constraints.bounds_for(name)
            if bounds is None:
                continue
            value = getattr(params, name)
            if not bounds.contains(value):
                violations.append(
                    f"{FIELD_LABELS[name]} {value:g} outside range [{bounds.min:g}, {bounds.max:g}]"
                )

        for name in MATERIAL_FIELDS:
            allowed = self.constraints.allowed_materials(name)
            value = getattr(params, name)
            if allowed is not None and value and value not in allowed:
                violations.append(f"{FIELD_LABELS[name]} {value} not available")

        return violations
