"""
optimization/enums.py - Optimization enumerations.

Fuel-cell design optimization enumerations.
"""

from enum import Enum
from typing import Optional, Union


class FuelCellType(Enum):
    """Fuel-cell chemistries."""
    PEM = "PEM"      # Proton exchange membrane
    SOFC = "SOFC"    # Solid oxide
    PAFC = "PAFC"    # Phosphoric acid
    MCFC = "MCFC"    # Molten carbonate
    AFC = "AFC"      # Alkaline


class ModelFidelity(Enum):
    """Prediction model fidelity, passed through to the oracle."""
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class ObjectiveType(Enum):
    """Optimization objective types."""
    MAXIMIZE_POWER = "MAXIMIZE_POWER"
    MAXIMIZE_EFFICIENCY = "MAXIMIZE_EFFICIENCY"
    MINIMIZE_COST = "MINIMIZE_COST"
    MAXIMIZE_DURABILITY = "MAXIMIZE_DURABILITY"
    MULTI_OBJECTIVE = "MULTI_OBJECTIVE"

    @property
    def requires_prediction(self) -> bool:
        """Whether evaluating this objective needs an oracle call."""
        return self in (
            ObjectiveType.MAXIMIZE_POWER,
            ObjectiveType.MAXIMIZE_EFFICIENCY,
            ObjectiveType.MULTI_OBJECTIVE,
        )


class AlgorithmType(Enum):
    """Search algorithms accepted by the engine."""
    GRADIENT_DESCENT = "GRADIENT_DESCENT"
    GENETIC_ALGORITHM = "GENETIC_ALGORITHM"
    PARTICLE_SWARM = "PARTICLE_SWARM"            # falls back to GA
    SIMULATED_ANNEALING = "SIMULATED_ANNEALING"  # falls back to GA
    BAYESIAN = "BAYESIAN"

    @classmethod
    def parse(cls, value: Union["AlgorithmType", str, None]) -> Optional["AlgorithmType"]:
        """Return the matching member, or None for unrecognized values."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return None
        return None


class OptimizerStatus(Enum):
    """How an optimizer run terminated."""
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"


class TemperatureSchedule(Enum):
    """Annealing schedule. Reserved, not read by any optimizer."""
    LINEAR = "LINEAR"
    EXPONENTIAL = "EXPONENTIAL"
    ADAPTIVE = "ADAPTIVE"


class AcquisitionFunction(Enum):
    """Bayesian acquisition selector. Reserved, not read by any optimizer."""
    EI = "EI"
    PI = "PI"
    UCB = "UCB"
