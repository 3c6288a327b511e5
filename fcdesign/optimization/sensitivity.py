"""
optimization/sensitivity.py - Sensitivity analysis.

Post-optimization analysis around a design: local relative sensitivity of
the objective to each continuous parameter, and the range of each
parameter over which the objective stays near-optimal.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from ..bootstrap.config import SensitivitySettings
from .objectives import ObjectiveModel
from .schema import (
    DesignParameters,
    OptimizationConstraints,
    OptimizationObjective,
    Range,
    SensitivityEntry,
)

logger = logging.getLogger(__name__)


class SensitivityAnalyzer:
    """
    Analyzer for design sensitivity.

    All probes use the user-facing objective value and run sequentially.
    """

    def __init__(
        self,
        model: ObjectiveModel,
        settings: Optional[SensitivitySettings] = None,
    ):
        """
        Initialize analyzer.

        Args:
            model: Objective model used to evaluate probes
            settings: Step size, sweep resolution and near-optimal fraction
        """
        self.model = model
        self.settings = settings or SensitivitySettings()

    async def analyze(
        self,
        optimum: DesignParameters,
        objective: OptimizationObjective,
        constraints: OptimizationConstraints,
    ) -> List[SensitivityEntry]:
        """
        Perform sensitivity analysis around a design.

        For every boxed continuous field:
            sensitivity = |f(x(1+e)) - f(x(1-e))| / (2 e x), 0 when x == 0
            optimal_range = outer envelope of swept values whose objective
                is at least near_optimal_fraction of the optimum's

        The envelope can overstate the range when several disjoint good
        regions exist.

        Args:
            optimum: Design to analyze
            objective: Objective to evaluate
            constraints: Boxes to sweep

        Returns:
            One SensitivityEntry per boxed continuous field
        """
        base_value = await self.model.objective_value(optimum, objective)
        entries = []

        for name in constraints.boxed_fields():
            bounds = constraints.bounds_for(name)
            current = getattr(optimum, name)

            if bounds.is_degenerate:
                entries.append(SensitivityEntry(
                    parameter=name,
                    sensitivity=0.0,
                    optimal_range=Range(bounds.min, bounds.min),
                ))
                continue

            sensitivity = await self._local_sensitivity(optimum, objective, name, current)
            optimal_range = await self._near_optimal_range(
                optimum, objective, name, bounds, current, base_value
            )

            entries.append(SensitivityEntry(
                parameter=name,
                sensitivity=sensitivity,
                optimal_range=optimal_range,
            ))
            logger.debug(f"Sensitivity of {name}: {sensitivity:.6g}, range={optimal_range}")

        return entries

    async def _local_sensitivity(
        self,
        optimum: DesignParameters,
        objective: OptimizationObjective,
        name: str,
        current: float,
    ) -> float:
        if current == 0:
            return 0.0

        step = self.settings.relative_step
        plus = await self.model.objective_value(optimum.replace(**{name: current * (1 + step)}), objective)
        minus = await self.model.objective_value(optimum.replace(**{name: current * (1 - step)}), objective)
        return abs((plus - minus) / (2 * step * current))

    async def _near_optimal_range(
        self,
        optimum: DesignParameters,
        objective: OptimizationObjective,
        name: str,
        bounds: Range,
        current: float,
        base_value: float,
    ) -> Range:
        points = self.settings.sweep_points
        threshold = base_value * self.settings.near_optimal_fraction
        qualifying = []

        for i in range(points):
            value = bounds.min + (i / (points - 1)) * bounds.span
            result = await self.model.objective_value(optimum.replace(**{name: value}), objective)
            if result >= threshold:
                qualifying.append(value)

        if not qualifying:
            margin = self.settings.fallback_margin
            low, high = sorted((current * (1 - margin), current * (1 + margin)))
            return Range(low, high)

        return Range(min(qualifying), max(qualifying))
