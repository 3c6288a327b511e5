"""
optimization/bayesian.py - Simplified Bayesian-style optimizer.

Sequential model-free search: a stratified initial design followed by a
nearest-neighbour acquisition heuristic. There is no Gaussian process;
the acquisition rewards distance from already observed points.
"""

from __future__ import annotations
import logging
import math
from typing import List

from .enums import AlgorithmType
from .optimizer import Optimizer
from .schema import (
    CONTINUOUS_FIELDS,
    ConvergenceRecord,
    DesignParameters,
    Observation,
    OptimizationResult,
)

logger = logging.getLogger(__name__)

# Fixed scales of the acquisition distance; other fields do not contribute
DISTANCE_SCALES = (
    ("cell_count", 100.0),
    ("active_area", 1000.0),
    ("operating_temperature", 100.0),
    ("operating_pressure", 10.0),
)


def scaled_distance(a: DesignParameters, b: DesignParameters) -> float:
    """Weighted Euclidean distance over cell count, area, temperature, pressure."""
    return math.sqrt(sum(
        ((getattr(a, name) - getattr(b, name)) / scale) ** 2
        for name, scale in DISTANCE_SCALES
    ))


class BayesianOptimizer(Optimizer):
    """
    Sample-efficient sequential search.

    Initial design: for sample i of n, each boxed dimension is drawn
    independently from the i-th of n equal strata. This is stratified
    independent sampling, not a Latin hypercube.

    Each sequential step scores uniformly random candidates with
    max(0, nearest_value - best_value) + w * nearest_distance and evaluates
    the top-scoring one. The result is the best observation of the run.
    """

    algorithm = AlgorithmType.BAYESIAN

    async def optimize(self, initial_guess: DesignParameters) -> OptimizationResult:
        run = self._start()

        settings = self.config.bayesian
        tolerance = self.parameters.convergence_tolerance
        base = self.checker.clip_parameters(initial_guess)

        observations: List[Observation] = []
        history: List[ConvergenceRecord] = []
        iteration = 0
        converged = False

        for sample in self._initial_samples(base, settings.initial_samples):
            value = -(await self._evaluate(sample))
            observations.append(Observation(parameters=sample, value=value))
            history.append(ConvergenceRecord(iteration=iteration, objective_value=value, parameters=sample))
            iteration += 1

        while iteration < self.parameters.max_iterations:
            candidate = self._select_next_point(base, observations)
            value = -(await self._evaluate(candidate))
            observations.append(Observation(parameters=candidate, value=value))
            history.append(ConvergenceRecord(iteration=iteration, objective_value=value, parameters=candidate))
            iteration += 1

            logger.debug(f"BO evaluation {iteration}: value={value:.6g}")

            if len(observations) >= settings.min_evaluations:
                recent = [record.objective_value for record in history[-settings.convergence_window:]]
                if max(recent) - min(recent) < tolerance:
                    converged = True
                    break

        best = max(observations, key=lambda o: o.value)
        return self._finish(run, best.parameters, best.value, iteration, history, converged)

    def _initial_samples(self, base: DesignParameters, count: int) -> List[DesignParameters]:
        samples = []
        for i in range(count):
            changes = {}
            for name in CONTINUOUS_FIELDS:
                bounds = self.constraints.bounds_for(name)
                if bounds is None:
                    continue
                value = bounds.min + (i + self.rng.random()) / count * bounds.span
                changes[name] = self.checker.clip(name, value)
            samples.append(base.replace(**changes))
        return samples

    def _random_point(self, base: DesignParameters) -> DesignParameters:
        changes = {}
        for name in CONTINUOUS_FIELDS:
            bounds = self.constraints.bounds_for(name)
            if bounds is None:
                continue
            changes[name] = self.checker.clip(name, self.rng.uniform(bounds.min, bounds.max))
        return base.replace(**changes)

    def _select_next_point(
        self, base: DesignParameters, observations: List[Observation]
    ) -> DesignParameters:
        """Highest-acquisition point among uniformly random candidates."""
        settings = self.config.bayesian
        current_best = max(o.value for o in observations)

        best_score = -math.inf
        best_point = observations[0].parameters

        for _ in range(settings.candidate_samples):
            candidate = self._random_point(base)
            score = self._acquisition(candidate, observations, current_best)
            if score > best_score:
                best_score = score
                best_point = candidate

        return best_point

    def _acquisition(
        self,
        candidate: DesignParameters,
        observations: List[Observation],
        current_best: float,
    ) -> float:
        nearest = min(observations, key=lambda o: scaled_distance(candidate, o.parameters))
        distance = scaled_distance(candidate, nearest.parameters)
        improvement = max(0.0, nearest.value - current_best)
        return improvement + self.config.bayesian.exploration_weight * distance
