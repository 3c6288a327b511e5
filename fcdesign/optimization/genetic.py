"""
optimization/genetic.py - Genetic algorithm optimizer.

Elitist generational GA with tournament selection, uniform crossover and
per-field mutation. Each generation is evaluated concurrently.
"""

from __future__ import annotations
import asyncio
import logging
import statistics
from typing import List, Optional, Tuple

from .enums import AlgorithmType
from .optimizer import Optimizer
from .schema import (
    CONTINUOUS_FIELDS,
    DEFAULT_HUMIDITY,
    MATERIAL_FIELDS,
    ConvergenceRecord,
    DesignParameters,
    OptimizationResult,
)

logger = logging.getLogger(__name__)

# (individual, fitness); fitness is the user-facing sign, higher is better
Scored = Tuple[DesignParameters, float]


class GeneticAlgorithmOptimizer(Optimizer):
    """
    Population-based global search.

    The returned optimum is the best individual of a fresh evaluation of
    the terminal population. It can differ from the best entry in the
    convergence history.
    """

    algorithm = AlgorithmType.GENETIC_ALGORITHM

    @property
    def population_size(self) -> int:
        return self.parameters.population_size or self.config.genetic.default_population_size

    async def optimize(self, initial_guess: DesignParameters) -> OptimizationResult:
        run = self._start()

        settings = self.config.genetic
        size = self.population_size
        elite_size = int(size * settings.elite_fraction)

        population = self._initialize_population(initial_guess, size)
        history: List[ConvergenceRecord] = []
        iteration = 0
        converged = False

        while iteration < self.parameters.max_iterations:
            scored = await self._evaluate_population(population)

            best, best_fitness = scored[0]
            history.append(ConvergenceRecord(
                iteration=iteration,
                objective_value=best_fitness,
                parameters=best,
            ))
            logger.debug(f"GA generation {iteration}: best fitness={best_fitness:.6g}")

            if iteration > settings.min_generations and self._has_converged(history):
                converged = True
                break

            new_population = [individual for individual, _ in scored[:elite_size]]

            while len(new_population) < size:
                parent1 = self._tournament_select(scored)
                parent2 = self._tournament_select(scored)

                if self.rng.random() < settings.crossover_rate:
                    child1, child2 = self._crossover(parent1, parent2)
                    new_population.append(self._mutate(child1))
                    if len(new_population) < size:
                        new_population.append(self._mutate(child2))
                else:
                    new_population.append(self._mutate(parent1))

            population = new_population
            iteration += 1

        final = await self._evaluate_population(population)
        best, best_fitness = final[0]
        return self._finish(run, best, best_fitness, iteration, history, converged)

    def _initialize_population(
        self, initial_guess: DesignParameters, size: int
    ) -> List[DesignParameters]:
        """Clipped initial guess plus uniformly random individuals within bounds."""
        population = [self.checker.clip_parameters(initial_guess)]

        while len(population) < size:
            changes = {}
            for name in CONTINUOUS_FIELDS:
                bounds = self.constraints.bounds_for(name)
                if bounds is None:
                    changes[name] = DEFAULT_HUMIDITY
                    continue
                value = self.rng.uniform(bounds.min, bounds.max)
                changes[name] = self.checker.clip(name, value) if name == "cell_count" else value

            for name in MATERIAL_FIELDS:
                allowed = self.constraints.allowed_materials(name)
                if allowed:
                    changes[name] = self.rng.choice(allowed)

            population.append(initial_guess.replace(**changes))

        return population

    async def _evaluate_population(self, population: List[DesignParameters]) -> List[Scored]:
        """
        Evaluate all individuals concurrently, best first.

        The first failure cancels every evaluation still in flight.
        """
        tasks = [asyncio.ensure_future(self._evaluate(individual)) for individual in population]
        try:
            values = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        scored = [(individual, -value) for individual, value in zip(population, values)]
        scored.sort(key=lambda s: s[1], reverse=True)
        return scored

    def _has_converged(self, history: List[ConvergenceRecord]) -> bool:
        window = self.config.genetic.convergence_window
        recent = [record.objective_value for record in history[-window:]]
        return statistics.pvariance(recent) < self.parameters.convergence_tolerance

    def _tournament_select(self, scored: List[Scored]) -> DesignParameters:
        """Best of k individuals drawn with replacement."""
        best, best_fitness = self.rng.choice(scored)
        for _ in range(self.config.genetic.tournament_size - 1):
            competitor, fitness = self.rng.choice(scored)
            if fitness > best_fitness:
                best, best_fitness = competitor, fitness
        return best

    def _crossover(
        self, parent1: DesignParameters, parent2: DesignParameters
    ) -> Tuple[DesignParameters, DesignParameters]:
        """Uniform crossover of continuous fields and the anode catalyst."""
        changes1 = {}
        changes2 = {}

        for name in CONTINUOUS_FIELDS + ("anode_catalyst",):
            if self.rng.random() < 0.5:
                changes1[name] = getattr(parent2, name)
                changes2[name] = getattr(parent1, name)

        return parent1.replace(**changes1), parent2.replace(**changes2)

    def _mutate(self, individual: DesignParameters) -> DesignParameters:
        """Perturb cell count, area and temperature; resample anode catalyst."""
        settings = self.config.genetic
        rate = settings.mutation_rate
        changes = {}

        if self.rng.random() < rate:
            step = self.rng.uniform(-settings.cell_count_step, settings.cell_count_step)
            changes["cell_count"] = self.checker.clip("cell_count", individual.cell_count + step)

        if self.rng.random() < rate:
            step = self.rng.uniform(-settings.active_area_step, settings.active_area_step)
            changes["active_area"] = self.checker.clip("active_area", individual.active_area + step)

        if self.rng.random() < rate:
            step = self.rng.uniform(-settings.temperature_step, settings.temperature_step)
            changes["operating_temperature"] = self.checker.clip(
                "operating_temperature", individual.operating_temperature + step
            )

        anodes: Optional[tuple] = self.constraints.allowed_materials("anode_catalyst")
        if self.rng.random() < rate and anodes:
            changes["anode_catalyst"] = self.rng.choice(anodes)

        return individual.replace(**changes) if changes else individual
