"""
optimization/optimizer.py - Optimizer contract.

Every search strategy implements optimize(initial_guess) and shares the
objective model and constraint checker by composition.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import random
import time
from typing import List, Optional

from ..bootstrap.config import FCDesignConfig
from .constraints import ConstraintChecker
from .enums import AlgorithmType, OptimizerStatus
from .objectives import ObjectiveModel
from .schema import (
    ConvergenceRecord,
    DesignParameters,
    OptimizationConstraints,
    OptimizationObjective,
    OptimizationParameters,
    OptimizationResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunContext:
    """Bookkeeping for one optimize() call."""
    started_at: datetime
    start_time: float
    start_calls: int


class Optimizer(ABC):
    """
    Base class for search strategies.

    Subclasses own all per-run state locally inside optimize(); an instance
    can be reused for several runs.
    """

    algorithm: AlgorithmType

    def __init__(
        self,
        objective: OptimizationObjective,
        constraints: OptimizationConstraints,
        parameters: OptimizationParameters,
        model: ObjectiveModel,
        checker: ConstraintChecker,
        config: Optional[FCDesignConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize optimizer.

        Args:
            objective: What to maximize or minimize
            constraints: Search box and material sets
            parameters: Iteration limit, tolerance, population size
            model: Objective model wrapping the prediction oracle
            checker: Constraint checker for clipping and final violations
            config: Algorithm constants (defaults when omitted)
            rng: Random source; seeded from parameters.seed when omitted
        """
        self.objective = objective
        self.constraints = constraints
        self.parameters = parameters
        self.model = model
        self.checker = checker
        self.config = config or FCDesignConfig()
        self.rng = rng or random.Random(parameters.seed)

    @abstractmethod
    async def optimize(self, initial_guess: DesignParameters) -> OptimizationResult:
        """Run the search from initial_guess."""

    async def _evaluate(self, params: DesignParameters) -> float:
        """Scalar objective (minimization sign)."""
        return await self.model.scalar_objective(params, self.objective)

    def _start(self) -> RunContext:
        run = RunContext(
            started_at=datetime.now(timezone.utc),
            start_time=time.time(),
            start_calls=self.model.oracle.calls,
        )
        logger.info(
            f"{self.algorithm.value} started: objective={self.objective.type.value}, "
            f"max_iterations={self.parameters.max_iterations}"
        )
        return run

    def _finish(
        self,
        run: RunContext,
        best: DesignParameters,
        objective_value: float,
        iterations: int,
        history: List[ConvergenceRecord],
        converged: bool,
    ) -> OptimizationResult:
        """Assemble the result and report violations of the final design."""
        violations = self.checker.violations(best)

        result = OptimizationResult(
            success=not violations,
            optimized_parameters=best,
            objective_value=objective_value,
            constraint_violations=violations,
            iterations=iterations,
            convergence_history=history,
            algorithm=self.algorithm,
            status=OptimizerStatus.CONVERGED if converged else OptimizerStatus.MAX_ITERATIONS,
            evaluations=self.model.oracle.calls - run.start_calls,
            elapsed_time_s=time.time() - run.start_time,
            started_at=run.started_at,
            completed_at=datetime.now(timezone.utc),
        )

        logger.info(
            f"{self.algorithm.value} finished: status={result.status.value}, "
            f"iterations={iterations}, objective={objective_value:.6g}, "
            f"violations={len(violations)}"
        )
        return result
