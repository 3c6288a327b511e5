"""
optimization/gradient.py - Gradient descent optimizer.

Local search with central finite-difference gradients and a fixed
learning rate. Categorical fields are never changed.
"""

from __future__ import annotations
import logging
from typing import Dict, List

from .enums import AlgorithmType
from .optimizer import Optimizer
from .schema import CONTINUOUS_FIELDS, ConvergenceRecord, DesignParameters, OptimizationResult

logger = logging.getLogger(__name__)


class GradientDescentOptimizer(Optimizer):
    """
    Projected gradient descent over the continuous design fields.

    Stops after max_iterations steps, or as soon as every partial
    derivative of a step is within convergence_tolerance.
    """

    algorithm = AlgorithmType.GRADIENT_DESCENT

    async def optimize(self, initial_guess: DesignParameters) -> OptimizationResult:
        run = self._start()

        settings = self.config.gradient
        tolerance = self.parameters.convergence_tolerance
        history: List[ConvergenceRecord] = []
        current = initial_guess
        iteration = 0
        converged = False

        while iteration < self.parameters.max_iterations:
            value = await self._evaluate(current)
            # History holds the pre-step state
            history.append(ConvergenceRecord(
                iteration=iteration,
                objective_value=-value,
                parameters=current,
            ))

            gradients = await self._gradient(current, settings.epsilon)

            current = current.replace(**{
                name: self.checker.clip(name, getattr(current, name) - settings.learning_rate * grad)
                for name, grad in gradients.items()
            })

            logger.debug(
                f"GD iteration {iteration}: objective={-value:.6g}, "
                f"max|grad|={max(abs(g) for g in gradients.values()):.3g}"
            )

            if all(abs(g) <= tolerance for g in gradients.values()):
                converged = True
                break

            iteration += 1

        final_value = await self._evaluate(current)
        return self._finish(run, current, -final_value, iteration, history, converged)

    async def _gradient(self, params: DesignParameters, epsilon: float) -> Dict[str, float]:
        """Central-difference estimate of df/dx_i, evaluated sequentially."""
        gradients: Dict[str, float] = {}
        for name in CONTINUOUS_FIELDS:
            value = getattr(params, name)
            plus = await self._evaluate(params.replace(**{name: value + epsilon}))
            minus = await self._evaluate(params.replace(**{name: value - epsilon}))
            gradients[name] = (plus - minus) / (2 * epsilon)
        return gradients
