"""
optimization/errors.py - Optimization error taxonomy.

Structured error types for the optimization engine. Infeasible results are
reported through OptimizationResult, never raised; these exceptions cover
oracle failures and invalid problem definitions.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional


class OptimizationErrorCategory(Enum):
    """Categories of optimization errors."""
    ORACLE = "oracle"              # Prediction oracle failed
    CONSTRAINT = "constraint"      # Invalid constraint definition
    OBJECTIVE = "objective"        # Invalid objective definition
    CONFIGURATION = "configuration"


class OptimizationError(Exception):
    """
    Base class for optimization errors.

    Carries a stable error code, a category and free-form details so
    request layers can map failures to responses.
    """

    code: str = "OPT_000"
    category: OptimizationErrorCategory = OptimizationErrorCategory.CONFIGURATION

    def __init__(
        self,
        message: str = "",
        *,
        details: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        self.message = message or self.__class__.__doc__ or "Optimization error"
        self.details = details or {}
        self.details.update(kwargs)

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class OracleError(OptimizationError):
    """Prediction oracle call failed or returned an invalid payload."""

    code = "OPT_001"
    category = OptimizationErrorCategory.ORACLE


class ConstraintDefinitionError(OptimizationError, ValueError):
    """Constraint box or material list is malformed."""

    code = "OPT_002"
    category = OptimizationErrorCategory.CONSTRAINT


class ObjectiveDefinitionError(OptimizationError, ValueError):
    """Objective definition is malformed."""

    code = "OPT_003"
    category = OptimizationErrorCategory.OBJECTIVE
