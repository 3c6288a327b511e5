"""
optimization/oracle.py - Prediction oracle interface.

The oracle maps a DesignParameters to predicted stack performance. It is
external, asynchronous and may fail; every call goes through OracleAdapter,
which validates the payload and converts failures to OracleError.
"""

from __future__ import annotations
import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import OracleError
from .schema import DesignParameters

logger = logging.getLogger(__name__)


class PredictionResult(BaseModel):
    """Oracle prediction. Unknown fields are preserved."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    predicted_power: float = Field(alias="predictedPower")  # W
    efficiency: float                                       # %


@runtime_checkable
class PredictionOracle(Protocol):
    """Anything exposing an async predict()."""

    async def predict(self, params: DesignParameters) -> Any:
        ...


OracleLike = Union[PredictionOracle, Callable[[DesignParameters], Awaitable[Any]]]


class OracleAdapter:
    """
    Uniform access to a prediction oracle.

    Accepts an object with predict() or a bare callable. Sync callables are
    tolerated; their return value is used directly. Counts calls so results
    can report the number of evaluations.
    """

    def __init__(self, oracle: OracleLike):
        if isinstance(oracle, PredictionOracle):
            self._predict = oracle.predict
        elif callable(oracle):
            self._predict = oracle
        else:
            raise TypeError(f"Oracle must be callable or expose predict(), got {type(oracle).__name__}")
        self.calls = 0

    async def predict(self, params: DesignParameters) -> PredictionResult:
        """
        Run one prediction.

        Raises:
            OracleError: if the oracle raises or returns an invalid payload
        """
        self.calls += 1
        try:
            raw = self._predict(params)
            if inspect.isawaitable(raw):
                raw = await raw
        except OracleError:
            raise
        except Exception as e:
            logger.error(f"Oracle call failed: {e}")
            raise OracleError(
                f"Prediction oracle failed: {e}",
                parameters=params.to_dict(),
            ) from e

        return self._coerce(raw, params)

    @staticmethod
    def _coerce(raw: Any, params: DesignParameters) -> PredictionResult:
        if isinstance(raw, PredictionResult):
            return raw
        try:
            if isinstance(raw, Mapping):
                return PredictionResult.model_validate(dict(raw))
            return PredictionResult.model_validate(raw, from_attributes=True)
        except ValidationError as e:
            raise OracleError(
                "Prediction oracle returned an invalid payload",
                parameters=params.to_dict(),
                errors=e.errors(include_url=False),
            ) from e
