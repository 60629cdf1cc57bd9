"""Scenario definitions and per-execution results."""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

from .arithmetic import Real, is_finite
from .comparator_config import ScenarioConfig
from .error_taxonomy import ContractViolation


class ScenarioState(str, enum.Enum):
    REGISTERED = "registered"
    RUNNING = "running"
    PASSED = "passed"
    FAILED_DETERMINISM = "failed_determinism"
    FAILED_TOLERANCE = "failed_tolerance"
    FAILED_ERROR = "failed_error"

    @property
    def terminal(self) -> bool:
        return self not in (ScenarioState.REGISTERED, ScenarioState.RUNNING)


@dataclass(frozen=True)
class PrecisionScenario:
    """A named, pure computation plus the policy its output is judged by.

    `computation` is called as computation(**inputs) and must return a real.
    The runner never inspects it; whatever numeric backend it uses is what
    gets observed.
    """

    name: str
    computation: Callable[..., Real]
    inputs: Mapping[str, Any]
    reference: Real
    config: ScenarioConfig
    description: str = ""

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ContractViolation("Scenario name must be a non-empty string")
        if not callable(self.computation):
            raise ContractViolation(f"Scenario {self.name}: computation is not callable")
        if not isinstance(self.config, ScenarioConfig):
            raise ContractViolation(f"Scenario {self.name}: config must be a ScenarioConfig")
        # Freeze a private copy so later mutation of the caller's dict cannot leak in
        object.__setattr__(self, "inputs", MappingProxyType(dict(self.inputs or {})))

    @property
    def tolerance(self) -> float:
        return self.config.tolerance

    @property
    def repetitions(self) -> int:
        return self.config.repetitions

    @property
    def stabilization_digits(self) -> Optional[int]:
        return self.config.stabilization_digits

    def with_config(self, config: ScenarioConfig) -> "PrecisionScenario":
        """Return a copy of this scenario judged under a different config."""
        return replace(self, inputs=dict(self.inputs), config=config)


@dataclass(frozen=True)
class ScenarioResult:
    name: str
    state: ScenarioState
    outputs: Tuple[Any, ...]
    reference: Real
    tolerance: float
    deterministic: bool
    within_tolerance: bool
    stabilization_digits: Optional[int] = None
    error: Optional[str] = None
    description: str = field(default="", compare=False)

    @property
    def passed(self) -> bool:
        return self.state is ScenarioState.PASSED

    @property
    def value(self) -> Any:
        """First observed output (the value every repetition must reproduce)."""
        return self.outputs[0] if self.outputs else None

    @property
    def non_finite(self) -> bool:
        return any(not is_finite(o) for o in self.outputs)

    @property
    def max_deviation(self) -> float:
        """Largest abs(output - reference) seen, NaN if any output is NaN."""
        if not self.outputs:
            return math.nan
        deviations = [abs(float(o) - float(self.reference)) for o in self.outputs]
        if any(math.isnan(d) for d in deviations):
            return math.nan
        return max(deviations)
