"""
Scenario Comparator Configuration

Define how a scenario's observed outputs are judged against its reference.

There is no default tolerance: every scenario states its own,
either directly or through one of the named presets below, so that each
tolerance stays an auditable, reviewable value.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .error_taxonomy import ContractViolation


@dataclass(frozen=True)
class ScenarioConfig:
    """Repetition count, tolerance and optional stabilization step for one scenario."""

    repetitions: int
    tolerance: float
    stabilization_digits: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.repetitions, bool) or not isinstance(self.repetitions, int):
            raise ContractViolation(f"repetitions must be a positive integer, got {self.repetitions!r}")
        if self.repetitions < 1:
            raise ContractViolation(f"repetitions must be a positive integer, got {self.repetitions}")

        if isinstance(self.tolerance, bool) or not isinstance(self.tolerance, numbers.Real):
            raise ContractViolation(f"tolerance must be a real number, got {self.tolerance!r}")
        if math.isnan(self.tolerance) or self.tolerance < 0:
            raise ContractViolation(f"tolerance must be non-negative, got {self.tolerance}")

        if self.stabilization_digits is not None:
            digits = self.stabilization_digits
            if isinstance(digits, bool) or not isinstance(digits, int) or digits < 0:
                raise ContractViolation(f"stabilization_digits must be a non-negative integer, got {digits!r}")

    @classmethod
    def for_pure_math(cls, repetitions: int, stabilization_digits: Optional[int] = None):
        """
        Config for pure-math double precision results (sums, quotients of unit-scale values).
        Tolerance 1e-15: a few ulps at magnitude ~1.
        """
        return cls(repetitions=repetitions, tolerance=1e-15, stabilization_digits=stabilization_digits)

    @classmethod
    def for_financial(cls, repetitions: int, stabilization_digits: Optional[int] = 12):
        """
        Config for financial ratios and prices compared at 12-digit resolution.
        Tolerance 1e-12, matching the recommended 12-digit stabilization.
        """
        return cls(repetitions=repetitions, tolerance=1e-12, stabilization_digits=stabilization_digits)

    @classmethod
    def for_currency(cls, repetitions: int):
        """
        Config for amounts settled in cents.
        Stabilize to 2 digits, accept one cent of drift.
        """
        return cls(repetitions=repetitions, tolerance=0.01, stabilization_digits=2)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """
        Build a config from a plain mapping.

        Accepts snake_case (repetition_count / repetitions, tolerance,
        stabilization_digits) and camelCase (repetitionCount, stabilizationDigits).
        `repetitions` and `tolerance` are required.
        """
        repetitions = _first_present(data, ('repetitions', 'repetition_count', 'repetitionCount'))
        tolerance = _first_present(data, ('tolerance',))
        digits = _first_present(data, ('stabilization_digits', 'stabilizationDigits'))

        if repetitions is None:
            raise ContractViolation("Config is missing repetition count")
        if tolerance is None:
            raise ContractViolation("Config is missing tolerance")

        return cls(repetitions=repetitions, tolerance=tolerance, stabilization_digits=digits)

    def to_dict(self) -> dict:
        """Export config as dict for reports and API responses."""
        return {
            'repetitions': self.repetitions,
            'tolerance': self.tolerance,
            'stabilization_digits': self.stabilization_digits
        }


def _first_present(data: Mapping[str, Any], keys) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None
