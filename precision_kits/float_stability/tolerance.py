"""
Float Stability Kit - Tolerance Comparator

Epsilon-based equality and ordering over real pairs.

Every function takes its tolerance as an argument; there is no module-wide
epsilon. NaN never compares as equal, within, less or greater: callers that
care about NaN must detect it separately.
"""

import math

import numpy as np

from .arithmetic import Real
from .error_taxonomy import ContractViolation


def _check_tolerance(tol: Real, name: str = "tolerance") -> None:
    if isinstance(tol, bool):
        raise ContractViolation(f"{name} must be a real number, got bool")
    try:
        tol_f = float(tol)
    except (TypeError, ValueError):
        raise ContractViolation(f"{name} must be a real number, got {type(tol).__name__}")
    if math.isnan(tol_f) or tol_f < 0:
        raise ContractViolation(f"{name} must be non-negative, got {tol!r}")


def within(a: Real, b: Real, tol: Real) -> bool:
    """
    True iff abs(a - b) <= tol.

    The difference is computed at the operands' width. NaN on either side
    yields False, including within(nan, nan, tol).

    Raises:
        ContractViolation: tol is negative or NaN
    """
    _check_tolerance(tol)
    with np.errstate(over="ignore", invalid="ignore"):
        diff = abs(a - b)
    # NaN <= tol is False, so NaN operands fall out here
    return bool(diff <= tol)


def within_relative(a: Real, b: Real, rel_tol: Real) -> bool:
    """True iff abs(a - b) <= rel_tol * max(abs(a), abs(b))."""
    _check_tolerance(rel_tol, "relative tolerance")
    with np.errstate(over="ignore", invalid="ignore"):
        diff = abs(a - b)
        scale = max(abs(a), abs(b))
        return bool(diff <= rel_tol * scale)


def definitely_less(a: Real, b: Real, tol: Real) -> bool:
    """True iff a is below b by more than tol (a < b - tol)."""
    _check_tolerance(tol)
    with np.errstate(over="ignore", invalid="ignore"):
        return bool(a < b - tol)


def definitely_greater(a: Real, b: Real, tol: Real) -> bool:
    """True iff a is above b by more than tol (a > b + tol)."""
    _check_tolerance(tol)
    with np.errstate(over="ignore", invalid="ignore"):
        return bool(a > b + tol)
