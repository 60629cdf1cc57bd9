"""
Float Stability Kit - Stability Truncator

Round a computed value to a fixed decimal resolution so that low-order noise
(15th-16th digit for float64) cannot leak into equality checks.

    stabilize(v, d) = round_half_away(v * 10**d) / 10**d

Rounding rule is pinned to ROUND HALF AWAY FROM ZERO. Python's round() and
numpy.rint() are half-to-even and are not used: a different tie
rule on another platform is itself a source of divergence.

Precision edge:
    Once |v * 10**d| reaches 2**(nmant - 1) (2**51 for float64, 2**22 for
    float32) there are no fractional bits left to round at that resolution,
    and stabilize() returns v unchanged. For float64 that is reached around
    15+ significant digits (e.g. 1628.89 at 13 digits), for float32 around 6+.
    The same no-op applies when 10**d itself overflows the width. This keeps
    stabilize() idempotent bit-for-bit for every input.
"""

import numpy as np

from .arithmetic import Real, width_of
from .error_taxonomy import ContractViolation

# Recommended operating point for financial comparisons (pass explicitly)
FINANCIAL_DIGITS = 12


def _check_digits(decimal_digits: int) -> None:
    if isinstance(decimal_digits, bool) or not isinstance(decimal_digits, (int, np.integer)):
        raise ContractViolation(
            f"decimal_digits must be a non-negative integer, got {type(decimal_digits).__name__}"
        )
    if decimal_digits < 0:
        raise ContractViolation(f"decimal_digits must be non-negative, got {decimal_digits}")


def round_half_away(scaled: Real) -> Real:
    """
    Round to the nearest integer, ties away from zero, at the input's width.

    Valid for |scaled| < 2**nmant, where the fractional part is exact.
    """
    whole = np.trunc(scaled)
    fraction = scaled - whole
    if abs(fraction) >= 0.5:
        whole = whole + np.copysign(1, scaled).astype(whole.dtype)
    return whole


def _precision_limit(dtype) -> float:
    return float(2 ** (np.finfo(dtype).nmant - 1))


def stabilize(value: Real, decimal_digits: int) -> Real:
    """
    Canonicalize a value at 10**-decimal_digits resolution.

    Args:
        value: float32, float64 or Python float (width is preserved)
        decimal_digits: Non-negative number of decimal places to keep

    Returns:
        Stabilized value of the same type as `value`. NaN/inf are returned as-is.

    Raises:
        ContractViolation: decimal_digits is negative or not an integer
    """
    _check_digits(decimal_digits)
    dtype = width_of(value)
    x = dtype(value)

    if not np.isfinite(x):
        return value

    with np.errstate(over="ignore", invalid="ignore"):
        factor = dtype(10) ** dtype(decimal_digits)
        scaled = x * factor

    if not np.isfinite(factor) or not np.isfinite(scaled) or abs(scaled) >= _precision_limit(dtype):
        # Beyond representable resolution: truncation would only add noise
        return value

    result = round_half_away(scaled) / factor

    if isinstance(value, np.generic):
        return result
    return float(result)


def stable_equal(a: Real, b: Real, decimal_digits: int) -> bool:
    """
    Truncated comparison: equal once both sides are stabilized at the same resolution.

    NaN on either side is never equal.
    """
    return bool(stabilize(a, decimal_digits) == stabilize(b, decimal_digits))
