"""
Float Stability Kit - Fixed-Point Converter

Map reals to exact integers at a declared power-of-ten scale and back.

    to_fixed(v, s)   = v * s rounded half away from zero  -> int
    from_fixed(n, s) = n / s                               -> real

to_fixed() rounds the exact product v * s (taken in decimal from the exact
binary value of v), never a float product that was already rounded once.

Round-trip contract (same scale both ways, value in range):
    abs(to_fixed(v, s) - v * s) <= 1 / 2
    abs(from_fixed(to_fixed(v, s), s) - v) <= 1 / (2 * s)
The second bound holds up to the final rounding of n / s to the target width.

Range:
    v * s must stay inside the exactly representable integer range of the
    input's width (2**53 for float64, 2**24 for float32). Outside it the
    conversion raises OverflowError instead of handing back a wrapped or
    silently rounded integer.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable

import numpy as np

from .arithmetic import Real, SUPPORTED_DTYPES, width_of
from .error_taxonomy import ContractViolation


def validate_scale(scale: int) -> int:
    """
    Check that scale is a positive integer power of ten (1, 10, 100, ...).

    Returns:
        The scale, unchanged

    Raises:
        ContractViolation: zero, negative, non-integer or not a power of ten
    """
    if isinstance(scale, bool) or not isinstance(scale, (int, np.integer)):
        raise ContractViolation(f"scale must be an integer power of ten, got {type(scale).__name__}")
    scale = int(scale)
    if scale <= 0:
        raise ContractViolation(f"scale must be positive, got {scale}")
    rest = scale
    while rest % 10 == 0:
        rest //= 10
    if rest != 1:
        raise ContractViolation(f"scale must be a power of ten, got {scale}")
    return scale


def _exact_integer_limit(dtype) -> int:
    return 2 ** (np.finfo(dtype).nmant + 1)


def to_fixed(value: Real, scale: int) -> int:
    """
    Convert a real to its fixed-point integer at `scale`.

    Args:
        value: float32, float64 or Python float
        scale: Positive power of ten (100 for cents, 1_000_000 for micro-units)

    Returns:
        Python int

    Raises:
        ContractViolation: invalid scale
        ValueError: value is NaN
        OverflowError: value * scale is infinite or outside the exact integer range
    """
    scale = validate_scale(scale)
    dtype = width_of(value)
    x = dtype(value)

    if np.isnan(x):
        raise ValueError("Cannot convert NaN to fixed-point")

    limit = _exact_integer_limit(dtype)
    overflow = OverflowError(
        f"{value!r} * {scale} exceeds the exact integer range of {np.dtype(dtype).name} (2**{limit.bit_length() - 1})"
    )
    if not np.isfinite(x):
        raise overflow

    # Decimal(float) is exact; scaleb by a power of ten keeps the coefficient,
    # so a precision of len(digits) makes the product exact too
    exact = Decimal(float(x))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(exact.as_tuple().digits))
        scaled = exact.scaleb(len(str(scale)) - 1)
        if abs(scaled) >= limit:
            raise overflow
        # ROUND_HALF_UP is half away from zero for both signs
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_fixed(fixed_value: int, scale: int, dtype=np.float64) -> Real:
    """
    Convert a fixed-point integer back to a real of width `dtype`.

    Args:
        fixed_value: Integer produced by to_fixed() at the same scale
        scale: Same power of ten used for the forward conversion
        dtype: numpy.float32, numpy.float64 or float (float returns a Python float)

    Raises:
        ContractViolation: invalid scale, non-integer fixed_value or unsupported dtype
        OverflowError: fixed_value does not fit the target width
    """
    scale = validate_scale(scale)
    if isinstance(fixed_value, bool) or not isinstance(fixed_value, (int, np.integer)):
        raise ContractViolation(f"fixed_value must be an integer, got {type(fixed_value).__name__}")

    as_builtin = dtype is float
    target = np.float64 if as_builtin else dtype
    if target not in SUPPORTED_DTYPES:
        raise ContractViolation(f"Unsupported real width: {dtype!r}")

    with np.errstate(over="ignore"):
        numerator = target(int(fixed_value))
    if not np.isfinite(numerator):
        raise OverflowError(f"{fixed_value} does not fit in {np.dtype(target).name}")

    result = numerator / target(scale)
    return float(result) if as_builtin else result


def fixed_sum(values: Iterable[Real], scale: int) -> int:
    """
    Sum reals exactly by accumulating their fixed-point integers.

    Each value is converted with to_fixed() first, so the total carries no
    accumulation error beyond the per-value rounding at `scale`.
    """
    scale = validate_scale(scale)
    return sum((to_fixed(v, scale) for v in values), 0)
