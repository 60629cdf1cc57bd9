"""
Float Stability Kit - Width-Preserving Arithmetic

Basic operations over 32-bit and 64-bit reals that never widen their operands.

Supported reals:
- numpy.float32: single precision (stays float32 end to end)
- numpy.float64: double precision
- float: Python builtin, treated as double precision
- int: treated as double precision when mixed with floats

Mixing float32 with a Python float keeps float32 (NumPy's weak scalar rule).
Mixing float32 with numpy.float64 promotes to float64, as IEEE 754 requires.
"""

import struct
from typing import Any, Tuple, Union

import numpy as np

Real = Union[float, int, np.float32, np.float64]

SUPPORTED_DTYPES = (np.float32, np.float64)


def as_real(value: Any, dtype=np.float64) -> Real:
    """
    Coerce a value to a numpy real of the requested width.

    Args:
        value: Anything numpy can convert (float, int, numpy scalar, numeric string)
        dtype: numpy.float32 or numpy.float64

    Returns:
        numpy scalar of exactly `dtype`
    """
    if dtype not in SUPPORTED_DTYPES:
        raise TypeError(f"Unsupported real width: {dtype!r} (expected float32 or float64)")
    return dtype(value)


def width_of(value: Real):
    """Return the numpy dtype a real is computed at (float32 or float64)."""
    if isinstance(value, np.floating):
        return value.dtype.type
    return np.float64


def finfo_for(value: Real) -> np.finfo:
    return np.finfo(width_of(value))


def is_finite(value: Real) -> bool:
    """True if the value is neither NaN nor +/-inf."""
    return bool(np.isfinite(value))


def bit_pattern(value: Any) -> Tuple[str, bytes]:
    """
    Hashable identity of a computed value, down to the last bit.

    Two outputs are "identical" for determinism purposes only if their
    bit patterns match. NaN payloads and signed zeros are therefore distinguished.
    """
    if isinstance(value, np.generic):
        return (value.dtype.str, value.tobytes())
    if isinstance(value, bool):
        return ("bool", b"1" if value else b"0")
    if isinstance(value, int):
        return ("int", str(value).encode("ascii"))
    if isinstance(value, float):
        return ("float", struct.pack("<d", value))
    raise TypeError(f"Cannot take bit pattern of {type(value).__name__}")


def add(a: Real, b: Real) -> Real:
    with np.errstate(over="ignore", invalid="ignore"):
        return a + b


def multiply(a: Real, b: Real) -> Real:
    with np.errstate(over="ignore", invalid="ignore"):
        return a * b


def divide(a: Real, b: Real) -> Real:
    """Divide at the operands' width. A zero divisor is an error, not an infinity."""
    if b == 0:
        raise ZeroDivisionError("Division by zero")
    with np.errstate(over="ignore", under="ignore"):
        return a / b


def sqrt(a: Real) -> Real:
    """Square root at the operand's width. Negative input yields NaN."""
    with np.errstate(invalid="ignore"):
        result = np.sqrt(a)
    if isinstance(a, (float, int)) and not isinstance(a, np.generic):
        return float(result)
    return result


def power(base: Real, exponent: Real) -> Real:
    """base ** exponent through the C pow of the operand width."""
    with np.errstate(over="ignore", invalid="ignore", under="ignore"):
        result = np.power(base, exponent)
    if not isinstance(base, np.generic) and not isinstance(exponent, np.generic):
        return float(result)
    return result
