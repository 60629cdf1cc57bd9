"""
Float Stability Kit - High-Precision Reference Path

Reference values for scenarios, evaluated in decimal at 50 significant digits
from the exact binary value of each float input (Decimal(float) is exact).

The result is rounded once, to the nearest float64, at the very end. These
functions exist to produce references only; scenario computations themselves
always run at native float width.
"""

from decimal import Decimal, localcontext

from .arithmetic import Real

REFERENCE_PRECISION = 50


def _d(value: Real) -> Decimal:
    return Decimal(float(value))


def reference_power(base: Real, exponent: Real) -> float:
    """base ** exponent, correctly rounded from a 50-digit intermediate."""
    with localcontext() as ctx:
        ctx.prec = REFERENCE_PRECISION
        return float(_d(base) ** _d(exponent))


def reference_compound(principal: Real, rate: Real, periods: Real) -> float:
    """principal * (1 + rate) ** periods."""
    with localcontext() as ctx:
        ctx.prec = REFERENCE_PRECISION
        return float(_d(principal) * (Decimal(1) + _d(rate)) ** _d(periods))


def reference_decay(initial: Real, base: Real, rate: Real, time: Real) -> float:
    """initial * base ** (-rate * time)."""
    with localcontext() as ctx:
        ctx.prec = REFERENCE_PRECISION
        return float(_d(initial) * _d(base) ** (-_d(rate) * _d(time)))


def reference_quotient(numerator: Real, denominator: Real) -> float:
    with localcontext() as ctx:
        ctx.prec = REFERENCE_PRECISION
        return float(_d(numerator) / _d(denominator))
