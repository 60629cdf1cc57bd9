"""
Float Stability Kit - Canonical Scenario Catalog

Known-hard floating-point computations, each registered as a PrecisionScenario
with its own documented tolerance policy.

Tolerance policy per scenario (there is no catalog-wide epsilon):
- float32 scenarios: tolerance sized to float32 representation error (~1.2e-7 at 1.0)
- float64 unit-scale math: 1e-15 or a few ulps of the magnitude involved
- financial ratios/prices: 1e-12 after 12-digit stabilization
- currency amounts: one cent after 2-digit stabilization
- growth/decay amounts in the thousands: 1e-9 (sub-cent, above accumulated pow error)
"""

import math
from typing import List

import numpy as np

from .arithmetic import add, divide, multiply, power
from .comparator_config import ScenarioConfig
from .reference import reference_compound, reference_decay, reference_power, reference_quotient
from .scenario import PrecisionScenario
from .stabilizer import FINANCIAL_DIGITS

GOLDEN_RATIO = 1.618033988749895
E_APPROX = 2.718281828459045


# --- Computations (pure: same inputs, same output) ---

def subtract(a, b):
    return a - b


def accumulate(step, count):
    """Add `step` to a zero of the same width `count` times."""
    total = step.dtype.type(0) if isinstance(step, np.generic) else 0.0
    for _ in range(count):
        total = add(total, step)
    return total


def classic_sum(a, b):
    return add(a, b)


def compound(principal, rate, periods):
    """principal * (1 + rate) ** periods in one pow call."""
    return multiply(principal, power(add(1.0, rate), periods))


def compound_iteratively(principal, rate, periods):
    """Apply (1 + rate) once per period, the way an on-chain loop would."""
    amount = principal
    growth = add(1.0, rate)
    for _ in range(periods):
        amount = multiply(amount, growth)
    return amount


def raise_power(base, exponent):
    return power(base, exponent)


def exponential_decay(initial, base, rate, time):
    return multiply(initial, power(base, -rate * time))


def price_after_trade(reserve_x, reserve_y, trade_amount):
    """Constant-product pool (x * y = k) spot price after adding trade_amount of x."""
    k = multiply(reserve_x, reserve_y)
    new_x = add(reserve_x, trade_amount)
    new_y = divide(k, new_x)
    return divide(new_y, new_x)


# --- Catalog ---

def canonical_scenarios(repetitions: int = 100) -> List[PrecisionScenario]:
    """
    Build the canonical catalog.

    Args:
        repetitions: How many times each scenario is executed per run

    Returns:
        List of immutable scenarios, in reporting order
    """
    return [
        PrecisionScenario(
            name="cancellation_f32",
            computation=subtract,
            inputs={'a': np.float32(1.0000001), 'b': np.float32(1.0)},
            reference=1e-7,
            config=ScenarioConfig(repetitions=repetitions, tolerance=2e-7),
            description=(
                "Catastrophic cancellation at float32: observed 2**-23 (~1.192e-7), not 1e-7. "
                "Tolerance 2e-7 covers one float32 ulp at 1.0."
            ),
        ),
        PrecisionScenario(
            name="cancellation_f64",
            computation=subtract,
            inputs={'a': 1.000000000000001, 'b': 1.0},
            reference=1e-15,
            config=ScenarioConfig(repetitions=repetitions, tolerance=2.5e-16),
            description=(
                "Catastrophic cancellation at float64: observed ~1.110e-15 (5 ulps of 1.0). "
                "Tolerance 2.5e-16 is just over one float64 ulp at 1.0."
            ),
        ),
        PrecisionScenario(
            name="accumulation_f32",
            computation=accumulate,
            inputs={'step': np.float32(0.1), 'count': 1000},
            reference=100.0,
            config=ScenarioConfig(repetitions=repetitions, tolerance=0.01),
            description=(
                "0.1 summed 1000 times at float32 drifts to ~99.999046. "
                "Tolerance 0.01 scales with count * float32 ulp at the running magnitude."
            ),
        ),
        PrecisionScenario(
            name="accumulation_f64",
            computation=accumulate,
            inputs={'step': 0.1, 'count': 1000},
            reference=100.0,
            config=ScenarioConfig(repetitions=repetitions, tolerance=1e-9),
            description=(
                "0.1 summed 1000 times at float64 drifts by ~1.4e-12. "
                "Tolerance 1e-9 scales with count * float64 ulp at 100."
            ),
        ),
        PrecisionScenario(
            name="classic_sum_f64",
            computation=classic_sum,
            inputs={'a': 0.1, 'b': 0.2},
            reference=0.3,
            config=ScenarioConfig.for_pure_math(repetitions),
            description="0.1 + 0.2 is 0.30000000000000004, never 0.3. Pure-math tolerance 1e-15.",
        ),
        PrecisionScenario(
            name="compound_growth",
            computation=compound,
            inputs={'principal': 1000.0, 'rate': 0.05, 'periods': 10},
            reference=reference_compound(1000.0, 0.05, 10),
            config=ScenarioConfig(
                repetitions=repetitions, tolerance=1e-9, stabilization_digits=FINANCIAL_DIGITS
            ),
            description=(
                "1000 * 1.05**10 stabilized to 12 digits; reference from the 50-digit decimal path. "
                "Tolerance 1e-9 is sub-cent and above pow + stabilization error at ~1.6e3."
            ),
        ),
        PrecisionScenario(
            name="compound_iterative",
            computation=compound_iteratively,
            inputs={'principal': 10000.0, 'rate': 0.0001, 'periods': 365},
            reference=reference_compound(10000.0, 0.0001, 365),
            config=ScenarioConfig.for_currency(repetitions),
            description=(
                "Daily compounding applied 365 times must agree with the closed form to the cent. "
                "Currency policy: stabilize to 2 digits, one cent tolerance."
            ),
        ),
        PrecisionScenario(
            name="power_raw",
            computation=raise_power,
            inputs={'base': GOLDEN_RATIO, 'exponent': math.pi},
            reference=reference_power(GOLDEN_RATIO, math.pi),
            config=ScenarioConfig(repetitions=repetitions, tolerance=1e-12),
            description=(
                "phi ** pi with no stabilization; raw output may carry noise in the 15th-16th digit. "
                "Tolerance 1e-12 (financial resolution)."
            ),
        ),
        PrecisionScenario(
            name="power_stabilized",
            computation=raise_power,
            inputs={'base': GOLDEN_RATIO, 'exponent': math.pi},
            reference=reference_power(GOLDEN_RATIO, math.pi),
            config=ScenarioConfig.for_financial(repetitions),
            description=(
                "phi ** pi stabilized to 12 digits: the canonical value must repeat bit-for-bit. "
                "Financial policy: tolerance 1e-12."
            ),
        ),
        PrecisionScenario(
            name="exponential_decay",
            computation=exponential_decay,
            inputs={'initial': 1000.0, 'base': E_APPROX, 'rate': 0.1, 'time': 5.0},
            reference=reference_decay(1000.0, E_APPROX, 0.1, 5.0),
            config=ScenarioConfig(
                repetitions=repetitions, tolerance=1e-9, stabilization_digits=FINANCIAL_DIGITS
            ),
            description=(
                "1000 * e**(-0.5) stabilized to 12 digits. "
                "Tolerance 1e-9 covers the 0.1 * 5.0 input representation error at ~606."
            ),
        ),
        PrecisionScenario(
            name="amm_price_impact",
            computation=price_after_trade,
            inputs={'reserve_x': 1_000_000.0, 'reserve_y': 2_000_000.0, 'trade_amount': 10_000.0},
            reference=reference_quotient(2_000_000_000_000.0, 1_020_100_000_000.0),
            config=ScenarioConfig.for_financial(repetitions),
            description=(
                "Constant-product price after a 1% trade (~1.96059209881384). "
                "Financial policy: 12-digit stabilization, tolerance 1e-12."
            ),
        ),
    ]


def scenario_names() -> List[str]:
    return [s.name for s in canonical_scenarios(repetitions=1)]
