# Float Stability Domain Kit
# Make floating-point results comparison-safe (tolerance, stabilization, fixed-point)
# and prove determinism of known-hard computations across repeated runs

from .tolerance import within, within_relative, definitely_less, definitely_greater
from .stabilizer import stabilize, stable_equal, FINANCIAL_DIGITS
from .fixed_point import to_fixed, from_fixed, fixed_sum, validate_scale
from .comparator_config import ScenarioConfig
from .scenario import PrecisionScenario, ScenarioResult, ScenarioState
from .runner import ScenarioRunner, BatchOutcome
from .catalog import canonical_scenarios
from .report import ResultReporter
from .error_taxonomy import ContractViolation, FailureTaxonomy

__all__ = [
    'within', 'within_relative', 'definitely_less', 'definitely_greater',
    'stabilize', 'stable_equal', 'FINANCIAL_DIGITS',
    'to_fixed', 'from_fixed', 'fixed_sum', 'validate_scale',
    'ScenarioConfig', 'PrecisionScenario', 'ScenarioResult', 'ScenarioState',
    'ScenarioRunner', 'BatchOutcome', 'canonical_scenarios',
    'ResultReporter', 'ContractViolation', 'FailureTaxonomy',
]
__version__ = '1.0.0'
