"""
Float Stability Result Reporter

Convert ScenarioResults to serializable records, a pandas DataFrame, a summary
dict and console text.

Outputs are reported two ways:
- value: the real as a Python float (NaN/inf kept, never replaced by a sentinel)
- bits: hex of the raw bit pattern, so determinism failures can be inspected

The reporter only presents results; it never re-judges them.
"""

import math
from typing import Any, Dict, List, Sequence

import numpy as np
import pandas as pd

from .arithmetic import bit_pattern
from .error_taxonomy import FailureTaxonomy
from .scenario import ScenarioResult, ScenarioState


def _width_name(value: Any) -> str:
    if isinstance(value, np.generic):
        return value.dtype.name
    if isinstance(value, int) and not isinstance(value, bool):
        return 'int'
    return 'float64'


def _json_real(value: float) -> Any:
    """JSON has no NaN/inf; keep them as strings instead of coercing to a number."""
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    return value


class ResultReporter:
    """Turn scenario results into report-ready forms."""

    def normalize(self, result: ScenarioResult, json_safe: bool = False) -> Dict[str, Any]:
        """
        Convert one result to a flat record.

        Args:
            result: ScenarioResult from ScenarioRunner
            json_safe: Render NaN/inf as strings (for JSON responses)

        Returns:
            Dict with keys:
            - name, state, passed
            - deterministic, within_tolerance
            - value, width, bits: first observed output
            - distinct_outputs: number of distinct bit patterns seen
            - reference, tolerance, max_deviation, stabilization_digits
            - repetitions, non_finite, error
            - category, severity: failure classification (None when passed)
        """
        value = float(result.value) if result.outputs else math.nan
        max_dev = result.max_deviation
        category = FailureTaxonomy.category_for(result)

        record = {
            'name': result.name,
            'state': result.state.value,
            'passed': result.passed,
            'deterministic': result.deterministic,
            'within_tolerance': result.within_tolerance,
            'value': value,
            'width': _width_name(result.value) if result.outputs else None,
            'bits': bit_pattern(result.value)[1].hex() if result.outputs else None,
            'distinct_outputs': len({bit_pattern(o) for o in result.outputs}),
            'reference': float(result.reference),
            'tolerance': float(result.tolerance),
            'max_deviation': max_dev,
            'stabilization_digits': result.stabilization_digits,
            'repetitions': len(result.outputs),
            'non_finite': result.non_finite,
            'error': result.error,
            'category': category,
            'severity': FailureTaxonomy.severity_level(category) if category else None,
        }

        if json_safe:
            for key in ('value', 'reference', 'tolerance', 'max_deviation'):
                record[key] = _json_real(record[key])
        return record

    def to_frame(self, results: Sequence[ScenarioResult]) -> pd.DataFrame:
        """One row per scenario, indexed by scenario name."""
        records = [self.normalize(r) for r in results]
        if not records:
            return pd.DataFrame(columns=['name', 'state', 'passed']).set_index('name')
        return pd.DataFrame.from_records(records).set_index('name')

    def summarize(self, results: Sequence[ScenarioResult]) -> Dict[str, Any]:
        """
        Batch-level summary.

        Returns:
            {
                'total': int,
                'passed': int,
                'failed': int,
                'pass_rate': float (0-1),
                'by_state': {state: count},
                'all_passed': bool
            }
        """
        total = len(results)
        passed = sum(1 for r in results if r.passed)
        by_state = {state.value: 0 for state in ScenarioState if state.terminal}
        for r in results:
            by_state[r.state.value] += 1

        return {
            'total': total,
            'passed': passed,
            'failed': total - passed,
            'pass_rate': 0.0 if total == 0 else passed / total,
            'by_state': by_state,
            'all_passed': total > 0 and passed == total,
        }

    def render(self, results: Sequence[ScenarioResult]) -> str:
        """Plain-text report for consoles and CI logs."""
        lines: List[str] = []
        for r in results:
            mark = "PASS" if r.passed else "FAIL"
            lines.append(
                f"[{mark}] {r.name:22} {r.state.value:19} value={r.value!r} "
                f"ref={float(r.reference)!r} tol={float(r.tolerance):g} dev={r.max_deviation:.3e}"
            )
            if not r.passed:
                info = FailureTaxonomy.classify(FailureTaxonomy.category_for(r))
                lines.append(f"       {info['severity']}: {info['pattern']}")
                if r.error:
                    lines.append(f"       error: {r.error}")

        summary = self.summarize(results)
        lines.append(
            f"{summary['passed']}/{summary['total']} scenarios passed "
            f"(pass_rate={summary['pass_rate']:.2f})"
        )
        return "\n".join(lines)
