from __future__ import annotations

import json
import math

import numpy as np

from precision_kits.float_stability.report import ResultReporter
from precision_kits.float_stability.scenario import ScenarioResult, ScenarioState


def _result(name="r", state=ScenarioState.PASSED, outputs=(1.0,), reference=1.0, tolerance=1e-9, **kwargs):
    return ScenarioResult(
        name=name,
        state=state,
        outputs=tuple(outputs),
        reference=reference,
        tolerance=tolerance,
        deterministic=kwargs.pop("deterministic", True),
        within_tolerance=kwargs.pop("within_tolerance", state is ScenarioState.PASSED),
        **kwargs,
    )


def test_normalize_passed_result() -> None:
    record = ResultReporter().normalize(_result(outputs=(np.float32(0.5),) * 3, reference=0.5))
    assert record["state"] == "passed"
    assert record["passed"] is True
    assert record["width"] == "float32"
    assert record["bits"] == np.float32(0.5).tobytes().hex()
    assert record["distinct_outputs"] == 1
    assert record["repetitions"] == 3
    assert record["max_deviation"] == 0.0
    assert record["category"] is None
    assert record["severity"] is None


def test_normalize_determinism_failure() -> None:
    result = _result(
        state=ScenarioState.FAILED_DETERMINISM,
        outputs=(1.0, 1.0000000000000002, 1.0),
        deterministic=False,
        within_tolerance=True,
    )
    record = ResultReporter().normalize(result)
    assert record["distinct_outputs"] == 2
    assert record["category"] == "failed_determinism"
    assert record["severity"] == "critical"


def test_normalize_keeps_nan_unless_json_safe() -> None:
    result = _result(state=ScenarioState.FAILED_TOLERANCE, outputs=(math.nan, math.nan))
    reporter = ResultReporter()

    raw = reporter.normalize(result)
    assert math.isnan(raw["value"])
    assert math.isnan(raw["max_deviation"])
    assert raw["non_finite"] is True
    assert raw["category"] == "non_finite"

    safe = reporter.normalize(result, json_safe=True)
    assert safe["value"] == "nan"
    assert safe["max_deviation"] == "nan"
    json.dumps(safe, allow_nan=False)


def test_normalize_error_result_without_outputs() -> None:
    result = _result(state=ScenarioState.FAILED_ERROR, outputs=(), error="ZeroDivisionError: Division by zero")
    record = ResultReporter().normalize(result, json_safe=True)
    assert record["value"] == "nan"
    assert record["width"] is None
    assert record["bits"] is None
    assert record["repetitions"] == 0
    assert record["error"].startswith("ZeroDivisionError")
    assert record["category"] == "failed_error"


def test_to_frame_indexes_by_name() -> None:
    results = [
        _result(name="a"),
        _result(name="b", state=ScenarioState.FAILED_TOLERANCE, outputs=(2.0,)),
    ]
    frame = ResultReporter().to_frame(results)
    assert list(frame.index) == ["a", "b"]
    assert frame.loc["b", "state"] == "failed_tolerance"
    assert frame.loc["b", "max_deviation"] == 1.0
    assert frame["passed"].tolist() == [True, False]


def test_to_frame_of_nothing_is_empty() -> None:
    frame = ResultReporter().to_frame([])
    assert frame.empty
    assert "state" in frame.columns


def test_summarize_counts_terminal_states() -> None:
    results = [
        _result(name="a"),
        _result(name="b"),
        _result(name="c", state=ScenarioState.FAILED_DETERMINISM, outputs=(1.0, 2.0), deterministic=False),
        _result(name="d", state=ScenarioState.FAILED_ERROR, outputs=()),
    ]
    summary = ResultReporter().summarize(results)
    assert summary["total"] == 4
    assert summary["passed"] == 2
    assert summary["failed"] == 2
    assert summary["pass_rate"] == 0.5
    assert summary["all_passed"] is False
    assert summary["by_state"] == {
        "passed": 2,
        "failed_determinism": 1,
        "failed_tolerance": 0,
        "failed_error": 1,
    }


def test_summarize_empty_batch() -> None:
    summary = ResultReporter().summarize([])
    assert summary["total"] == 0
    assert summary["pass_rate"] == 0.0
    assert summary["all_passed"] is False


def test_render_marks_pass_and_fail() -> None:
    text = ResultReporter().render([
        _result(name="good"),
        _result(name="bad", state=ScenarioState.FAILED_ERROR, outputs=(), error="OverflowError: too big"),
    ])
    assert "[PASS] good" in text
    assert "[FAIL] bad" in text
    assert "error: OverflowError: too big" in text
    assert "1/2 scenarios passed" in text
