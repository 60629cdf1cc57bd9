from __future__ import annotations

import itertools

import numpy as np
import pytest

from precision_kits.float_stability.arithmetic import bit_pattern, divide
from precision_kits.float_stability.catalog import canonical_scenarios
from precision_kits.float_stability.comparator_config import ScenarioConfig
from precision_kits.float_stability.error_taxonomy import ContractViolation, FailureTaxonomy
from precision_kits.float_stability.fixed_point import to_fixed
from precision_kits.float_stability.runner import ScenarioRunner
from precision_kits.float_stability.scenario import PrecisionScenario, ScenarioState
from precision_kits.float_stability.tolerance import within


def _scenario(name, computation, reference=1.0, repetitions=5, tolerance=1e-12, digits=None, **inputs):
    return PrecisionScenario(
        name=name,
        computation=computation,
        inputs=inputs,
        reference=reference,
        config=ScenarioConfig(repetitions=repetitions, tolerance=tolerance, stabilization_digits=digits),
    )


def _runner(*scenarios) -> ScenarioRunner:
    runner = ScenarioRunner(max_workers=4)
    runner.register_all(scenarios)
    return runner


def test_register_sets_registered_state() -> None:
    runner = _runner(_scenario("one", lambda: 1.0))
    assert runner.state_of("one") is ScenarioState.REGISTERED
    assert [s.name for s in runner.scenarios] == ["one"]


def test_duplicate_name_is_rejected() -> None:
    runner = _runner(_scenario("dup", lambda: 1.0))
    with pytest.raises(ContractViolation, match="already registered"):
        runner.register(_scenario("dup", lambda: 2.0))


def test_register_rejects_non_scenarios() -> None:
    with pytest.raises(ContractViolation):
        ScenarioRunner(max_workers=1).register({"name": "x"})


def test_unknown_names_are_rejected() -> None:
    runner = _runner(_scenario("one", lambda: 1.0))
    with pytest.raises(ContractViolation):
        runner.get("missing")
    with pytest.raises(ContractViolation):
        runner.run(names=["one", "missing"])


def test_execute_requires_registration() -> None:
    runner = _runner(_scenario("one", lambda: 1.0))
    with pytest.raises(ContractViolation):
        runner.execute(_scenario("one", lambda: 1.0))


@pytest.mark.parametrize("workers", [0, -1, 1.5, True])
def test_invalid_worker_count(workers) -> None:
    with pytest.raises(ContractViolation):
        ScenarioRunner(max_workers=workers)


def test_passing_scenario_reaches_passed() -> None:
    runner = _runner(_scenario("sum", lambda a, b: a + b, reference=0.3, tolerance=1e-15, a=0.1, b=0.2))
    [result] = runner.run()
    assert result.state is ScenarioState.PASSED
    assert result.deterministic and result.within_tolerance
    assert result.value == 0.30000000000000004
    assert len(result.outputs) == 5
    assert runner.state_of("sum") is ScenarioState.PASSED


def test_every_repetition_calls_the_computation() -> None:
    calls = []

    def computation():
        calls.append(1)
        return 1.0

    runner = _runner(_scenario("counted", computation, repetitions=37))
    runner.run()
    assert len(calls) == 37


def test_each_repetition_gets_fresh_inputs() -> None:
    def computation(values):
        values.append(1.0)
        return float(sum(values))

    runner = _runner(_scenario("mutating", computation, reference=3.0, repetitions=10, values=[1.0, 1.0]))
    [result] = runner.run()
    assert result.state is ScenarioState.PASSED, result


def test_changing_output_fails_determinism() -> None:
    counter = itertools.count()
    runner = _runner(_scenario("drift", lambda: 1.0 + next(counter) * 1e-16, tolerance=1.0))
    [result] = runner.run()
    assert result.state is ScenarioState.FAILED_DETERMINISM
    assert not result.deterministic
    # every output is within tolerance; determinism is judged on its own
    assert result.within_tolerance
    assert FailureTaxonomy.category_for(result) == "failed_determinism"


def test_nan_payload_differences_fail_determinism() -> None:
    counter = itertools.count(1)

    def computation():
        return np.array([0x7FF8000000000000 + next(counter)], dtype=np.uint64).view(np.float64)[0]

    [result] = _runner(_scenario("payloads", computation)).run()
    assert result.state is ScenarioState.FAILED_DETERMINISM


def test_signed_zero_differences_fail_determinism() -> None:
    counter = itertools.count()
    [result] = _runner(
        _scenario("zeros", lambda: 0.0 if next(counter) % 2 else -0.0, reference=0.0, tolerance=0.0)
    ).run()
    assert result.state is ScenarioState.FAILED_DETERMINISM


def test_identical_nan_fails_tolerance_as_non_finite() -> None:
    [result] = _runner(_scenario("nan", lambda: float("nan"), tolerance=1e9)).run()
    assert result.deterministic
    assert result.state is ScenarioState.FAILED_TOLERANCE
    assert result.non_finite
    assert FailureTaxonomy.category_for(result) == "non_finite"


def test_float32_overflow_to_inf_fails_tolerance() -> None:
    [result] = _runner(
        _scenario("overflow", lambda a, b: a * b, reference=1.0, tolerance=1.0,
                  a=np.float32(3.4e38), b=np.float32(2.0))
    ).run()
    assert result.state is ScenarioState.FAILED_TOLERANCE
    assert result.non_finite


def test_deterministic_but_inaccurate_fails_tolerance() -> None:
    scenario = canonical_scenarios(repetitions=3)[2]
    strict = scenario.with_config(ScenarioConfig(repetitions=3, tolerance=1e-6))
    [result] = _runner(strict).run()
    assert result.deterministic
    assert result.state is ScenarioState.FAILED_TOLERANCE
    assert FailureTaxonomy.category_for(result) == "failed_tolerance"


def test_arithmetic_error_fails_scenario_but_not_batch() -> None:
    runner = _runner(
        _scenario("div_zero", divide, a=1.0, b=0.0),
        _scenario("fixed_overflow", lambda: float(to_fixed(1e300, 100))),
        _scenario("fine", lambda: 1.0),
    )
    outcome = runner.run_batch()
    states = {r.name: r.state for r in outcome.results}

    assert states == {
        "div_zero": ScenarioState.FAILED_ERROR,
        "fixed_overflow": ScenarioState.FAILED_ERROR,
        "fine": ScenarioState.PASSED,
    }
    assert "ZeroDivisionError" in outcome.results[0].error
    assert "OverflowError" in outcome.results[1].error
    assert not outcome.passed
    assert [r.name for r in outcome.failed] == ["div_zero", "fixed_overflow"]


def test_value_error_fails_scenario_but_not_batch() -> None:
    runner = _runner(
        _scenario("nan_fixed", lambda: float(to_fixed(float("nan"), 100))),
        _scenario("fine", lambda: 1.0),
    )
    outcome = runner.run_batch()
    nan_fixed, fine = outcome.results

    assert nan_fixed.state is ScenarioState.FAILED_ERROR
    assert nan_fixed.error.startswith("ValueError")
    assert nan_fixed.outputs == ()
    assert not nan_fixed.within_tolerance
    assert fine.state is ScenarioState.PASSED
    assert runner.state_of("nan_fixed") is ScenarioState.FAILED_ERROR
    assert runner.state_of("fine") is ScenarioState.PASSED
    assert FailureTaxonomy.category_for(nan_fixed) == "failed_error"


def test_any_exception_is_recorded(caplog) -> None:
    def lookup(table):
        return table["missing"]

    runner = _runner(_scenario("key_error", lookup, table={"present": 1.0}))
    with caplog.at_level("WARNING", logger="precision_kits.float_stability.runner"):
        [result] = runner.run()
    assert result.state is ScenarioState.FAILED_ERROR
    assert result.error.startswith("KeyError")
    assert "key_error" in caplog.text


def test_contract_violation_inside_computation_propagates() -> None:
    runner = _runner(_scenario("bad_tol", lambda: float(within(1.0, 1.0, -1.0))))
    with pytest.raises(ContractViolation):
        runner.run()
    assert runner.state_of("bad_tol") is ScenarioState.FAILED_ERROR


def test_propagating_error_does_not_leave_scenario_running() -> None:
    calls = []

    def second_call_misbehaves():
        calls.append(1)
        return 1.0 if len(calls) == 1 else "1.0"

    runner = _runner(_scenario("flaky_type", second_call_misbehaves, repetitions=3))
    with pytest.raises(ContractViolation):
        runner.execute(runner.get("flaky_type"))
    assert len(calls) == 2
    assert runner.state_of("flaky_type") is ScenarioState.FAILED_ERROR


@pytest.mark.parametrize("output", ["1.0", None, True, [1.0]])
def test_non_real_output_is_a_contract_violation(output) -> None:
    runner = _runner(_scenario("bad_output", lambda: output))
    with pytest.raises(ContractViolation):
        runner.run()


def test_declared_stabilization_is_applied_before_judging() -> None:
    runner = _runner(
        _scenario("stabilized_sum", lambda a, b: a + b, reference=0.3, tolerance=0.0, digits=12, a=0.1, b=0.2)
    )
    [result] = runner.run()
    assert result.state is ScenarioState.PASSED
    assert result.value == 0.3


def test_parallel_results_match_serial_order_and_bits() -> None:
    serial = _runner(*canonical_scenarios(repetitions=5)).run()
    parallel = _runner(*canonical_scenarios(repetitions=5)).run(parallel=True)

    assert [r.name for r in parallel] == [r.name for r in serial]
    assert [r.state for r in parallel] == [r.state for r in serial]
    for p, s in zip(parallel, serial):
        assert [bit_pattern(o) for o in p.outputs] == [bit_pattern(o) for o in s.outputs], p.name


def test_run_subset_keeps_requested_order() -> None:
    runner = _runner(*canonical_scenarios(repetitions=2))
    results = runner.run(names=["power_raw", "classic_sum_f64"], parallel=True)
    assert [r.name for r in results] == ["power_raw", "classic_sum_f64"]
    assert runner.state_of("cancellation_f32") is ScenarioState.REGISTERED


def test_empty_runner_returns_no_results() -> None:
    runner = ScenarioRunner(max_workers=2)
    assert runner.run() == []
    assert runner.run_batch().results == ()
