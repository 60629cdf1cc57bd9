"""
Float Stability Kit - Scenario Runner

Execute registered PrecisionScenarios and judge every execution with two
independent checks:
- Determinism: all N repetitions produce bit-identical outputs
- Tolerance: the (identical) output is within the declared tolerance of the reference

State machine per execution:
    registered -> running -> passed | failed_determinism | failed_tolerance
                          -> failed_error (computation raised anything but ContractViolation)

Contract:
- Each repetition calls computation(**inputs) with a fresh deep copy of the inputs
- Nothing is cached between repetitions; a cache would mask real nondeterminism
- Independent scenarios may run in parallel; repetitions of one scenario never do
- A failing scenario never aborts the batch; ContractViolation always propagates
"""

import copy
import logging
import numbers
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .arithmetic import bit_pattern
from .error_taxonomy import ContractViolation
from .scenario import PrecisionScenario, ScenarioResult, ScenarioState
from .settings import settings
from .stabilizer import stabilize
from .tolerance import within

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchOutcome:
    """Results of one batch; the batch passes only if every scenario passed."""

    results: Tuple[ScenarioResult, ...]

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failed(self) -> List[ScenarioResult]:
        return [r for r in self.results if not r.passed]


class ScenarioRunner:
    """Own a set of scenarios and execute them under the determinism/tolerance state machine."""

    def __init__(self, max_workers: Optional[int] = None):
        """
        Args:
            max_workers: Thread count for parallel batches (defaults to FLOAT_STABILITY_MAX_WORKERS)
        """
        workers = settings.max_workers if max_workers is None else max_workers
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ContractViolation(f"max_workers must be a positive integer, got {workers!r}")
        self.max_workers = workers
        self._scenarios: Dict[str, PrecisionScenario] = {}
        self._states: Dict[str, ScenarioState] = {}

    # --- Registration ---

    def register(self, scenario: PrecisionScenario) -> PrecisionScenario:
        """
        Store an immutable scenario definition.

        Raises:
            ContractViolation: not a PrecisionScenario, or the name is already registered
        """
        if not isinstance(scenario, PrecisionScenario):
            raise ContractViolation(f"Expected PrecisionScenario, got {type(scenario).__name__}")
        if scenario.name in self._scenarios:
            raise ContractViolation(f"Scenario already registered: {scenario.name}")

        self._scenarios[scenario.name] = scenario
        self._transition(scenario.name, ScenarioState.REGISTERED)
        return scenario

    def register_all(self, scenarios: Iterable[PrecisionScenario]) -> None:
        for scenario in scenarios:
            self.register(scenario)

    @property
    def scenarios(self) -> List[PrecisionScenario]:
        """Registered scenarios in registration order."""
        return list(self._scenarios.values())

    def get(self, name: str) -> PrecisionScenario:
        if name not in self._scenarios:
            raise ContractViolation(f"Unknown scenario: {name}")
        return self._scenarios[name]

    def state_of(self, name: str) -> ScenarioState:
        self.get(name)
        return self._states[name]

    def _transition(self, name: str, state: ScenarioState) -> None:
        previous = self._states.get(name)
        self._states[name] = state
        logger.debug("scenario %s: %s -> %s", name, previous.value if previous else "-", state.value)

    # --- Execution ---

    def execute(self, scenario: PrecisionScenario) -> ScenarioResult:
        """
        Run one registered scenario `repetitions` times and judge the outputs.

        Returns:
            ScenarioResult with state, outputs verbatim (after the scenario's own
            declared stabilization step, if any) and both check outcomes

        Raises:
            ContractViolation: scenario not registered here, or computation returned a non-real
                (the scenario is left in failed_error, never running)
        """
        if self._scenarios.get(scenario.name) is not scenario:
            raise ContractViolation(f"Scenario not registered with this runner: {scenario.name}")

        self._transition(scenario.name, ScenarioState.RUNNING)
        outputs = []
        error = None

        try:
            for _ in range(scenario.repetitions):
                output = scenario.computation(**copy.deepcopy(dict(scenario.inputs)))
                if isinstance(output, bool) or not isinstance(output, numbers.Real):
                    raise ContractViolation(
                        f"Scenario {scenario.name}: computation returned {type(output).__name__}, expected a real"
                    )
                if scenario.stabilization_digits is not None:
                    output = stabilize(output, scenario.stabilization_digits)
                outputs.append(output)
        except ContractViolation:
            raise
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            logger.warning("scenario %s raised %s", scenario.name, error)
        finally:
            if error is None and len(outputs) < scenario.repetitions:
                # Propagating; the scenario must not stay RUNNING
                self._transition(scenario.name, ScenarioState.FAILED_ERROR)

        deterministic = len({bit_pattern(o) for o in outputs}) <= 1
        within_tolerance = bool(outputs) and error is None and all(
            within(o, scenario.reference, scenario.tolerance) for o in outputs
        )

        if error is not None:
            state = ScenarioState.FAILED_ERROR
        elif not deterministic:
            state = ScenarioState.FAILED_DETERMINISM
        elif not within_tolerance:
            state = ScenarioState.FAILED_TOLERANCE
        else:
            state = ScenarioState.PASSED

        self._transition(scenario.name, state)

        result = ScenarioResult(
            name=scenario.name,
            state=state,
            outputs=tuple(outputs),
            reference=scenario.reference,
            tolerance=scenario.tolerance,
            deterministic=deterministic,
            within_tolerance=within_tolerance,
            stabilization_digits=scenario.stabilization_digits,
            error=error,
            description=scenario.description,
        )
        logger.info(
            "scenario %s: %s (value=%r, reference=%r, tol=%g)",
            result.name, state.value, result.value, result.reference, result.tolerance
        )
        return result

    def run(self, names: Optional[Sequence[str]] = None, parallel: bool = False) -> List[ScenarioResult]:
        """
        Execute registered scenarios and return one result per scenario.

        Args:
            names: Subset of scenario names to run (default: all, in registration order)
            parallel: Run independent scenarios on a thread pool

        Returns:
            Results in the same order as the scenarios were selected
        """
        if names is None:
            selected = self.scenarios
        else:
            selected = [self.get(name) for name in names]

        if not selected:
            return []

        if parallel and len(selected) > 1:
            workers = min(self.max_workers, len(selected))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scenario") as pool:
                results = list(pool.map(self.execute, selected))
        else:
            results = [self.execute(s) for s in selected]

        passed = sum(1 for r in results if r.passed)
        logger.info("batch finished: %d/%d scenarios passed", passed, len(results))
        return results

    def run_batch(self, names: Optional[Sequence[str]] = None, parallel: bool = False) -> BatchOutcome:
        """Execute scenarios and wrap the results with the batch-level verdict."""
        return BatchOutcome(results=tuple(self.run(names=names, parallel=parallel)))
