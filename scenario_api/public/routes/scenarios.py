"""
Scenario catalog endpoints.

GET  /scenarios      list the canonical catalog with each scenario's tolerance policy
POST /scenarios/run  execute catalog scenarios (optionally a subset, optionally with
                     per-scenario config overrides) and return normalized results

The API is a presentation layer: it never re-judges results, it only reports
what ScenarioRunner decided. Invalid names or overrides raise ContractViolation,
which main.py maps to a 422 ErrorResponse.
"""
from fastapi import APIRouter, Request
import logging
import uuid

from ..schemas import ErrorResponse, RunRequest, RunResponse, ScenarioListResponse
from ..settings import settings

from precision_kits.float_stability.catalog import canonical_scenarios
from precision_kits.float_stability.comparator_config import ScenarioConfig
from precision_kits.float_stability.error_taxonomy import ContractViolation
from precision_kits.float_stability.report import ResultReporter
from precision_kits.float_stability.runner import ScenarioRunner

router = APIRouter(responses={500: {"model": ErrorResponse}})

logger = logging.getLogger(__name__)


def _catalog():
    return canonical_scenarios(repetitions=settings.default_repetitions)


@router.get("/scenarios", response_model=ScenarioListResponse)
def list_scenarios() -> dict:
    return {
        "scenarios": [
            {
                "name": s.name,
                "description": s.description,
                "reference": float(s.reference),
                "config": s.config.to_dict(),
            }
            for s in _catalog()
        ]
    }


@router.post(
    "/scenarios/run",
    response_model=RunResponse,
    responses={422: {"model": ErrorResponse, "description": "Invalid request, scenario name or override"}},
)
def run_scenarios(payload: RunRequest, request: Request) -> dict:
    """
    Execute scenarios on a fresh runner.

    Overrides are applied before registration; an override for a name that is
    not in the catalog is rejected rather than ignored.
    """
    trace_id = getattr(request.state, "trace_id", None) or str(uuid.uuid4())
    scenarios = {s.name: s for s in _catalog()}

    unknown = sorted(set(payload.overrides) - set(scenarios))
    if unknown:
        raise ContractViolation(f"Override for unknown scenario: {', '.join(unknown)}")

    for name, override in payload.overrides.items():
        scenarios[name] = scenarios[name].with_config(ScenarioConfig.from_dict(override))

    runner = ScenarioRunner()
    runner.register_all(scenarios.values())

    parallel = settings.run_parallel if payload.parallel is None else payload.parallel
    results = runner.run(names=payload.names, parallel=parallel)

    reporter = ResultReporter()
    summary = reporter.summarize(results)
    logger.info(
        "scenario run: %d/%d passed (parallel=%s, overrides=%s)",
        summary["passed"], summary["total"], parallel, sorted(payload.overrides),
    )

    return {
        "trace_id": trace_id,
        "status": "ok" if summary["all_passed"] else "failed",
        "results": [reporter.normalize(r, json_safe=True) for r in results],
        "summary": summary,
    }
