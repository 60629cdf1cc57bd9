"""
Pydantic models for request/response validation.
These define the exact contract between client and API.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Union
from datetime import datetime


# Real-valued fields carry NaN/inf as strings ("nan", "inf", "-inf") since JSON has neither
JsonReal = Union[float, str]


class ScenarioConfigModel(BaseModel):
    """Tolerance policy of one scenario."""
    repetitions: int = Field(..., ge=1, description="How many times the computation is executed")
    tolerance: float = Field(..., ge=0, description="Maximum abs(output - reference)")
    stabilization_digits: Optional[int] = Field(None, ge=0, description="Decimal digits kept by the stabilization step, if any")


class ScenarioInfo(BaseModel):
    """Catalog entry (definition only, no execution)."""
    name: str = Field(..., description="Unique scenario name")
    description: str = Field(..., description="What is computed and why the tolerance was chosen")
    reference: float = Field(..., description="Expected value from the high-precision reference path")
    config: ScenarioConfigModel


class ScenarioListResponse(BaseModel):
    scenarios: List[ScenarioInfo]


class RunRequest(BaseModel):
    """
    Request to execute catalog scenarios.

    Overrides replace a scenario's whole config; keys follow ScenarioConfig.from_dict
    (repetitions/repetition_count/repetitionCount, tolerance, stabilization_digits/stabilizationDigits).
    """
    names: Optional[List[str]] = Field(None, description="Scenarios to run (default: whole catalog, in catalog order)")
    parallel: Optional[bool] = Field(None, description="Run scenarios on a thread pool (default from SCENARIO_API_PARALLEL)")
    overrides: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-scenario config overrides, keyed by scenario name",
    )


class ScenarioRecord(BaseModel):
    """One executed scenario, as produced by ResultReporter.normalize(json_safe=True)."""
    name: str
    state: str = Field(..., description="passed | failed_determinism | failed_tolerance | failed_error")
    passed: bool
    deterministic: bool
    within_tolerance: bool
    value: JsonReal = Field(..., description="First observed output")
    width: Optional[str] = Field(None, description="float32 | float64")
    bits: Optional[str] = Field(None, description="Hex of the first output's raw bytes")
    distinct_outputs: int = Field(..., ge=0, description="Number of distinct bit patterns observed")
    reference: JsonReal
    tolerance: JsonReal
    max_deviation: JsonReal
    stabilization_digits: Optional[int] = None
    repetitions: int = Field(..., ge=0, description="Outputs actually collected")
    non_finite: bool
    error: Optional[str] = Field(None, description="Arithmetic error message (failed_error only)")
    category: Optional[str] = Field(None, description="Failure category (None when passed)")
    severity: Optional[str] = Field(None, description="critical | high | medium")


class RunSummary(BaseModel):
    total: int = Field(..., ge=0)
    passed: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    pass_rate: float = Field(..., ge=0, le=1, description="Fraction of scenarios passed (0-1)")
    by_state: Dict[str, int]
    all_passed: bool


class RunResponse(BaseModel):
    trace_id: str = Field(..., description="Unique request ID for tracing")
    status: str = Field(..., description="'ok' when every scenario passed, 'failed' otherwise")
    results: List[ScenarioRecord]
    summary: RunSummary


class ErrorResponse(BaseModel):
    """Standard error response."""
    trace_id: str = Field(..., description="Unique request ID")
    status: str = Field(default="error", description="Always 'error'")
    error: Dict[str, Any] = Field(..., description="Error details with 'code', 'message'")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="'ok' if healthy")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
    commit: str = Field(..., description="Git commit hash")
    timestamp: datetime = Field(..., description="Current time (ISO8601)")
