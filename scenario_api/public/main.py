"""
FastAPI application for the float stability scenario API.

Read-only reporting surface over precision_kits.float_stability: list the
canonical catalog and execute it on demand. Every response carries an
X-Request-ID header, and every log line carries the same trace id.
"""
from fastapi import FastAPI, status, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import os
import logging
import uuid
import time
from contextvars import ContextVar

from scenario_api.public.routes import health, scenarios
from scenario_api.public.schemas import ErrorResponse
from scenario_api.public.settings import settings
from precision_kits.float_stability import __version__ as kit_version
from precision_kits.float_stability.error_taxonomy import ContractViolation

# Context var for trace_id (used in logging)
trace_id_ctx: ContextVar[str] = ContextVar('trace_id', default='-')


# Logging filter to inject trace_id into all log records
class TraceIdFilter(logging.Filter):
    def filter(self, record):
        record.trace_id = trace_id_ctx.get()
        return True


root_logger = logging.getLogger()
if not root_logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='[%(trace_id)s] %(name)s: %(message)s',
    )

# Add trace_id filter to root logger
for handler in logging.root.handlers:
    if not any(isinstance(f, TraceIdFilter) for f in handler.filters):
        handler.addFilter(TraceIdFilter())

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Float Stability Scenario API",
    description="Run known-hard floating-point scenarios and report determinism and tolerance verdicts.",
    version=settings.api_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


@app.get("/")
def root():
    return {"name": "Float Stability Scenario API", "status": "running", "kit_version": kit_version}


# Trace ID middleware (sets request.state.trace_id and adds response headers)
@app.middleware("http")
async def add_trace_id_middleware(request: Request, call_next):
    trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.trace_id = trace_id

    token = trace_id_ctx.set(trace_id)
    try:
        start = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start

        response.headers["X-Request-ID"] = trace_id
        response.headers["X-Process-Time"] = str(process_time)
        return response
    finally:
        trace_id_ctx.reset(token)


app.include_router(health.router)
app.include_router(scenarios.router)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or request.headers.get("X-Request-ID") or str(uuid.uuid4())


def _error_response(request: Request, status_code: int, error: dict) -> JSONResponse:
    body = ErrorResponse(trace_id=_trace_id(request), error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# HTTPException handler (wraps all HTTPException into ErrorResponse format)
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict):
        err = exc.detail
    else:
        err = {"code": str(exc.detail), "message": str(exc.detail)}

    return _error_response(request, exc.status_code, err)


# RequestValidationError handler (wraps 422 validation errors into ErrorResponse format)
@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_response(request, 422, {
        "code": "REQUEST_VALIDATION_ERROR",
        "message": "Request validation failed",
        "detail": jsonable_encoder(exc.errors()),
    })


# Invalid scenario names, overrides or configs
@app.exception_handler(ContractViolation)
async def contract_violation_handler(request: Request, exc: ContractViolation):
    logger.warning("contract violation: %s", exc)
    return _error_response(request, 422, {"code": "CONTRACT_VIOLATION", "message": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error")
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred.",
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "scenario_api.public.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=settings.environment == "development"
    )
