"""
Application settings for the scenario reporting API.
Externalizes deployment config only; numeric policy lives in the scenario catalog.
"""
import os


class AppSettings:
    """Application settings with environment variable support."""

    def __init__(self):
        self.api_version: str = os.getenv("API_VERSION", "1.0.0")
        self.environment: str = os.getenv("ENVIRONMENT", "development")
        # Render sets RENDER_GIT_COMMIT; prefer it over the generic variable
        self.build_commit: str = os.getenv("RENDER_GIT_COMMIT") or os.getenv("BUILD_COMMIT") or "unknown"
        # Default for POST /scenarios/run when the request does not say
        self.run_parallel: bool = os.getenv("SCENARIO_API_PARALLEL", "true").lower() == "true"
        # Catalog size used by GET /scenarios and as the base for runs
        self.default_repetitions: int = int(os.getenv("SCENARIO_API_REPETITIONS", "100"))


settings = AppSettings()
