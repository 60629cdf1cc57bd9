"""
Runner settings for the float stability kit.
Externalizes execution config (never numeric policy) via environment variables.
"""
import os


class KitSettings:
    """Kit settings with environment variable support."""

    def __init__(self):
        # Worker threads for parallel batches (scenarios run concurrently, repetitions never do)
        self.max_workers: int = int(os.getenv("FLOAT_STABILITY_MAX_WORKERS", "4"))
        self.log_level: str = os.getenv("FLOAT_STABILITY_LOG_LEVEL", "INFO").upper()
        # Repetitions used by the CLI acceptance gate for the canonical catalog
        self.gate_repetitions: int = int(os.getenv("FLOAT_STABILITY_GATE_REPETITIONS", "100"))


settings = KitSettings()
