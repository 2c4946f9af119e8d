"""Startup warmup helper for networked services."""
from __future__ import annotations

__all__ = (
    "__version__",
    "CustomStepSpec",
    "EndpointSpec",
    "RunResult",
    "StepResult",
    "WarmupConfig",
    "WarmupOrchestrator",
    "run_warmup",
)

__version__ = "0.1.0"

from .orchestration import (  # noqa: E402
    CustomStepSpec,
    EndpointSpec,
    RunResult,
    StepResult,
    WarmupConfig,
    WarmupOrchestrator,
    run_warmup,
)
