"""Orchestration layer for flywarm."""
from __future__ import annotations

from .logger import VerboseGateAdapter, WarmupLogger, build_default_logger
from .models import CustomStepSpec, EndpointSpec, RunResult, StepResult, WarmupConfig
from .warmup import WarmupOrchestrator, run_warmup

__all__ = [
    "CustomStepSpec",
    "EndpointSpec",
    "RunResult",
    "StepResult",
    "VerboseGateAdapter",
    "WarmupConfig",
    "WarmupLogger",
    "WarmupOrchestrator",
    "build_default_logger",
    "run_warmup",
]
