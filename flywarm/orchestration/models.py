"""Warmup step declarations and run results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple

from flywarm.errors import ConfigurationError, WarmupFailedError
from flywarm.orchestration.logger import WarmupLogger
from flywarm.transport import HttpClient

DEFAULT_PORT = 3000
SUPPORTED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")
BODY_METHODS: tuple[str, ...] = ("POST", "PUT")
ENDPOINT_STEP_PREFIX = "endpoint:"

WarmupAction = Callable[[], Optional[Awaitable[None]]]


@dataclass(frozen=True)
class EndpointSpec:
    """One HTTP endpoint to exercise during warmup."""

    path: str
    method: str = "GET"
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    repeat_count: int = 1
    required: bool = False

    def __post_init__(self) -> None:
        if not self.path:
            raise ConfigurationError(
                message="Endpoint path cannot be empty.",
                remediation="Give every endpoint a path such as '/health'.",
            )

        method = (self.method or "GET").upper()
        if method not in SUPPORTED_METHODS:
            raise ConfigurationError(
                message=f"Unsupported method '{self.method}' for endpoint {self.path}.",
                remediation=f"Use one of {', '.join(SUPPORTED_METHODS)}.",
            )
        object.__setattr__(self, "method", method)

        # Zero or negative repeat counts still issue one request.
        if self.repeat_count < 1:
            object.__setattr__(self, "repeat_count", 1)

    @property
    def step_name(self) -> str:
        return f"{ENDPOINT_STEP_PREFIX}{self.path}"

    @property
    def has_body(self) -> bool:
        """Return True when a payload should be sent with this endpoint."""

        if self.method not in BODY_METHODS:
            return False
        return self.body is not None and self.body != ""


@dataclass(frozen=True)
class CustomStepSpec:
    """A named initialization routine run once during warmup."""

    name: str
    action: WarmupAction
    required: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError(
                message="Custom warmup steps need a name.",
                remediation="Set a unique 'name' for every custom step.",
            )
        if not callable(self.action):
            raise ConfigurationError(
                message=f"Custom step '{self.name}' has a non-callable action.",
                remediation="Provide a zero-argument async function as the action.",
            )


@dataclass(frozen=True)
class WarmupConfig:
    """Immutable configuration captured when the orchestrator is built."""

    base_url: str | None = None
    port: int = DEFAULT_PORT
    endpoints: Tuple[EndpointSpec, ...] = ()
    custom: Tuple[CustomStepSpec, ...] = ()
    logger: WarmupLogger | None = None
    verbose: bool = False
    http_client: HttpClient | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "endpoints", tuple(self.endpoints))
        object.__setattr__(self, "custom", tuple(self.custom))
        if self.base_url:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

        seen: set[str] = set()
        for step in self.custom:
            if step.name in seen:
                raise ConfigurationError(
                    message=f"Duplicate custom warmup step name '{step.name}'.",
                    remediation="Custom step names identify results and must be unique.",
                )
            seen.add(step.name)

    @property
    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url
        return f"http://localhost:{self.port}"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one executed warmup step."""

    name: str
    success: bool
    duration_ms: int
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "success": self.success,
            "durationMs": self.duration_ms,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class RunResult:
    """Aggregate outcome of a warmup run."""

    success: bool
    duration_ms: int
    steps: Tuple[StepResult, ...] = ()

    @property
    def failed_steps(self) -> Tuple[StepResult, ...]:
        return tuple(step for step in self.steps if not step.success)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation embedded in readiness responses."""

        return {
            "success": self.success,
            "durationMs": self.duration_ms,
            "steps": [step.to_dict() for step in self.steps],
        }

    def raise_for_status(self) -> None:
        """Raise ``WarmupFailedError`` when a required step failed."""

        if self.success:
            return
        failed = ", ".join(step.name for step in self.failed_steps) or "unknown step"
        raise WarmupFailedError(
            message=f"Required warmup steps failed: {failed}.",
            remediation="Inspect the step errors and the service logs before accepting traffic.",
        )


__all__ = [
    "BODY_METHODS",
    "CustomStepSpec",
    "DEFAULT_PORT",
    "ENDPOINT_STEP_PREFIX",
    "EndpointSpec",
    "RunResult",
    "StepResult",
    "SUPPORTED_METHODS",
    "WarmupAction",
    "WarmupConfig",
]
