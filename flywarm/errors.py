"""Domain-specific exception hierarchy for flywarm."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FlywarmError(Exception):
    """Base exception for flywarm errors with optional remediation text."""

    message: str
    remediation: str | None = None

    def __post_init__(self) -> None:  # pragma: no cover - dataclass validation hook
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(FlywarmError):
    """Raised when warmup configuration is missing, malformed or inconsistent."""


class WarmupFailedError(FlywarmError):
    """Raised on request when a required warmup step did not succeed."""


__all__ = [
    "FlywarmError",
    "ConfigurationError",
    "WarmupFailedError",
]
