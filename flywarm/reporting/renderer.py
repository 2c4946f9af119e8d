"""Rendering utilities for warmup results."""
from __future__ import annotations

import json

from flywarm.orchestration import RunResult, WarmupConfig

_NAME_WIDTH = 36
_STATUS_WIDTH = 6
_DURATION_WIDTH = 10


def render_run_report(result: RunResult, *, quiet: bool = False) -> str:
    """Render a warmup run as a plain-text table."""

    overall = "PASS" if result.success else "FAIL"
    if quiet:
        lines = [
            f"Warm-up {overall} in {result.duration_ms}ms; "
            f"{len(result.steps)} steps, {len(result.failed_steps)} failed"
        ]
        lines.extend(f"[{_status(step.success)}] {step.name}" for step in result.steps)
        return "\n".join(lines)

    lines = ["Warmup results"]
    header = (
        f"{'Step':<{_NAME_WIDTH}} {'Status':<{_STATUS_WIDTH}} {'Duration':>{_DURATION_WIDTH}}"
    )
    lines.append(header)
    lines.append("-" * len(header))

    if not result.steps:
        lines.append("-- no warmup steps executed --")

    for step in result.steps:
        lines.append(
            f"{_truncate(step.name, _NAME_WIDTH):<{_NAME_WIDTH}} "
            f"{_status(step.success):<{_STATUS_WIDTH}} "
            f"{f'{step.duration_ms}ms':>{_DURATION_WIDTH}}"
        )
        if step.error:
            lines.append(f"    Error: {step.error}")

    lines.append("")
    lines.append(f"Total duration: {result.duration_ms}ms")
    lines.append(f"Overall status: {overall}")
    return "\n".join(lines)


def render_run_json(result: RunResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def render_config_summary(config: WarmupConfig) -> str:
    """Describe what a warmup run would do without executing it."""

    lines = [f"Base URL: {config.resolved_base_url}"]

    lines.append(f"Endpoints ({len(config.endpoints)}):")
    if not config.endpoints:
        lines.append("  (none)")
    for endpoint in config.endpoints:
        flag = " [required]" if endpoint.required else ""
        lines.append(f"  {endpoint.method} {endpoint.path} x{endpoint.repeat_count}{flag}")

    lines.append(f"Custom steps ({len(config.custom)}):")
    if not config.custom:
        lines.append("  (none)")
    for step in config.custom:
        flag = " [required]" if step.required else ""
        lines.append(f"  {step.name}{flag}")

    return "\n".join(lines)


def _status(success: bool) -> str:
    return "PASS" if success else "FAIL"


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 3] + "..."


__all__ = [
    "render_config_summary",
    "render_run_json",
    "render_run_report",
]
