"""Executors for endpoint and custom warmup steps."""
from __future__ import annotations

import asyncio
import inspect
import json
import time

from flywarm.orchestration.logger import WarmupLogger
from flywarm.orchestration.models import CustomStepSpec, EndpointSpec, StepResult
from flywarm.transport import HttpClient, HttpRequest

DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


def elapsed_ms(start: float) -> int:
    """Milliseconds since a ``time.perf_counter()`` reading."""

    return max(0, int(round((time.perf_counter() - start) * 1000)))


def describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


def response_status(response: object) -> int:
    """Read the status of a transport response, preferring httpx's ``status_code``."""

    status = getattr(response, "status_code", None)
    if status is None:
        status = getattr(response, "status", None)
    if isinstance(status, bool) or not isinstance(status, int):
        raise TypeError(f"Response {type(response).__name__} has no integer status code")
    return status


def merge_headers(overrides: dict[str, str] | None) -> dict[str, str]:
    """Overlay caller headers on the defaults, matching names case-insensitively."""

    merged = dict(DEFAULT_HEADERS)
    for name, value in (overrides or {}).items():
        for existing in [key for key in merged if key.lower() == name.lower()]:
            del merged[existing]
        merged[name] = value
    return merged


def build_request(spec: EndpointSpec) -> HttpRequest:
    content = json.dumps(spec.body) if spec.has_body else None
    return HttpRequest(
        method=spec.method,
        headers=merge_headers(dict(spec.headers)),
        content=content,
    )


async def run_endpoint_step(
    spec: EndpointSpec,
    *,
    base_url: str,
    http_client: HttpClient,
    logger: WarmupLogger,
) -> StepResult:
    """Hit one endpoint ``repeat_count`` times concurrently."""

    start = time.perf_counter()
    logger.info("  Warming %s %s (%dx)...", spec.method, spec.path, spec.repeat_count)

    try:
        url = f"{base_url}{spec.path}"
        request = build_request(spec)

        async def attempt(index: int) -> bool:
            try:
                response = await http_client(url, request)
                status = response_status(response)
            except Exception as exc:
                logger.warning("  Request %d failed: %s", index, describe_error(exc))
                return False

            if 200 <= status < 400:
                return True
            logger.warning("  Request %d returned %d", index, status)
            return False

        results = await asyncio.gather(
            *(attempt(index) for index in range(1, spec.repeat_count + 1))
        )
        success_count = sum(1 for ok in results if ok)
        duration = elapsed_ms(start)

        if success_count == spec.repeat_count:
            logger.info("  %s warmed (%d/%d)", spec.path, success_count, spec.repeat_count)
        elif success_count > 0:
            logger.warning(
                "  %s partially warmed (%d/%d)", spec.path, success_count, spec.repeat_count
            )
        else:
            logger.warning("  %s not warmed (0/%d)", spec.path, spec.repeat_count)

        return StepResult(
            name=spec.step_name,
            success=success_count > 0 or not spec.required,
            duration_ms=duration,
        )
    except Exception as exc:
        return _failed_step(spec.step_name, spec.path, spec.required, exc, start, logger)


async def run_custom_step(spec: CustomStepSpec, *, logger: WarmupLogger) -> StepResult:
    """Invoke a custom warmup action exactly once."""

    start = time.perf_counter()
    logger.info("  Warming %s...", spec.name)

    try:
        outcome = spec.action()
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as exc:
        return _failed_step(spec.name, spec.name, spec.required, exc, start, logger)

    logger.info("  %s warmed", spec.name)
    return StepResult(name=spec.name, success=True, duration_ms=elapsed_ms(start))


def _failed_step(
    name: str,
    label: str,
    required: bool,
    error: Exception,
    start: float,
    logger: WarmupLogger,
) -> StepResult:
    """Convert a step-level fault into a result, logged by severity."""

    duration = elapsed_ms(start)
    message = describe_error(error)
    if required:
        logger.error("  %s warm-up failed (required): %s", label, message)
    else:
        logger.warning("  %s warm-up failed (non-fatal): %s", label, message)

    return StepResult(name=name, success=not required, duration_ms=duration, error=message)


__all__ = [
    "DEFAULT_HEADERS",
    "build_request",
    "describe_error",
    "elapsed_ms",
    "merge_headers",
    "response_status",
    "run_custom_step",
    "run_endpoint_step",
]
