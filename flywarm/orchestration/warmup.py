"""Warmup orchestration run before a service accepts traffic."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from flywarm.orchestration.logger import WarmupLogger, build_default_logger
from flywarm.orchestration.models import RunResult, StepResult, WarmupConfig
from flywarm.orchestration.steps import elapsed_ms, run_custom_step, run_endpoint_step
from flywarm.transport import HttpClient, build_default_client

logger = logging.getLogger("flywarm.orchestration.warmup")


class WarmupOrchestrator:
    """Runs the configured warmup steps once per instance.

    Endpoint steps run first, in configured order, followed by custom steps.
    Every step is isolated: a failure is recorded in its :class:`StepResult`
    and never stops the remaining steps. Only steps marked ``required`` decide
    the aggregate ``success`` flag.

    Concurrent ``run()`` calls on the same instance are serialized; whichever
    caller arrives second receives the empty skip result.
    """

    def __init__(self, config: WarmupConfig | None = None, **options: Any) -> None:
        if config is None:
            config = WarmupConfig(**options)
        elif options:
            raise TypeError("Pass either a WarmupConfig or keyword options, not both.")

        self._config = config
        self._logger: WarmupLogger = config.logger or build_default_logger(verbose=config.verbose)
        self._http_client: HttpClient = config.http_client or build_default_client()
        self._has_run = False
        self._lock = asyncio.Lock()

    @property
    def config(self) -> WarmupConfig:
        return self._config

    async def run(self) -> RunResult:
        """Execute every configured step and aggregate the outcome."""

        async with self._lock:
            if self._has_run:
                self._logger.info("Warmup already completed, skipping")
                return RunResult(success=True, duration_ms=0, steps=())
            return await self._run_steps()

    async def _run_steps(self) -> RunResult:
        start = time.perf_counter()
        steps: list[StepResult] = []
        base_url = self._config.resolved_base_url

        self._logger.info("Starting comprehensive warmup...")

        try:
            for endpoint in self._config.endpoints:
                steps.append(
                    await run_endpoint_step(
                        endpoint,
                        base_url=base_url,
                        http_client=self._http_client,
                        logger=self._logger,
                    )
                )

            for custom in self._config.custom:
                steps.append(await run_custom_step(custom, logger=self._logger))

            self._has_run = True
            duration = elapsed_ms(start)
            success = all(step.success or not self.is_step_required(step.name) for step in steps)
            failed = sum(1 for step in steps if not step.success)

            self._logger.info(
                "Warmup completed in %dms (%d steps, %d failed)",
                duration,
                len(steps),
                failed,
                extra={
                    "warmup_success": success,
                    "warmup_steps": len(steps),
                    "warmup_failed": failed,
                },
            )
            return RunResult(success=success, duration_ms=duration, steps=tuple(steps))
        except Exception as exc:  # pragma: no cover - defensive
            self._has_run = True
            self._logger.error("Warmup failed: %s", exc)
            logger.debug("Warmup aborted", exc_info=True)
            return RunResult(success=False, duration_ms=elapsed_ms(start), steps=tuple(steps))

    def is_step_required(self, step_name: str) -> bool:
        """Return the ``required`` flag of the step that produced ``step_name``."""

        for endpoint in self._config.endpoints:
            if endpoint.step_name == step_name:
                return endpoint.required
        for custom in self._config.custom:
            if custom.name == step_name:
                return custom.required
        return False

    def is_warmed_up(self) -> bool:
        return self._has_run

    def get_stats(self) -> dict[str, bool]:
        """Expose lifecycle state for health and readiness responses."""

        return {"warmedUp": self._has_run}


async def run_warmup(config: WarmupConfig | None = None, **options: Any) -> RunResult:
    """Build an orchestrator and run it once."""

    orchestrator = WarmupOrchestrator(config, **options)
    return await orchestrator.run()


__all__ = ["WarmupOrchestrator", "run_warmup"]
