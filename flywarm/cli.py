from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from . import __version__
from .configuration import load_warmup_config
from .errors import ConfigurationError, FlywarmError
from .exit_codes import ExitCode
from .orchestration import RunResult, WarmupConfig, run_warmup
from .reporting import render_config_summary, render_run_json, render_run_report

APP_NAME = "flywarm"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def configure_logging(*, quiet: bool = False) -> None:
    """Initialise application-wide logging."""

    level = logging.WARNING if quiet else logging.INFO
    root = logging.getLogger()

    if getattr(configure_logging, "_configured", False):
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
        configure_logging._level = level
        return

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    configure_logging._configured = True
    configure_logging._level = level


def _is_quiet_mode() -> bool:
    """Determine if the CLI is currently running in quiet mode."""

    return getattr(configure_logging, "_level", logging.INFO) == logging.WARNING


def _report_config_error(logger: logging.Logger, exc: FlywarmError) -> None:
    logger.error(str(exc))
    if exc.remediation:
        logger.error("Remediation: %s", exc.remediation)


def _load_config(
    config: Path,
    *,
    base_url: str | None = None,
    port: int | None = None,
    verbose: bool | None = None,
) -> WarmupConfig:
    logger = logging.getLogger("flywarm.cli")
    try:
        return load_warmup_config(config, base_url=base_url, port=port, verbose=verbose)
    except ConfigurationError as exc:
        _report_config_error(logger, exc)
        raise typer.Exit(code=int(ExitCode.INVALID_INPUT)) from exc


_CONFIG_OPTION = typer.Option(
    ...,
    "--config",
    "-c",
    help="Path to the warmup YAML configuration.",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Reduce log output to warnings and errors.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the flywarm version and exit.",
    ),
) -> None:
    """Configure logging and handle global options."""

    configure_logging(quiet=quiet)

    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ExitCode.SUCCESS))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ExitCode.SUCCESS))


@app.command("run")
def run(
    config: Path = _CONFIG_OPTION,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Base URL prepended to every endpoint path.",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        min=1,
        max=65535,
        help="Local port used when no base URL is configured.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit per-step progress lines.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the run result as JSON.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit non-zero when a required warmup step fails.",
    ),
) -> None:
    """Warm the configured endpoints and custom steps once."""

    logger = logging.getLogger("flywarm.cli")
    warmup_config = _load_config(
        config,
        base_url=base_url,
        port=port,
        verbose=True if verbose else None,
    )

    try:
        result: RunResult = asyncio.run(run_warmup(warmup_config))
    except Exception as exc:  # pragma: no cover - defensive guard
        logger.exception("Unexpected error during warmup.")
        raise typer.Exit(code=int(ExitCode.UNEXPECTED_ERROR)) from exc

    if as_json:
        typer.echo(render_run_json(result))
    else:
        typer.echo(render_run_report(result, quiet=_is_quiet_mode()))

    if strict and not result.success:
        failed = ", ".join(step.name for step in result.failed_steps) or "unknown"
        logger.error("Required warmup steps failed: %s", failed)
        raise typer.Exit(code=int(ExitCode.WARMUP_FAILED))

    raise typer.Exit(code=int(ExitCode.SUCCESS))


@app.command("check")
def check(config: Path = _CONFIG_OPTION) -> None:
    """Validate a warmup configuration without issuing requests."""

    warmup_config = _load_config(config)
    typer.echo(render_config_summary(warmup_config))
    raise typer.Exit(code=int(ExitCode.SUCCESS))


def entrypoint() -> None:
    """Execute the Typer application."""

    app()


__all__ = ["app", "entrypoint", "configure_logging", "ExitCode"]
