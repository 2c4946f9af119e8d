"""Logger capability used by the warmup orchestrator."""
from __future__ import annotations

import logging
from typing import Any, MutableMapping, Protocol

from rich.logging import RichHandler

DEFAULT_LOGGER_NAME = "flywarm.warmup"
_PREFIX = "[WARMUP]"


class WarmupLogger(Protocol):
    """Anything exposing ``info``/``warning``/``error`` like ``logging.Logger``."""

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:  # pragma: no cover
        ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:  # pragma: no cover
        ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:  # pragma: no cover
        ...


class VerboseGateAdapter(logging.LoggerAdapter):
    """Prefix warmup messages and drop info/warning output unless verbose."""

    def __init__(self, logger: logging.Logger, *, verbose: bool = False) -> None:
        super().__init__(logger, {})
        self.verbose = verbose

    def isEnabledFor(self, level: int) -> bool:
        if not self.verbose and level < logging.ERROR:
            return False
        return self.logger.isEnabledFor(level)

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{_PREFIX} {msg}", kwargs


def build_default_logger(*, verbose: bool = False) -> VerboseGateAdapter:
    """Return the console-backed logger used when none is injected.

    With verbose output requested, the warmup logger is lowered to INFO if an
    ancestor would filter info lines, and a rich console handler is attached
    when nothing in the logging tree has a handler yet.
    """

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    if verbose:
        if not logger.hasHandlers():
            handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)
        if logger.getEffectiveLevel() > logging.INFO:
            logger.setLevel(logging.INFO)
    return VerboseGateAdapter(logger, verbose=verbose)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "VerboseGateAdapter",
    "WarmupLogger",
    "build_default_logger",
]
