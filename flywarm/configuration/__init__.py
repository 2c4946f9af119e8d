"""Configuration utilities for flywarm."""
from __future__ import annotations

from .loader import BASE_URL_ENV, PORT_ENV, import_action, load_warmup_config

__all__ = [
    "BASE_URL_ENV",
    "PORT_ENV",
    "import_action",
    "load_warmup_config",
]
