"""HTTP transport helpers used by endpoint warmup steps."""
from __future__ import annotations

from .client import (
    DEFAULT_TIMEOUT_SECONDS,
    HttpClient,
    HttpRequest,
    HttpResponse,
    build_default_client,
)

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "build_default_client",
]
