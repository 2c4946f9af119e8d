"""Transport capability used to issue warmup requests."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Protocol

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class HttpRequest:
    """Options for a single warmup attempt."""

    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    content: str | None = None


class HttpResponse(Protocol):
    """Minimal response surface the orchestrator relies on."""

    @property
    def status_code(self) -> int:  # pragma: no cover - protocol definition
        ...


HttpClient = Callable[[str, HttpRequest], Awaitable[HttpResponse]]


def build_default_client(
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpClient:
    """Return an httpx-backed transport capability.

    A fresh ``httpx.AsyncClient`` is opened for every attempt so concurrent
    attempts never share connection state. ``timeout_seconds=None`` disables
    the per-request timeout.
    """

    async def send(url: str, request: HttpRequest) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=timeout_seconds,
            transport=transport,
            follow_redirects=True,
            trust_env=True,
        ) as client:
            return await client.request(
                request.method,
                url,
                headers=dict(request.headers),
                content=request.content,
            )

    return send


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "build_default_client",
]
