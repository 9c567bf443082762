from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import httpx


@dataclass(frozen=True)
class TransportResponse:
    content: bytes | None
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    async def fetch(self, url: str) -> TransportResponse: ...


class HttpxTransport:
    """
    Default transport (async httpx)
    - GET-only, no custom headers
    - Timeout is the client's; callers do not override it per request
    - Non-2xx raises httpx.HTTPStatusError
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=float(timeout_seconds))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str) -> TransportResponse:
        resp = await self._client.get(url)
        resp.raise_for_status()
        return TransportResponse(
            content=resp.content,
            status_code=resp.status_code,
            headers={k: v for k, v in resp.headers.items()},
        )
