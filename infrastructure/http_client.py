"""Shared async HTTP client for outbound provider calls (ZeptoMail)."""

from __future__ import annotations

from typing import Any, Optional

import httpx


class HttpClient:
    """Async wrapper around httpx.AsyncClient.

    The application creates one instance in the lifespan and closes it on
    shutdown; providers receive it by injection so tests can pass a mock.
    """

    def __init__(
        self, timeout: float = 10.0, headers: Optional[dict[str, str]] = None
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.post(url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
