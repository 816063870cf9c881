from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 30


class TransportFailure(RuntimeError):
    """Raised when a request produced no HTTP response at all."""


@dataclass(frozen=True)
class HttpResponse:
    status: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    text: str = ""

    def header(self, name: str) -> str | None:
        return self.headers.get(name)


class Transport(Protocol):
    """Anything able to perform one HTTP request for the submission engine."""

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: dict[str, str],
        body: str,
    ) -> HttpResponse:
        ...


class HttpxTransport:
    """``Transport`` backed by ``httpx.AsyncClient``.

    Redirects are never followed: the comments endpoint reports acceptance
    with a ``302`` whose ``Location`` must reach the classifier untouched.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        user_agent: str | None = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            headers = {"User-Agent": user_agent} if user_agent else None
            client = httpx.AsyncClient(timeout=timeout, follow_redirects=False, headers=headers)
        self._client = client

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: dict[str, str],
        body: str,
    ) -> HttpResponse:
        try:
            response = await self._client.request(
                method,
                url,
                headers=headers,
                content=body.encode("utf-8"),
                follow_redirects=False,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed without a response: %s", method, url, exc)
            raise TransportFailure(f"Failed to reach {url}: {exc}") from exc
        return HttpResponse(status=response.status_code, headers=response.headers, text=response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
