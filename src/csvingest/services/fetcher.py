"""Retrieval of CSV text from external references."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from csvingest.exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class FetchResponse(Protocol):
    """Outcome of a fetch: status fields plus an awaitable body."""

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    async def text(self) -> str: ...


class TextSource(Protocol):
    """Capability for retrieving the body behind an external reference."""

    async def fetch(self, url: str) -> FetchResponse: ...


class HttpxFetchResponse:
    """``FetchResponse`` view of an ``httpx.Response``."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def ok(self) -> bool:
        return self._response.is_success

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def status_text(self) -> str:
        return self._response.reason_phrase

    async def text(self) -> str:
        return self._response.text


class HttpTextSource:
    """Fetches references over HTTP(S) with an async httpx client."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> FetchResponse:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(url)
        logger.debug("GET %s -> %s", url, response.status_code)
        return HttpxFetchResponse(response)


async def fetch_text(url: str, source: TextSource) -> str:
    """Fetch ``url`` and return its body verbatim, raising ``FetchError`` on failure."""
    try:
        response = await source.fetch(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(0, str(e) or type(e).__name__) from e
    if not response.ok:
        raise FetchError(response.status, response.status_text)
    return await response.text()
