"""HTTP transport built on httpx.

One `httpx.Client` serves blocking calls and one `httpx.AsyncClient` serves
non-blocking calls. Both are created on first use unless injected, which is
how tests plug in an `httpx.MockTransport`.

An `httpx.AsyncClient` keeps its connection pool on the event loop that
first used it, so an owned async client is rebuilt whenever calls arrive
from a different loop (for example successive ``asyncio.run`` calls).
"""
from __future__ import annotations
from typing import Optional
import asyncio
import logging

import httpx

from kvclient_lib.errors import TransportError
from kvclient_lib.transport.protocol import Request

logger = logging.getLogger(__name__)

# Failures of a request that never produced a response
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class HttpxTransport:
    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout = timeout
        self._client = client
        self._async_client = async_client
        self._owns_async_client = async_client is None
        self._async_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    @property
    def async_client(self) -> httpx.AsyncClient:
        if self._owns_async_client:
            loop = asyncio.get_running_loop()
            if self._async_client is None or self._async_loop is not loop:
                if self._async_client is not None:
                    # Its connections belong to a loop we can no longer await on
                    logger.debug("Event loop changed, creating a new async HTTP client")
                self._async_client = httpx.AsyncClient(timeout=self.timeout)
                self._async_loop = loop
        elif self._async_client is None:
            raise TransportError("Async HTTP client was closed")
        return self._async_client

    def _build(self, http: httpx.Client | httpx.AsyncClient, request: Request) -> httpx.Request:
        return http.build_request(request.method, request.url, content=request.body, headers=request.headers)

    def _text(self, request: Request, response: httpx.Response) -> str:
        status = response.status_code
        if request.method == "GET" and status == 404:
            # The store answers 404 for keys without a value
            return ""
        if status < 200 or status >= 300:
            raise TransportError(
                f"{request.method} {request.url} failed with status {status}",
                url=request.url,
                status_code=status,
            )
        return response.text

    def send(self, request: Request) -> str:
        logger.debug("%s %s", request.method, request.url)
        http = self.client
        try:
            response = http.send(self._build(http, request))
        except _REQUEST_ERRORS as err:
            raise TransportError(f"{request.method} {request.url} failed: {err}", url=request.url) from err
        return self._text(request, response)

    async def send_async(self, request: Request) -> str:
        logger.debug("%s %s (async)", request.method, request.url)
        http = self.async_client
        try:
            response = await http.send(self._build(http, request))
        except _REQUEST_ERRORS as err:
            raise TransportError(f"{request.method} {request.url} failed: {err}", url=request.url) from err
        return self._text(request, response)

    def close(self) -> None:
        """Close the blocking client and release the async one.

        An async client can only be closed from a running loop; outside of
        one it is dropped and its pool goes away with its event loop.
        """
        if self._client is not None:
            self._client.close()
            self._client = None
        self._async_client = None
        self._async_loop = None

    async def aclose(self) -> None:
        if self._async_client is not None:
            if self._async_loop is None or self._async_loop is asyncio.get_running_loop():
                await self._async_client.aclose()
            self._async_client = None
            self._async_loop = None
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
