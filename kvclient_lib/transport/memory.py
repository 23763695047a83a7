"""In-process transport that emulates the remote store.

Requests are answered from an ordered dict, following the same wire
protocol as the real service. Every request is appended to `calls`, which
makes it convenient for tests and offline development.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional
from urllib.parse import unquote, urlsplit

from kvclient_lib.errors import TransportError
from kvclient_lib.transport.protocol import Request, encode_component


class MemoryTransport:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})
        self.calls: List[Request] = []
        # Predicate deciding which requests fail with TransportError
        self.fail_on: Optional[Callable[[Request], bool]] = None

    def count(self, method: Optional[str] = None) -> int:
        if method is None:
            return len(self.calls)
        return sum(1 for c in self.calls if c.method == method)

    def reset_calls(self) -> None:
        self.calls.clear()

    def _key_from_url(self, url: str) -> str:
        path = urlsplit(url).path
        return unquote(path.rsplit("/", 1)[-1])

    def send(self, request: Request) -> str:
        self.calls.append(request)
        if self.fail_on is not None and self.fail_on(request):
            raise TransportError(f"{request.method} {request.url} failed: injected failure", url=request.url)

        if request.method == "GET":
            if urlsplit(request.url).query:
                return "\n".join(encode_component(k) for k in self.data)
            return self.data.get(self._key_from_url(request.url), "")
        if request.method == "POST":
            encoded_key, _, encoded_value = (request.body or "").partition("=")
            self.data[unquote(encoded_key)] = unquote(encoded_value)
            return ""
        if request.method == "DELETE":
            self.data.pop(self._key_from_url(request.url), None)
            return ""
        raise TransportError(f"Unsupported method {request.method}", url=request.url, status_code=405)

    async def send_async(self, request: Request) -> str:
        return self.send(request)
