from typing import Protocol, runtime_checkable

from kvclient_lib.transport.protocol import Request


@runtime_checkable
class TransportProtocol(Protocol):
    """Transport used by the client to reach the remote store.

    Both calls perform the same request and return the response body as
    text. Implementations raise `TransportError` when the request cannot be
    completed (connection failure, unexpected status, ...). A `GET` for a
    missing key is not a failure: it returns an empty string.
    """

    def send(self, request: Request) -> str: ...

    async def send_async(self, request: Request) -> str: ...
