"""Client for the remote key-value store.

Every operation exists twice on `Client`: an awaitable method with the
plain name and a blocking method with a ``_sync`` suffix. Both are built
from the same operation in `kvclient_lib.client.operations`, share the
same cache and emit the same notifications.

    client = Client(endpoint_url="https://kv.example.com/v0/token")
    client.set_sync("a", {"x": 1})
    value = await client.get("a")
"""
from __future__ import annotations
from typing import Any, Mapping, Optional
import logging

from kvclient_lib.client import operations as ops
from kvclient_lib.client.runner import blocking, deferred
from kvclient_lib.config.config import DEFAULT_ENV_VAR, ClientConfig, resolve_endpoint
from kvclient_lib.errors import ValidationError
from kvclient_lib.events import EventBus, Listener
from kvclient_lib.storage.cache import Cache
from kvclient_lib.storage.serializer import JSONSerializer, Serializer
from kvclient_lib.transport.httpx_transport import HttpxTransport
from kvclient_lib.transport.interfaces import TransportProtocol

logger = logging.getLogger(__name__)


class Client:
    def __init__(
        self,
        do_cache: bool = True,
        endpoint_url: Optional[str] = None,
        *,
        transport: Optional[TransportProtocol] = None,
        serializer: Optional[Serializer] = None,
        environ: Optional[Mapping[str, str]] = None,
        env_var: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not isinstance(do_cache, bool):
            raise ValidationError(
                f"Argument do_cache must be a bool - it was a {type(do_cache).__name__} instead."
            )
        endpoint = resolve_endpoint(endpoint_url, environ, env_var or DEFAULT_ENV_VAR)
        self._endpoint = endpoint
        self.do_cache = do_cache
        self.cache = Cache()
        self.events = EventBus()
        self.serializer: Serializer = serializer or JSONSerializer()
        self.transport: TransportProtocol = transport or HttpxTransport(timeout=timeout)
        logger.debug("Client for %s (do_cache=%s)", endpoint, do_cache)

    @classmethod
    def from_config(cls, config: ClientConfig, *, transport: Optional[TransportProtocol] = None,
                    environ: Optional[Mapping[str, str]] = None) -> "Client":
        return cls(
            config.do_cache,
            config.endpoint_url,
            transport=transport,
            environ=environ,
            env_var=config.env_var,
            timeout=config.timeout,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def __repr__(self) -> str:
        return f"Client(endpoint={self._endpoint!r}, do_cache={self.do_cache})"

    # Events

    def on(self, event: str, listener: Listener) -> Listener:
        return self.events.on(event, listener)

    def once(self, event: str, listener: Listener) -> Listener:
        return self.events.once(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self.events.off(event, listener)

    # Non-blocking operations

    get = deferred(ops.get)
    set = deferred(ops.set)
    delete = deferred(ops.delete)
    keys = deferred(ops.keys)
    entries = deferred(ops.entries)
    values = deferred(ops.values)
    for_each = deferred(ops.for_each)
    has = deferred(ops.has)
    clear = deferred(ops.clear)
    get_size = deferred(ops.size)
    download = deferred(ops.download)
    to_dict = deferred(ops.to_dict)

    # Blocking operations

    get_sync = blocking(ops.get)
    set_sync = blocking(ops.set)
    delete_sync = blocking(ops.delete)
    keys_sync = blocking(ops.keys)
    entries_sync = blocking(ops.entries)
    values_sync = blocking(ops.values)
    for_each_sync = blocking(ops.for_each)
    has_sync = blocking(ops.has)
    clear_sync = blocking(ops.clear)
    get_size_sync = blocking(ops.size)
    download_sync = blocking(ops.download)
    to_dict_sync = blocking(ops.to_dict)

    @property
    def size(self) -> int:
        """Number of keys in the remote store. Always a fresh remote listing."""
        return self.get_size_sync()

    # Resources

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    async def aclose(self) -> None:
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
