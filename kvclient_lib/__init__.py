"""Client library for a remote, flat, string-keyed key-value store over HTTP.

The `Client` offers blocking (``*_sync``) and awaitable variants of every
operation over the same local cache.
"""

from .client import Client
from .config import ClientConfig, load_config, resolve_endpoint
from .errors import (
    ConfigurationError,
    KVClientError,
    ParseError,
    SerializeError,
    TransportError,
    ValidationError,
)
from .events import EventBus
from .transport import HttpxTransport, MemoryTransport

__all__ = [
    "Client",
    "ClientConfig",
    "ConfigurationError",
    "EventBus",
    "HttpxTransport",
    "KVClientError",
    "MemoryTransport",
    "ParseError",
    "SerializeError",
    "TransportError",
    "ValidationError",
    "load_config",
    "resolve_endpoint",
]
