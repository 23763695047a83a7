"""Transports used by the client to talk to the remote store."""

from .httpx_transport import HttpxTransport
from .interfaces import TransportProtocol
from .memory import MemoryTransport
from .protocol import Request

__all__ = ["HttpxTransport", "MemoryTransport", "Request", "TransportProtocol"]
