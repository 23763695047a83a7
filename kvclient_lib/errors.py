"""Exception types raised by the key-value client.

Every error derives from `KVClientError` and also from the closest builtin
so callers that already catch `TypeError`/`ValueError` keep working.
"""
from __future__ import annotations
from typing import Optional


class KVClientError(Exception):
    """Base class for all client errors."""


class ValidationError(KVClientError, TypeError):
    """An argument had the wrong type or shape. Raised before any remote call."""


class ConfigurationError(KVClientError, RuntimeError):
    """No endpoint could be resolved when constructing a client."""


class TransportError(KVClientError):
    """A remote call could not be completed."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(KVClientError, ValueError):
    """A stored raw value is not valid serialized data."""

    def __init__(self, message: str, *, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class SerializeError(KVClientError, ValueError):
    """A value could not be serialized for storage."""

    def __init__(self, message: str, *, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
