"""Local storage pieces of the client: the value cache and the codec."""

from .cache import Cache
from .serializer import JSONSerializer, Serializer

__all__ = ["Cache", "JSONSerializer", "Serializer"]
