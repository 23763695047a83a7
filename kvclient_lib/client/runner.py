"""Drivers for client operations.

Operations are generator functions that yield a `Request` each time they
need the remote store and receive the response text back. The same
generator is driven here either with blocking transport calls or by
awaiting the transport, so the two calling conventions cannot drift apart.
"""
from __future__ import annotations
from typing import Any, Awaitable, Callable, Generator, TypeVar
import functools

from kvclient_lib.transport.interfaces import TransportProtocol
from kvclient_lib.transport.protocol import Request

T = TypeVar("T")

Operation = Generator[Request, str, T]


def run(op: Operation[T], transport: TransportProtocol) -> T:
    """Drive `op` to completion, blocking on each remote call."""
    try:
        request = next(op)
        while True:
            request = op.send(transport.send(request))
    except StopIteration as stop:
        return stop.value


async def run_async(op: Operation[T], transport: TransportProtocol) -> T:
    """Drive `op` to completion, suspending only at remote calls."""
    try:
        request = next(op)
        while True:
            response = await transport.send_async(request)
            request = op.send(response)
    except StopIteration as stop:
        return stop.value


def blocking(func: Callable[..., Operation[T]]) -> Callable[..., T]:
    """Turn an operation function into a blocking client method."""

    @functools.wraps(func)
    def method(self, *args: Any, **kwargs: Any) -> T:
        return run(func(self, *args, **kwargs), self.transport)

    return method


def deferred(func: Callable[..., Operation[T]]) -> Callable[..., Awaitable[T]]:
    """Turn an operation function into an awaitable client method."""

    @functools.wraps(func)
    async def method(self, *args: Any, **kwargs: Any) -> T:
        return await run_async(func(self, *args, **kwargs), self.transport)

    return method
