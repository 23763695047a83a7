"""Observer bus for client notifications.

Three events are emitted by the client:

- ``download(key, raw)`` after a value was read from the remote store
- ``upload(key, raw)`` after a value was written to the remote store
- ``delete(key)`` after a key was removed from the remote store

Listeners run synchronously, in registration order, inside the call that
triggered them.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List

from kvclient_lib.errors import ValidationError

EVENTS = ("download", "upload", "delete")

Listener = Callable[..., Any]


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in EVENTS}

    def _queue(self, event: str) -> List[Listener]:
        if event not in self._listeners:
            raise ValidationError(f"Unknown event {event!r}; expected one of {', '.join(EVENTS)}")
        return self._listeners[event]

    def on(self, event: str, listener: Listener) -> Listener:
        if not callable(listener):
            raise ValidationError(f"Argument listener must be a function - it was a {type(listener).__name__} instead.")
        self._queue(event).append(listener)
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Register `listener` for a single emission of `event`."""
        def wrapper(*args: Any) -> Any:
            self.off(event, wrapper)
            return listener(*args)

        wrapper.listener = listener  # type: ignore[attr-defined]
        self.on(event, wrapper)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        queue = self._queue(event)
        for idx, registered in enumerate(queue):
            if registered is listener or getattr(registered, "listener", None) is listener:
                del queue[idx]
                return

    def listeners(self, event: str) -> List[Listener]:
        return [getattr(fn, "listener", fn) for fn in self._queue(event)]

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of `event`. Returns True if there was any."""
        queue = list(self._queue(event))
        for listener in queue:
            listener(*args)
        return bool(queue)
