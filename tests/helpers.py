import asyncio
from typing import Any


def call(client: Any, mode: str, name: str, *args: Any, **kwargs: Any) -> Any:
    """Invoke operation `name` on `client` in the given calling mode.

    Usage in tests:
        from tests.helpers import call
        call(client, mode, 'set', 'k', 1)
    """
    if mode == "sync":
        return getattr(client, f"{name}_sync")(*args, **kwargs)
    return asyncio.run(getattr(client, name)(*args, **kwargs))


def recorder(events: list, name: str):
    """Return a listener that appends ``(name, *args)`` to `events`."""
    def listener(*args):
        events.append((name, *args))
    return listener
