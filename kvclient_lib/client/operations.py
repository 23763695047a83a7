"""Client operations, written once for both calling conventions.

Each function here is a generator taking the client as first argument. It
yields a wire `Request` whenever it needs the remote store and is resumed
with the response text (see `kvclient_lib.client.runner`).

The four primitives (`read_one`, `write_one`, `delete_one`, `list_keys`)
are the only place where the cache and the remote store meet. Everything
else is composed from them with ``yield from``.
"""
from __future__ import annotations
from typing import Any, Callable, List, Optional, Tuple
import functools
import logging

from kvclient_lib.client.runner import Operation
from kvclient_lib.errors import ValidationError
from kvclient_lib.transport import protocol

logger = logging.getLogger(__name__)

# Marks an argument the caller did not pass
_UNSET: Any = object()


def _check(name: str, value: Any, expected: type) -> None:
    if not isinstance(value, expected):
        raise ValidationError(
            f"Argument {name} must be a {expected.__name__} - it was a {type(value).__name__} instead."
        )


def _check_key(key: Any) -> None:
    _check("key", key, str)
    if not key:
        raise ValidationError("Argument key must be a non-empty str.")


def _check_function(name: str, fn: Any) -> None:
    if not callable(fn):
        raise ValidationError(f"Argument {name} must be a function - it was a {type(fn).__name__} instead.")


def _cache_flag(client, cache: Optional[bool]) -> bool:
    if cache is None:
        return client.do_cache
    _check("cache", cache, bool)
    return cache


def _decode(client, key: str, raw: Optional[str]) -> Any:
    if not raw:
        return None
    return client.serializer.load(raw, key)


def _is_present(value: Any) -> bool:
    # None, False, 0 and "" read as absent; empty lists and mappings do not
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


# Primitives


def read_one(client, key: str, force: bool, cache: bool) -> Operation[Optional[str]]:
    if not force and key in client.cache:
        logger.debug("Cache hit for %r", key)
        return client.cache.get(key)
    body = yield protocol.read_request(client.endpoint, key)
    raw = protocol.parse_value(body)
    if cache:
        client.cache.set(key, raw)
    client.events.emit("download", key, raw)
    return raw


def write_one(client, key: str, raw: str, cache: bool) -> Operation[None]:
    yield protocol.write_request(client.endpoint, key, raw)
    if cache:
        client.cache.set(key, raw)
    else:
        # An older cached value would now shadow the write
        client.cache.delete(key)
    client.events.emit("upload", key, raw)


def delete_one(client, key: str) -> Operation[bool]:
    # The delete endpoint does not report whether the key existed
    existing = yield from read_one(client, key, force=True, cache=False)
    if not existing:
        logger.debug("Nothing stored under %r, skipping delete", key)
        return False
    yield protocol.delete_request(client.endpoint, key)
    client.events.emit("delete", key)
    client.cache.delete(key)
    return True


def list_keys(client) -> Operation[List[str]]:
    body = yield protocol.list_request(client.endpoint)
    return protocol.parse_key_listing(body)


# Public operations


def get(client, key: str, force: bool = False, cache: Optional[bool] = None, raw: bool = False) -> Operation[Any]:
    """Return the value stored under `key`, or None when there is none.

    With `force` the cache is bypassed. With `cache` (default: the client's
    `do_cache`) a remotely read value is kept in the cache. With `raw` the
    stored text is returned without decoding.
    """
    _check_key(key)
    _check("force", force, bool)
    _check("raw", raw, bool)
    cache = _cache_flag(client, cache)
    value = yield from read_one(client, key, force, cache)
    if raw:
        return value
    return _decode(client, key, value)


def set(client, key: str, value: Any, cache: Optional[bool] = None) -> Operation[Any]:
    """Store `value` under `key` and return the client."""
    _check_key(key)
    cache = _cache_flag(client, cache)
    raw = client.serializer.dump(value, key)
    yield from write_one(client, key, raw, cache)
    return client


def delete(client, key: str) -> Operation[bool]:
    """Remove `key`. Returns True if a value existed, False otherwise."""
    _check_key(key)
    return (yield from delete_one(client, key))


def keys(client) -> Operation[List[str]]:
    """Return every key holding a value, in the order the store lists them."""
    return (yield from list_keys(client))


def entries(client, force: bool = True, cache: Optional[bool] = None) -> Operation[List[Tuple[str, Any]]]:
    """Return ``(key, value)`` pairs for every key."""
    _check("force", force, bool)
    cache = _cache_flag(client, cache)
    pairs = []
    for key in (yield from list_keys(client)):
        raw = yield from read_one(client, key, force, cache)
        pairs.append((key, _decode(client, key, raw)))
    return pairs


def values(client, force: bool = True, cache: Optional[bool] = None) -> Operation[List[Any]]:
    _check("force", force, bool)
    cache = _cache_flag(client, cache)
    result = []
    for key in (yield from list_keys(client)):
        raw = yield from read_one(client, key, force, cache)
        result.append(_decode(client, key, raw))
    return result


def for_each(
    client,
    fn: Callable[..., Any],
    this_arg: Any = _UNSET,
    force: bool = False,
    cache: Optional[bool] = None,
) -> Operation[Any]:
    """Call ``fn(key, value, index)`` for every key and return the client.

    When `this_arg` is passed (even as None) it is bound as the first
    argument, so `fn` is called as ``fn(this_arg, key, value, index)``.
    """
    _check_function("fn", fn)
    if this_arg is not _UNSET:
        fn = functools.partial(fn, this_arg)
    _check("force", force, bool)
    cache = _cache_flag(client, cache)
    for index, key in enumerate((yield from list_keys(client))):
        raw = yield from read_one(client, key, force, cache)
        fn(key, _decode(client, key, raw), index)
    return client


def has(client, key: str, force: bool = False, cache: Optional[bool] = None) -> Operation[bool]:
    """Return True if `key` holds a value.

    Stored values of ``0``, ``False`` and ``""`` are reported as absent.
    """
    value = yield from get(client, key, force, cache)
    return _is_present(value)


def clear(client) -> Operation[Any]:
    """Delete every key, then empty the cache. Returns the client.

    Keys are deleted one by one; a concurrent writer can add a key back
    between the listing and its deletion.
    """
    listed = yield from list_keys(client)
    for key in listed:
        yield from delete_one(client, key)
    client.cache.clear()
    logger.info("Cleared %d keys from %s", len(listed), client.endpoint)
    return client


def size(client) -> Operation[int]:
    return len((yield from list_keys(client)))


def download(client, condition: Optional[Callable[..., Any]] = None) -> Operation[Any]:
    """Fill the cache with every remote value accepted by `condition`.

    ``condition(key, value, index)`` receives the decoded value. Caching
    becomes the client's default from here on. Returns the client.
    """
    if condition is not None:
        _check_function("condition", condition)
    client.do_cache = True
    cached = 0
    for index, key in enumerate((yield from list_keys(client))):
        raw = yield from read_one(client, key, force=True, cache=False)
        if condition is None or condition(key, _decode(client, key, raw), index):
            client.cache.set(key, raw)
            cached += 1
    logger.info("Downloaded %d values into the cache", cached)
    return client


def to_dict(client) -> Operation[dict]:
    """Return every entry as a ``{key: value}`` dict, read fresh from the store."""
    return dict((yield from entries(client, force=True)))
