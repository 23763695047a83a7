"""In-memory value cache owned by a client instance.

The cache maps keys to the raw (serialized) text last seen for them. A
`None` entry records a key that was read with caching on and found absent.
There is no eviction and no locking; callers serialize access per client.
"""
from typing import Dict, Iterator, Optional, Tuple, Iterable


class Cache:
    def __init__(self):
        self._store: Dict[str, Optional[str]] = {}

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, raw: Optional[str]) -> None:
        self._store[key] = raw

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def keys(self) -> Iterable[str]:
        return list(self._store.keys())

    def items(self) -> Iterable[Tuple[str, Optional[str]]]:
        return list(self._store.items())

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._store))

    def __repr__(self) -> str:  # pragma: no cover - convenience
        return f"Cache(size={len(self._store)})"
