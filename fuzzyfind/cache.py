"""Per-chunk cache of search results keyed by query string."""

from __future__ import annotations

import threading
from typing import Any, Protocol

# Results of low selectivity queries (a fifth of the chunk capacity) are not cached.
QUERY_CACHE_MAX = 20


class _ChunkLike(Protocol):
    def is_full(self) -> bool: ...


class ChunkCache:
    """Thread-safe map from (chunk, query) to the results found in that chunk.

    Only full chunks are cached, since their contents no longer change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Keyed by chunk identity; the chunk is kept so that its id stays valid.
        self._cache: dict[int, tuple[_ChunkLike, dict[str, list[Any]]]] = {}

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._cache = {}

    def retire(self, *args: _ChunkLike) -> None:
        """Drop the entries of the given chunks."""
        with self._lock:
            for chunk in args:
                self._cache.pop(id(chunk), None)

    def add(self, chunk: _ChunkLike, key: str, results: list[Any]) -> None:
        """Remember ``results`` for ``key`` in ``chunk`` if they are worth caching."""
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            _, queries = self._cache.setdefault(id(chunk), (chunk, {}))
            queries[key] = results

    def lookup(self, chunk: _ChunkLike, key: str) -> list[Any] | None:
        """Return the results cached for exactly ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            entry = self._cache.get(id(chunk))
            return None if entry is None else entry[1].get(key)

    def search(self, chunk: _ChunkLike, key: str) -> list[Any] | None:
        """Return results cached for the longest prefix or suffix of ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            entry = self._cache.get(id(chunk))
            if entry is None:
                return None
            queries = entry[1]
            for idx in range(1, len(key)):
                for substr in (key[: len(key) - idx], key[idx:]):
                    if substr in queries:
                        return queries[substr]
        return None