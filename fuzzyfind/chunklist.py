"""Chunked storage of input items with immutable snapshots."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from .cache import ChunkCache
from .item import Item

# Capacity of each chunk
CHUNK_SIZE = 100

ItemBuilder = Callable[[str], "Item | None"]


@dataclass(eq=False)
class Chunk:
    """A list of at most ``CHUNK_SIZE`` items."""

    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self) -> bool:
        """Whether the chunk holds ``CHUNK_SIZE`` items."""
        return len(self.items) == CHUNK_SIZE

    def _push(self, builder: ItemBuilder, data: str) -> bool:
        item = builder(data)
        if item is None:
            return False
        self.items.append(item)
        return True

    def _copy(self) -> Chunk:
        return Chunk(list(self.items))


def count_items(chunks: list[Chunk]) -> int:
    """Return the total number of items in ``chunks``."""
    if not chunks:
        return 0
    if len(chunks) == 1:
        return chunks[0].count
    # The first chunk may not be full after the list was cut to its tail
    return chunks[0].count + CHUNK_SIZE * (len(chunks) - 2) + chunks[-1].count


class ChunkList:
    """Thread-safe growing list of chunks.

    ``builder`` turns each pushed line into an item, or returns None to
    reject it.
    """

    def __init__(self, cache: ChunkCache, builder: ItemBuilder) -> None:
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()
        self._builder = builder
        self._cache = cache

    def push(self, data: str) -> bool:
        """Add a line; return whether an item was built from it."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            return self._chunks[-1]._push(self._builder, data)

    def clear(self) -> None:
        """Remove every item."""
        with self._lock:
            self._chunks = []

    def _keep_tail(self, tail: int) -> None:
        num_chunks = 0
        left = tail
        for chunk in reversed(self._chunks):
            if left <= 0:
                break
            num_chunks += 1
            left -= chunk.count

        min_index = len(self._chunks) - num_chunks
        self._cache.retire(*self._chunks[:min_index])
        kept = self._chunks[min_index:]

        left = tail
        for pos in reversed(range(len(kept))):
            chunk = kept[pos]
            if chunk.count > left:
                kept[pos] = Chunk(chunk.items[chunk.count - left :])
                self._cache.retire(chunk)
                break
            left -= chunk.count
        self._chunks = kept

    def snapshot(self, tail: int) -> tuple[list[Chunk], int, bool]:
        """Return an immutable view of the chunks, their item count and whether it changed.

        When ``tail`` is positive only the last ``tail`` items are kept, and
        the list itself is cut down to them.
        """
        with self._lock:
            changed = False
            if tail > 0 and count_items(self._chunks) > tail:
                changed = True
                self._keep_tail(tail)

            chunks = list(self._chunks)
            # The first and the last chunk may still change, so copy them
            if chunks:
                if tail > 0 and len(chunks) > 1:
                    chunks[0] = chunks[0]._copy()
                chunks[-1] = chunks[-1]._copy()
            return chunks, count_items(chunks), changed