import pytest

from fuzzyfind.cache import ChunkCache
from fuzzyfind.chunklist import CHUNK_SIZE, Chunk, ChunkList, count_items
from fuzzyfind.item import Item


def _builder(data):
    return Item(text=data)


@pytest.fixture
def chunk_list():
    return ChunkList(ChunkCache(), _builder)


def _fill(cl, total):
    for i in range(total):
        cl.push(f"item {i}")


def test_chunk_list(chunk_list):
    snapshot, count, _ = chunk_list.snapshot(0)
    assert snapshot == []
    assert count == 0

    chunk_list.push("hello")
    chunk_list.push("world")
    assert snapshot == []

    snapshot, count, _ = chunk_list.snapshot(0)
    assert len(snapshot) == 1
    assert count == 2

    chunk1 = snapshot[0]
    assert chunk1.count == 2
    assert chunk1.items[0].text == "hello"
    assert chunk1.items[1].text == "world"
    assert not chunk1.is_full()

    _fill(chunk_list, CHUNK_SIZE * 2)
    assert len(snapshot) == 1

    snapshot, count, _ = chunk_list.snapshot(0)
    assert len(snapshot) == 3
    assert snapshot[0].is_full()
    assert snapshot[1].is_full()
    assert not snapshot[2].is_full()
    assert count == CHUNK_SIZE * 2 + 2
    assert snapshot[2].count == 2

    chunk_list.push("hello")
    chunk_list.push("world")
    assert snapshot[-1].count == 2


def test_chunk_list_tail(chunk_list):
    total = CHUNK_SIZE * 2 + CHUNK_SIZE // 2
    _fill(chunk_list, total)

    snapshot, count, changed = chunk_list.snapshot(0)
    assert (count, count_items(snapshot), changed) == (total, total, False)

    tail = CHUNK_SIZE + CHUNK_SIZE // 2
    snapshot, count, changed = chunk_list.snapshot(tail)
    assert (count, count_items(snapshot), changed) == (tail, tail, True)

    snapshot, count, changed = chunk_list.snapshot(tail)
    assert (count, count_items(snapshot), changed) == (tail, tail, False)

    snapshot, count, changed = chunk_list.snapshot(0)
    assert (count, count_items(snapshot), changed) == (tail, tail, False)

    tail = CHUNK_SIZE // 2
    snapshot, count, changed = chunk_list.snapshot(tail)
    assert (count, count_items(snapshot), changed) == (tail, tail, True)
    assert snapshot[0].items[0].text == "item 200"


def test_tail_cuts_partial_chunk(chunk_list):
    _fill(chunk_list, 250)
    snapshot, count, changed = chunk_list.snapshot(120)
    assert changed
    assert count == 120
    assert [chunk.count for chunk in snapshot] == [70, 50]
    assert snapshot[0].items[0].text == "item 130"
    assert snapshot[-1].items[-1].text == "item 249"


def test_tail_retires_dropped_chunks():
    cache = ChunkCache()
    cl = ChunkList(cache, _builder)
    _fill(cl, 250)
    snapshot, _, _ = cl.snapshot(0)
    first = snapshot[0]
    cache.add(first, "foo", [1])
    assert cache.lookup(first, "foo") == [1]
    cl.snapshot(150)
    assert cache.lookup(first, "foo") is None


def test_rejected_items_are_not_counted():
    cl = ChunkList(ChunkCache(), lambda data: None if data.startswith("#") else Item(text=data))
    assert cl.push("# header") is False
    assert cl.push("line") is True
    _, count, _ = cl.snapshot(0)
    assert count == 1


def test_clear(chunk_list):
    _fill(chunk_list, 5)
    chunk_list.clear()
    snapshot, count, _ = chunk_list.snapshot(0)
    assert snapshot == []
    assert count == 0


def test_count_items():
    assert count_items([]) == 0
    assert count_items([Chunk([Item(text="a")] * 3)]) == 3
    full = Chunk([Item(text="a")] * CHUNK_SIZE)
    assert count_items([Chunk([Item(text="a")] * 7), full, Chunk([Item(text="b")] * 4)]) == 111