"""Concurrent access to a single shared store from many threads."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from greetings.store import GreetingStore

WRITER_COUNT = 8
INSERTS_PER_WRITER = 10
TOTAL_INSERTS = WRITER_COUNT * INSERTS_PER_WRITER


def _insert_many(store: GreetingStore, writer: int) -> list[int]:
    return [store.insert(f"Writer{writer}", f"Run{n}").id for n in range(INSERTS_PER_WRITER)]


@pytest.fixture(params=["file", "memory"])
def shared_store(request, store: GreetingStore, memory_store: GreetingStore) -> GreetingStore:
    return store if request.param == "file" else memory_store


def test_concurrent_inserts_get_contiguous_unique_ids(shared_store: GreetingStore):
    base = shared_store.insert("Seed", "Row").id + 1

    with ThreadPoolExecutor(max_workers=WRITER_COUNT) as pool:
        batches = list(pool.map(lambda w: _insert_many(shared_store, w), range(WRITER_COUNT)))

    ids = sorted(greeting_id for batch in batches for greeting_id in batch)
    assert ids == list(range(base, base + TOTAL_INSERTS))
    for batch in batches:
        assert batch == sorted(batch)
    assert len(shared_store.list_all()) == TOTAL_INSERTS + 1


def test_readers_only_see_committed_prefixes(shared_store: GreetingStore):
    """While writers run, every read returns ids 1..k with no gaps."""
    done = threading.Event()
    snapshots: list[list[int]] = []

    def reader() -> None:
        while True:
            snapshots.append([r.id for r in shared_store.search({})])
            if done.is_set():
                break

    reader_thread = threading.Thread(target=reader)
    reader_thread.start()
    try:
        with ThreadPoolExecutor(max_workers=WRITER_COUNT) as pool:
            list(pool.map(lambda w: _insert_many(shared_store, w), range(WRITER_COUNT)))
    finally:
        done.set()
        reader_thread.join()

    assert snapshots
    for snapshot in snapshots:
        assert snapshot == list(range(1, len(snapshot) + 1))


def test_clear_is_atomic_with_concurrent_inserts(shared_store: GreetingStore):
    cleared: list[int] = []

    def clear_midway() -> None:
        cleared.append(shared_store.clear())

    with ThreadPoolExecutor(max_workers=WRITER_COUNT + 1) as pool:
        inserts = [pool.submit(_insert_many, shared_store, w) for w in range(WRITER_COUNT)]
        clearing = pool.submit(clear_midway)
        inserted_ids = sorted(i for future in inserts for i in future.result())
        clearing.result()

    remaining = [r.id for r in shared_store.list_all()]
    # Everything inserted before the clear is gone; everything after survives.
    assert cleared[0] + len(remaining) == TOTAL_INSERTS
    assert remaining == inserted_ids[cleared[0]:]
