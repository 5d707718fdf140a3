from __future__ import annotations

import pytest

from conftest import STORE_CAP, VIEW, FakeStore, make_row
from discregistry.core.chunked_fetcher import ChunkedFetcher
from discregistry.core.errors import StoreError
from discregistry.core.source_adapter import SourceAdapter
from discregistry.models.query import ReadQuery


def _fetcher(store: FakeStore) -> ChunkedFetcher:
    return ChunkedFetcher(SourceAdapter(store), chunk_size=STORE_CAP)


class FailingAfterStore(FakeStore):
    """Fails every read after the first ``ok_calls`` reads."""

    def __init__(self, rows, ok_calls: int) -> None:
        super().__init__(rows)
        self.ok_calls = ok_calls

    async def select(self, table, query):
        if len(self.calls) >= self.ok_calls:
            self.calls.append((table, query))
            raise StoreError("connection reset", surface=table)
        return await super().select(table, query)


@pytest.mark.asyncio
async def test_exactly_chunk_size_needs_second_empty_chunk() -> None:
    store = FakeStore([make_row(i) for i in range(STORE_CAP)])
    rows = await _fetcher(store).fetch_all()
    assert len(rows) == STORE_CAP
    calls = store.calls_to(VIEW)
    assert [(q.offset, q.limit) for q in calls] == [(0, STORE_CAP), (STORE_CAP, STORE_CAP)]


@pytest.mark.asyncio
async def test_one_short_of_chunk_size_is_single_request() -> None:
    store = FakeStore([make_row(i) for i in range(STORE_CAP - 1)])
    rows = await _fetcher(store).fetch_all()
    assert len(rows) == STORE_CAP - 1
    assert len(store.calls) == 1


@pytest.mark.asyncio
async def test_past_the_cap_without_gaps_or_repeats() -> None:
    store = FakeStore([make_row(i) for i in range(2500)])
    rows = await _fetcher(store).fetch_all()
    ids = [r["id"] for r in rows]
    assert len(ids) == 2500
    assert len(set(ids)) == 2500
    # chunks concatenate in created_at descending order
    assert ids[0] == "disc-02499"
    assert ids[-1] == "disc-00000"
    assert len(store.calls) == 3


@pytest.mark.asyncio
async def test_empty_dataset() -> None:
    store = FakeStore([])
    assert await _fetcher(store).fetch_all() == []
    assert len(store.calls) == 1


@pytest.mark.asyncio
async def test_max_rows_bounds_the_scan() -> None:
    store = FakeStore([make_row(i) for i in range(2500)])
    rows = await _fetcher(store).fetch_all(max_rows=1500)
    assert len(rows) == 1500
    assert [(q.offset, q.limit) for q in store.calls] == [(0, 1000), (1000, 500)]


@pytest.mark.asyncio
async def test_keeps_predicates_and_forces_created_order() -> None:
    rows = [make_row(i, brand="Discraft" if i % 2 else "Innova") for i in range(10)]
    store = FakeStore(rows)
    query = ReadQuery(contains={"brand": "disc"}, offset=7, limit=3)
    out = await _fetcher(store).fetch_all(query)
    assert len(out) == 5
    sent = store.calls[0][1]
    assert sent.contains == {"brand": "disc"}
    assert sent.offset == 0
    assert sent.order.column == "created_at" and not sent.order.ascending


@pytest.mark.asyncio
async def test_chunk_failure_aborts_whole_fetch() -> None:
    store = FailingAfterStore([make_row(i) for i in range(2500)], ok_calls=1)
    with pytest.raises(StoreError):
        await _fetcher(store).fetch_all()


@pytest.mark.asyncio
async def test_repeated_fetch_is_idempotent() -> None:
    store = FakeStore([make_row(i) for i in range(1200)])
    fetcher = _fetcher(store)
    first = {r["id"] for r in await fetcher.fetch_all()}
    second = {r["id"] for r in await fetcher.fetch_all()}
    assert first == second


def test_rejects_non_positive_chunk_size() -> None:
    with pytest.raises(ValueError):
        ChunkedFetcher(SourceAdapter(FakeStore()), chunk_size=0)
