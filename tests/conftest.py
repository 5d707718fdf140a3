from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from discregistry.core.errors import StoreError
from discregistry.models.query import ReadQuery, StoreResponse

VIEW = "public_found_discs"
TABLE = "found_discs"
STORE_CAP = 1000
INT4_MAX = 2147483647

_BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_row(index: int, **overrides: Any) -> dict[str, Any]:
    """Active disc row; higher index means created later."""
    row = {
        "id": f"disc-{index:05d}",
        "rack_id": index + 1,
        "brand": "Innova",
        "mold": "Leopard",
        "disc_type": "fairway_driver",
        "color": "Blue",
        "weight": 172,
        "condition": "good",
        "plastic_type": "Star",
        "stamp_text": None,
        "phone_number": None,
        "name_on_disc": None,
        "source_id": None,
        "source_name": "Hole 7 pond",
        "location_found": "Maple Hill",
        "found_date": "2024-01-01",
        "description": None,
        "image_urls": [],
        "status": "active",
        "return_status": "Found",
        "created_at": (_BASE_TIME + timedelta(minutes=index)).isoformat(),
        "updated_at": (_BASE_TIME + timedelta(minutes=index)).isoformat(),
    }
    row.update(overrides)
    return row


class FakeStore:
    """In-memory TableSource: view of active rows plus the raw table, capped per read."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, cap: int = STORE_CAP) -> None:
        self.rows = list(rows or [])
        self.cap = cap
        self.failing: set[str] = set()
        self.view_drops: tuple[str, ...] = ()
        self.calls: list[tuple[str, ReadQuery]] = []

    def calls_to(self, table: str) -> list[ReadQuery]:
        return [q for t, q in self.calls if t == table]

    def _surface_rows(self, table: str) -> list[dict[str, Any]]:
        if table == VIEW:
            out = []
            for row in self.rows:
                if row.get("status") != "active":
                    continue
                out.append({k: v for k, v in row.items() if k not in self.view_drops and k != "status"})
            return out
        if table == TABLE:
            return [dict(r) for r in self.rows]
        raise StoreError(f"relation {table} does not exist", status_code=404, surface=table)

    async def select(self, table: str, query: ReadQuery) -> StoreResponse:
        self.calls.append((table, query))
        if table in self.failing:
            raise StoreError(f"{table} unavailable", status_code=500, surface=table)
        rack_id = query.equals.get("rack_id")
        if isinstance(rack_id, int) and not -INT4_MAX - 1 <= rack_id <= INT4_MAX:
            # rack_id is int4; Postgres rejects the filter value outright
            raise StoreError(
                f'value "{rack_id}" is out of range for type integer', status_code=400, surface=table
            )

        rows = self._surface_rows(table)
        for column, value in query.equals.items():
            rows = [r for r in rows if r.get(column) == value]
        for column, needle in query.contains.items():
            rows = [r for r in rows if r.get(column) and needle.lower() in str(r[column]).lower()]
        for column, (low, high) in query.ranges.items():
            rows = [
                r
                for r in rows
                if r.get(column) is not None
                and (low is None or r[column] >= low)
                and (high is None or r[column] <= high)
            ]

        order = query.order
        non_null = [r for r in rows if r.get(order.column) is not None]
        nulls = [r for r in rows if r.get(order.column) is None]
        non_null.sort(key=lambda r: r[order.column], reverse=not order.ascending)
        rows = nulls + non_null if order.nulls_first else non_null + nulls

        total = len(rows)
        size = self.cap if query.limit is None else min(query.limit, self.cap)
        window = rows[query.offset:query.offset + size]
        return StoreResponse(rows=window, count=total if query.count else None)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()
