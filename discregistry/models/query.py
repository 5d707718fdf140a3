"""Caller options and the predicate set sent to the backing store."""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from discregistry.config import DEFAULT_PAGE_SIZE
from discregistry.models.disc import SortBy


@dataclass
class DiscQueryOptions:
    """Options shared by get_discs, search_discs_by_query and search_discs."""
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0
    fetch_all: bool = False
    sort_by: SortBy = SortBy.NEWEST
    min_rack_id: Optional[int] = None
    max_rack_id: Optional[int] = None

    @property
    def has_rack_range(self) -> bool:
        return self.min_rack_id is not None or self.max_rack_id is not None


@dataclass
class SearchCriteria:
    """Structured per-field search (substring on text, equality on type/rack)."""
    brand: Optional[str] = None
    mold: Optional[str] = None
    color: Optional[str] = None
    disc_type: Optional[str] = None
    location_found: Optional[str] = None
    rack_id: Optional[str] = None


@dataclass(frozen=True)
class OrderBy:
    column: str
    ascending: bool = False
    nulls_first: bool = False


CREATED_DESC = OrderBy("created_at", ascending=False)


@dataclass
class ReadQuery:
    """One read against a tabular surface.

    ``ranges`` maps a column to an inclusive (min, max) pair; either bound may
    be None. ``limit`` of None leaves the window size to the store.
    """
    equals: Dict[str, Any] = field(default_factory=dict)
    contains: Dict[str, str] = field(default_factory=dict)
    ranges: Dict[str, Tuple[Optional[int], Optional[int]]] = field(default_factory=dict)
    order: OrderBy = CREATED_DESC
    offset: int = 0
    limit: Optional[int] = None
    count: bool = False

    def window(self, offset: int, limit: int) -> "ReadQuery":
        return replace(self, offset=offset, limit=limit)

    def with_equals(self, column: str, value: Any) -> "ReadQuery":
        return replace(self, equals={**self.equals, column: value})


@dataclass
class StoreResponse:
    rows: List[Dict[str, Any]]
    count: Optional[int] = None
