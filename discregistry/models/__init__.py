"""Data models for disc records, query options, and store reads."""
from discregistry.models.disc import DiscPage, DiscRecord, DiscStatus, ReturnStatus, SortBy
from discregistry.models.query import (
    DiscQueryOptions,
    OrderBy,
    ReadQuery,
    SearchCriteria,
    StoreResponse,
)

__all__ = [
    "DiscPage",
    "DiscRecord",
    "DiscStatus",
    "ReturnStatus",
    "SortBy",
    "DiscQueryOptions",
    "OrderBy",
    "ReadQuery",
    "SearchCriteria",
    "StoreResponse",
]
