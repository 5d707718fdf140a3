"""Disc listing and search: paged or exhaustive, sorted, optional rack-id range."""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from discregistry.api.state import AppState, get_state
from discregistry.config import CHUNK_SIZE, DEFAULT_PAGE_SIZE
from discregistry.core.projection import disc_to_dict
from discregistry.models.disc import DiscPage, SortBy
from discregistry.models.query import DiscQueryOptions, SearchCriteria

router = APIRouter()


class PageResponse(BaseModel):
    data: List[Dict[str, Any]]
    error: Optional[str] = None
    count: int
    has_more: bool
    next_offset: int


def list_options(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=CHUNK_SIZE),
    offset: int = Query(0, ge=0),
    fetch_all: bool = False,
    sort_by: SortBy = SortBy.NEWEST,
    min_rack_id: Optional[int] = None,
    max_rack_id: Optional[int] = None,
) -> DiscQueryOptions:
    return DiscQueryOptions(
        limit=limit,
        offset=offset,
        fetch_all=fetch_all,
        sort_by=sort_by,
        min_rack_id=min_rack_id,
        max_rack_id=max_rack_id,
    )


def _page_response(page: DiscPage) -> PageResponse:
    """Map a DiscPage to the API shape; an error becomes a 502."""
    if page.error is not None:
        raise HTTPException(status_code=502, detail=page.error)
    return PageResponse(
        data=[disc_to_dict(d) for d in page.data or []],
        count=page.count,
        has_more=page.has_more,
        next_offset=page.next_offset,
    )


@router.get("", response_model=PageResponse)
async def list_discs(
    options: DiscQueryOptions = Depends(list_options),
    state: AppState = Depends(get_state),
):
    """List active found discs."""
    page = await state.disc_service.get_discs(options)
    return _page_response(page)


@router.get("/search", response_model=PageResponse)
async def search_discs_by_query(
    q: str = "",
    options: DiscQueryOptions = Depends(list_options),
    state: AppState = Depends(get_state),
):
    """Free-text search across disc fields; every term must match."""
    page = await state.disc_service.search_discs_by_query(q, options)
    return _page_response(page)


@router.get("/criteria", response_model=PageResponse)
async def search_discs_by_criteria(
    brand: Optional[str] = None,
    mold: Optional[str] = None,
    color: Optional[str] = None,
    disc_type: Optional[str] = None,
    location_found: Optional[str] = None,
    rack_id: Optional[str] = None,
    options: DiscQueryOptions = Depends(list_options),
    state: AppState = Depends(get_state),
):
    """Search by individual fields (substring match on text fields)."""
    criteria = SearchCriteria(
        brand=brand,
        mold=mold,
        color=color,
        disc_type=disc_type,
        location_found=location_found,
        rack_id=rack_id,
    )
    page = await state.disc_service.search_discs(criteria, options)
    return _page_response(page)
