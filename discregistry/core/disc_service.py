"""Entry point for disc retrieval: listing, free-text search, structured search.

Every public coroutine returns a DiscPage and never raises for store
failures; the error is reported in the envelope instead. Calls share no
mutable state, so any number of them may run concurrently.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from discregistry.config import CHUNK_SIZE, SEARCH_WINDOW_FACTOR, SEARCH_WINDOW_MIN
from discregistry.core.chunked_fetcher import ChunkedFetcher
from discregistry.core.errors import DiscRegistryError
from discregistry.core.projection import project_rows
from discregistry.core.sorter import order_for, sort_discs
from discregistry.core.source_adapter import SourceAdapter
from discregistry.core.store_client import TableSource
from discregistry.core.term_matcher import (
    filter_by_rack_range,
    filter_by_terms,
    is_rack_id,
    parse_rack_term,
    parse_terms,
)
from discregistry.models.disc import DiscPage, DiscRecord
from discregistry.models.query import DiscQueryOptions, ReadQuery, SearchCriteria

logger = logging.getLogger(__name__)

# SearchCriteria fields matched as substrings; disc_type and rack_id are exact
_CRITERIA_SUBSTRING_FIELDS = ("brand", "mold", "color", "location_found")


def _merge_unique(*groups: Iterable[DiscRecord]) -> List[DiscRecord]:
    seen = set()
    out = []
    for group in groups:
        for disc in group:
            if disc.id in seen:
                continue
            seen.add(disc.id)
            out.append(disc)
    return out


def _validate(options: DiscQueryOptions, max_limit: int) -> None:
    if options.limit < 1:
        raise ValueError("limit must be at least 1")
    if options.limit > max_limit:
        # the store truncates larger pages, which would end paging early
        raise ValueError(f"limit must not exceed {max_limit}")
    if options.offset < 0:
        raise ValueError("offset must not be negative")


class DiscService:
    """Chooses between single-page and exhaustive retrieval for each call."""

    def __init__(
        self,
        store: TableSource,
        *,
        chunk_size: int = CHUNK_SIZE,
        source: Optional[SourceAdapter] = None,
    ) -> None:
        self.source = source or SourceAdapter(store)
        self.fetcher = ChunkedFetcher(self.source, chunk_size)

    async def get_discs(self, options: Optional[DiscQueryOptions] = None) -> DiscPage:
        """List active discs, one page at a time or all at once."""
        options = options or DiscQueryOptions()
        _validate(options, self.fetcher.chunk_size)
        try:
            if options.fetch_all:
                return self._complete(await self._fetch_all_discs(), options)
            return await self._single_page(options)
        except DiscRegistryError as e:
            logger.exception("Error fetching found discs")
            return self._failure(e, options)

    async def search_discs_by_query(
        self, query: Optional[str], options: Optional[DiscQueryOptions] = None
    ) -> DiscPage:
        """Search with a free-text query; every term must match some field.

        A single integer term that can be a rack id is first looked up
        directly. In paged mode direct hits inside the rack range are returned
        as-is; in exhaustive mode they are merged with the substring scan,
        since the number may also occur in a text field of other discs. Longer
        numbers (phone digits) only go through the substring scan.

        For paged searches with several terms only an oversized window of the
        newest discs is scanned, so ``count`` and ``has_more`` describe that
        window and can undercount very large result sets.
        """
        options = options or DiscQueryOptions()
        _validate(options, self.fetcher.chunk_size)
        terms = parse_terms(query)
        if not terms:
            return await self.get_discs(options)

        try:
            rack_id = parse_rack_term(terms[0]) if len(terms) == 1 else None
            if rack_id is not None and is_rack_id(rack_id):
                direct = await self._lookup_rack_id(rack_id)
                if options.fetch_all:
                    scanned = filter_by_terms(await self._fetch_all_discs(), terms)
                    return self._complete(_merge_unique(direct, scanned), options)
                direct = filter_by_rack_range(direct, options.min_rack_id, options.max_rack_id)
                if direct:
                    logger.debug("Rack id %d matched directly (%d discs)", rack_id, len(direct))
                    return self._slice(direct, options)
                return self._slice(filter_by_terms(await self._fetch_all_discs(), terms), options)

            if options.fetch_all or len(terms) == 1:
                discs = filter_by_terms(await self._fetch_all_discs(), terms)
                if options.fetch_all:
                    return self._complete(discs, options)
                return self._slice(discs, options)

            window = max(SEARCH_WINDOW_MIN, SEARCH_WINDOW_FACTOR * (options.offset + options.limit))
            rows = await self.fetcher.fetch_all(max_rows=window)
            return self._slice(filter_by_terms(project_rows(rows), terms), options)
        except DiscRegistryError as e:
            logger.exception("Error searching found discs with query %r", query)
            return self._failure(e, options)

    async def search_discs(
        self, criteria: SearchCriteria, options: Optional[DiscQueryOptions] = None
    ) -> DiscPage:
        """Structured search; predicates are evaluated by the store."""
        options = options or DiscQueryOptions()
        _validate(options, self.fetcher.chunk_size)
        query = ReadQuery()
        for name in _CRITERIA_SUBSTRING_FIELDS:
            value = getattr(criteria, name)
            if value:
                query.contains[name] = value
        if criteria.disc_type:
            query.equals["disc_type"] = criteria.disc_type
        if criteria.rack_id:
            rack_id = parse_rack_term(criteria.rack_id.strip())
            if rack_id is not None and not is_rack_id(rack_id):
                # no disc can carry it, and the store would reject the value
                if options.fetch_all:
                    return self._complete([], options)
                return self._slice([], options)
            if rack_id is not None:
                query.equals["rack_id"] = rack_id

        try:
            discs = project_rows(await self.fetcher.fetch_all(query))
        except DiscRegistryError as e:
            logger.exception("Error searching found discs")
            return self._failure(e, options)
        if options.fetch_all:
            return self._complete(discs, options)
        return self._slice(discs, options)

    async def check_connection(self) -> Tuple[bool, Optional[str]]:
        """Check the raw table is reachable with a one-row read."""
        try:
            await self.source.read_secondary(ReadQuery(limit=1))
        except DiscRegistryError as e:
            logger.warning("Connection check failed: %s", e)
            return False, str(e)
        return True, None

    async def _fetch_all_discs(self) -> List[DiscRecord]:
        return project_rows(await self.fetcher.fetch_all())

    async def _lookup_rack_id(self, rack_id: int) -> List[DiscRecord]:
        return project_rows(await self.fetcher.fetch_all(ReadQuery(equals={"rack_id": rack_id})))

    async def _single_page(self, options: DiscQueryOptions) -> DiscPage:
        query = ReadQuery(
            order=order_for(options.sort_by),
            offset=options.offset,
            limit=options.limit,
            count=True,
        )
        if options.has_rack_range:
            query.ranges["rack_id"] = (options.min_rack_id, options.max_rack_id)
        response = await self.source.read(query)
        data = project_rows(response.rows)
        count = response.count if response.count is not None else options.offset + len(data)
        return DiscPage(
            data=data,
            count=count,
            has_more=len(data) == options.limit,
            next_offset=options.offset + len(data),
        )

    def _complete(self, discs: List[DiscRecord], options: DiscQueryOptions) -> DiscPage:
        discs = filter_by_rack_range(discs, options.min_rack_id, options.max_rack_id)
        discs = sort_discs(discs, options.sort_by)
        return DiscPage(data=discs, count=len(discs), has_more=False, next_offset=len(discs))

    def _slice(self, discs: List[DiscRecord], options: DiscQueryOptions) -> DiscPage:
        discs = filter_by_rack_range(discs, options.min_rack_id, options.max_rack_id)
        discs = sort_discs(discs, options.sort_by)
        page = discs[options.offset:options.offset + options.limit]
        end = options.offset + len(page)
        return DiscPage(data=page, count=len(discs), has_more=end < len(discs), next_offset=end)

    @staticmethod
    def _failure(error: Exception, options: DiscQueryOptions) -> DiscPage:
        return DiscPage(
            data=None,
            error=str(error),
            count=0,
            has_more=False,
            next_offset=options.offset,
        )
