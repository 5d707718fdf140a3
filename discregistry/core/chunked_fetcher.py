"""Retrieve full result sets past the store's per-request row cap."""
import logging
from typing import Any, Dict, List, Optional

from discregistry.config import CHUNK_SIZE
from discregistry.core.source_adapter import SourceAdapter
from discregistry.models.query import CREATED_DESC, ReadQuery

logger = logging.getLogger(__name__)


class ChunkedFetcher:
    """Pages through the Source Adapter in fixed windows ordered by creation time.

    A full window means more rows may follow; a short or empty window ends the
    scan. Rows inserted or deleted ahead of the cursor while a scan is running
    can be skipped or read twice. That is a known limit of offset paging, not
    something this class tries to repair.
    """

    def __init__(self, source: SourceAdapter, chunk_size: int = CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._source = source
        self.chunk_size = chunk_size

    async def fetch_all(
        self, query: Optional[ReadQuery] = None, *, max_rows: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Return every row matching ``query`` (or the first ``max_rows`` of them).

        The query's own order and window are replaced. Any failing chunk
        raises; nothing accumulated before it is returned.
        """
        base = query or ReadQuery()
        base = ReadQuery(
            equals=base.equals,
            contains=base.contains,
            ranges=base.ranges,
            order=CREATED_DESC,
        )
        rows: List[Dict[str, Any]] = []
        offset = 0
        chunks = 0
        while True:
            size = self.chunk_size
            if max_rows is not None:
                size = min(size, max_rows - len(rows))
                if size <= 0:
                    break
            response = await self._source.read(base.window(offset, size))
            chunks += 1
            rows.extend(response.rows)
            logger.debug("Chunk %d: %d rows at offset %d", chunks, len(response.rows), offset)
            if len(response.rows) < size:
                break
            offset += len(response.rows)
        logger.debug("Fetched %d rows in %d chunks", len(rows), chunks)
        return rows
