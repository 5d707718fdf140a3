"""One logical read over two surfaces: the public view, else the raw table filtered to active."""
import logging
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from discregistry.config import DISC_TABLE, PUBLIC_VIEW, PUBLIC_VIEW_REQUIRED_COLUMNS
from discregistry.core.errors import StoreError
from discregistry.core.store_client import TableSource
from discregistry.models.disc import DiscStatus
from discregistry.models.query import ReadQuery, StoreResponse

logger = logging.getLogger(__name__)


@dataclass
class SourceRows:
    """Primary surface answered with rows that honour the column contract."""
    response: StoreResponse


@dataclass
class SchemaMismatch:
    """Primary surface answered, but its rows lack required columns."""
    missing: Tuple[str, ...]


PrimaryRead = Union[SourceRows, SchemaMismatch]


def check_columns(response: StoreResponse, required: Sequence[str]) -> PrimaryRead:
    """Classify a primary response against the required-column contract."""
    missing = sorted({c for row in response.rows for c in required if c not in row})
    if missing:
        return SchemaMismatch(missing=tuple(missing))
    return SourceRows(response=response)


class SourceAdapter:
    """Reads disc rows, trying the restricted view first on every call.

    The view already hides non-active discs. When it errors or its rows do not
    carry the required columns, the identical predicate set is re-run against
    the raw table with ``status = active`` added. Which surface answered is
    never remembered between calls.
    """

    def __init__(
        self,
        store: TableSource,
        *,
        primary: str = PUBLIC_VIEW,
        secondary: str = DISC_TABLE,
        required_columns: Sequence[str] = PUBLIC_VIEW_REQUIRED_COLUMNS,
    ) -> None:
        self._store = store
        self.primary = primary
        self.secondary = secondary
        self._required = tuple(required_columns)

    async def read_primary(self, query: ReadQuery) -> PrimaryRead:
        """Read the view. Raises StoreError if the view itself fails."""
        response = await self._store.select(self.primary, query)
        return check_columns(response, self._required)

    async def read_secondary(self, query: ReadQuery) -> StoreResponse:
        """Read the raw table with the active-status filter forced on."""
        return await self._store.select(
            self.secondary, query.with_equals("status", DiscStatus.ACTIVE.value)
        )

    async def read(self, query: ReadQuery) -> StoreResponse:
        try:
            result = await self.read_primary(query)
        except StoreError as e:
            logger.info("Using %s instead of %s: %s", self.secondary, self.primary, e)
            return await self.read_secondary(query)

        if isinstance(result, SchemaMismatch):
            logger.warning(
                "%s is missing columns %s; using %s",
                self.primary,
                ", ".join(result.missing),
                self.secondary,
            )
            return await self.read_secondary(query)
        return result.response
