"""Read-only PostgREST client for the managed backend (range, eq, ilike, order)."""
import logging
import re
from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx

from discregistry.config import HTTP_TIMEOUT_SEC, SUPABASE_ANON_KEY, SUPABASE_URL
from discregistry.core.errors import StoreError
from discregistry.models.query import ReadQuery, StoreResponse

logger = logging.getLogger(__name__)

# e.g. "0-999/4312" or "*/0" (total is "*" when count was not requested)
_CONTENT_RANGE_REGEX = re.compile(r"^(?:\d+-\d+|\*)/(\d+|\*)$")


class TableSource(Protocol):
    """Anything that can run a ReadQuery against a named table or view."""

    async def select(self, table: str, query: ReadQuery) -> StoreResponse:
        ...


def _quote_like(value: str) -> str:
    """Quote a substring needle as a PostgREST ilike value: "*needle*".

    LIKE wildcards in the needle are escaped so they match literally, and
    the value is double-quoted so commas and parentheses need no rewriting.
    A literal * cannot be expressed (PostgREST turns it into %) and is dropped.
    """
    like = value.replace("*", "")
    like = like.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    quoted = like.replace("\\", "\\\\").replace('"', '\\"')
    return f'"*{quoted}*"'


def build_params(query: ReadQuery) -> List[Tuple[str, str]]:
    """Translate a ReadQuery into PostgREST query-string parameters."""
    params: List[Tuple[str, str]] = [("select", "*")]
    for column, value in query.equals.items():
        params.append((column, f"eq.{value}"))
    for column, needle in query.contains.items():
        params.append((column, f"ilike.{_quote_like(needle)}"))
    for column, (low, high) in query.ranges.items():
        if low is not None:
            params.append((column, f"gte.{low}"))
        if high is not None:
            params.append((column, f"lte.{high}"))
    order = query.order
    direction = "asc" if order.ascending else "desc"
    nulls = "nullsfirst" if order.nulls_first else "nullslast"
    params.append(("order", f"{order.column}.{direction}.{nulls}"))
    if query.offset:
        params.append(("offset", str(query.offset)))
    if query.limit is not None:
        params.append(("limit", str(query.limit)))
    return params


def parse_content_range(header: Optional[str]) -> Optional[int]:
    """Return the exact total from a Content-Range header, or None."""
    if not header:
        return None
    match = _CONTENT_RANGE_REGEX.match(header.strip())
    if not match or match.group(1) == "*":
        return None
    return int(match.group(1))


class PostgrestSource:
    """TableSource over the backend's REST endpoint using one shared AsyncClient."""

    def __init__(
        self,
        base_url: str = SUPABASE_URL,
        api_key: str = SUPABASE_ANON_KEY,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = HTTP_TIMEOUT_SEC,
    ) -> None:
        self._rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def select(self, table: str, query: ReadQuery) -> StoreResponse:
        headers = dict(self._headers)
        if query.count:
            headers["Prefer"] = "count=exact"
        url = f"{self._rest_url}/{table}"
        try:
            resp = await self._client.get(url, params=build_params(query), headers=headers)
        except httpx.HTTPError as e:
            raise StoreError(f"Request to {table} failed: {e}", surface=table) from e

        if resp.status_code >= 400:
            raise StoreError(
                f"{table} returned {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
                surface=table,
            )
        try:
            rows = resp.json()
        except ValueError as e:
            raise StoreError(f"{table} returned invalid JSON", surface=table) from e
        if not isinstance(rows, list):
            raise StoreError(f"{table} returned {type(rows).__name__}, expected list", surface=table)

        count = parse_content_range(resp.headers.get("content-range")) if query.count else None
        logger.debug("Read %d rows from %s (offset=%s)", len(rows), table, query.offset)
        return StoreResponse(rows=rows, count=count)

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(resp: httpx.Response) -> str:
    try:
        body: Dict[str, Any] = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("hint") or body)
    return str(body)
