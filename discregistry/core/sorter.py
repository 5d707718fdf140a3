"""Ordering of materialized disc lists, and the matching store ordering."""
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from discregistry.models.disc import DiscRecord, SortBy
from discregistry.models.query import OrderBy

_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)

# Postgres trims trailing zeros from fractions (".12"); fromisoformat on 3.10
# only accepts 3 or 6 digits
_FRACTION_REGEX = re.compile(r"\.(\d+)")


def _pad_fraction(match: "re.Match[str]") -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO 8601 timestamp; missing or malformed values sort earliest."""
    if not value:
        return _EPOCH_MIN
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_REGEX.sub(_pad_fraction, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return _EPOCH_MIN
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_discs(discs: Iterable[DiscRecord], sort_by: SortBy = SortBy.NEWEST) -> List[DiscRecord]:
    """Return a new list ordered by ``sort_by``. Missing rack ids count as 0."""
    sort_by = SortBy(sort_by)
    if sort_by == SortBy.OLDEST:
        return sorted(discs, key=lambda d: parse_timestamp(d.created_at))
    if sort_by == SortBy.RACK_ID_ASC:
        return sorted(discs, key=lambda d: d.rack_id or 0)
    if sort_by == SortBy.RACK_ID_DESC:
        return sorted(discs, key=lambda d: d.rack_id or 0, reverse=True)
    return sorted(discs, key=lambda d: parse_timestamp(d.created_at), reverse=True)


def order_for(sort_by: SortBy) -> OrderBy:
    """Store ordering equivalent to sort_discs, for single-page reads."""
    sort_by = SortBy(sort_by)
    if sort_by == SortBy.OLDEST:
        return OrderBy("created_at", ascending=True)
    if sort_by == SortBy.RACK_ID_ASC:
        # null rack ids behave like 0, so they lead ascending and trail descending
        return OrderBy("rack_id", ascending=True, nulls_first=True)
    if sort_by == SortBy.RACK_ID_DESC:
        return OrderBy("rack_id", ascending=False, nulls_first=False)
    return OrderBy("created_at", ascending=False)
