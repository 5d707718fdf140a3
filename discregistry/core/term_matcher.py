"""Free-text search: every term must hit some text field or the rack id."""
import re
from typing import Iterable, List, Optional

from discregistry.models.disc import NOT_SPECIFIED, DiscRecord

# Fields a term may match as a case-insensitive substring
SEARCH_FIELDS = (
    "brand",
    "mold",
    "color",
    "location_found",
    "description",
    "stamp_text",
    "phone_number",
    "name_on_disc",
    "plastic_type",
    "disc_type",
)

_INTEGER_REGEX = re.compile(r"^[+-]?\d+$")

# rack_id is a Postgres SERIAL (int4)
RACK_ID_MAX = 2147483647

# Defaulted by projection when the store has no value; never searchable
_SENTINEL_FIELDS = ("brand", "color")


def parse_terms(query: Optional[str]) -> List[str]:
    """Split on whitespace and lower-case. Empty or blank queries give []."""
    if not query:
        return []
    return [t.lower() for t in query.split()]


def parse_rack_term(term: str) -> Optional[int]:
    """Return the term as an int when it is one (e.g. '417'), else None."""
    if not _INTEGER_REGEX.match(term):
        return None
    return int(term)


def is_rack_id(value: int) -> bool:
    """True when value fits the rack id column (1..RACK_ID_MAX)."""
    return 1 <= value <= RACK_ID_MAX


def matches_term(disc: DiscRecord, term: str) -> bool:
    term = term.lower()
    for name in SEARCH_FIELDS:
        value = getattr(disc, name)
        if name in _SENTINEL_FIELDS and value == NOT_SPECIFIED:
            continue
        if value and term in str(value).lower():
            return True
    rack = parse_rack_term(term)
    return rack is not None and disc.rack_id == rack


def matches_all_terms(disc: DiscRecord, terms: Iterable[str]) -> bool:
    return all(matches_term(disc, t) for t in terms)


def filter_by_terms(discs: Iterable[DiscRecord], terms: List[str]) -> List[DiscRecord]:
    """Keep discs matching every term. No terms keeps everything."""
    if not terms:
        return list(discs)
    return [d for d in discs if matches_all_terms(d, terms)]


def filter_by_rack_range(
    discs: Iterable[DiscRecord],
    min_rack_id: Optional[int] = None,
    max_rack_id: Optional[int] = None,
) -> List[DiscRecord]:
    """Keep discs whose rack id lies in [min, max]; unbounded sides are open.

    With any bound set, discs without a rack id are dropped.
    """
    if min_rack_id is None and max_rack_id is None:
        return list(discs)
    out = []
    for d in discs:
        if d.rack_id is None:
            continue
        if min_rack_id is not None and d.rack_id < min_rack_id:
            continue
        if max_rack_id is not None and d.rack_id > max_rack_id:
            continue
        out.append(d)
    return out
