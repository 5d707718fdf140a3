from __future__ import annotations

from discregistry.core.sorter import order_for, parse_timestamp, sort_discs
from discregistry.models.disc import DiscRecord, SortBy

OLD = DiscRecord(id="old", rack_id=30, created_at="2023-05-01T10:00:00Z")
MID = DiscRecord(id="mid", rack_id=None, created_at="2024-01-01T00:00:00+00:00")
NEW = DiscRecord(id="new", rack_id=7, created_at="2024-06-01T08:30:00.123456+02:00")


def _ids(discs):
    return [d.id for d in discs]


def test_newest_is_default() -> None:
    assert _ids(sort_discs([OLD, NEW, MID])) == ["new", "mid", "old"]


def test_oldest() -> None:
    assert _ids(sort_discs([NEW, OLD, MID], SortBy.OLDEST)) == ["old", "mid", "new"]


def test_rack_id_asc_puts_missing_first() -> None:
    assert _ids(sort_discs([OLD, NEW, MID], SortBy.RACK_ID_ASC)) == ["mid", "new", "old"]


def test_rack_id_desc_puts_missing_last() -> None:
    assert _ids(sort_discs([MID, NEW, OLD], "rack_id_desc")) == ["old", "new", "mid"]


def test_sort_returns_new_list() -> None:
    discs = [OLD, NEW]
    out = sort_discs(discs)
    assert out is not discs
    assert _ids(discs) == ["old", "new"]


def test_missing_or_bad_timestamps_sort_earliest() -> None:
    blank = DiscRecord(id="blank")
    bad = DiscRecord(id="bad", created_at="yesterday")
    assert _ids(sort_discs([blank, NEW, bad]))[0] == "new"
    assert parse_timestamp(None) == parse_timestamp("nope")


def test_order_for_matches_in_memory_rules() -> None:
    asc = order_for(SortBy.RACK_ID_ASC)
    assert (asc.column, asc.ascending, asc.nulls_first) == ("rack_id", True, True)
    desc = order_for(SortBy.RACK_ID_DESC)
    assert (desc.column, desc.ascending, desc.nulls_first) == ("rack_id", False, False)
    assert order_for(SortBy.OLDEST).ascending
    assert not order_for(SortBy.NEWEST).ascending


def test_trimmed_fraction_timestamps_parse() -> None:
    older = DiscRecord(id="older", created_at="2024-03-01T12:00:00.123456+00:00")
    newer = DiscRecord(id="newer", created_at="2024-03-01T12:00:01.12+00:00")
    assert _ids(sort_discs([older, newer])) == ["newer", "older"]
    assert parse_timestamp("2024-03-01T12:00:01.12+00:00").microsecond == 120000
    assert parse_timestamp("2024-03-01T12:00:01.1234567Z").microsecond == 123456
