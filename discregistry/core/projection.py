"""Shape raw store rows into DiscRecord."""
import logging
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from discregistry.models.disc import NOT_SPECIFIED, DiscRecord, DiscStatus

logger = logging.getLogger(__name__)


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def row_to_disc(row: Dict[str, Any]) -> DiscRecord:
    """Build a DiscRecord from one row. Raises KeyError if the row has no id."""
    image_urls = row.get("image_urls") or []
    if isinstance(image_urls, str):
        image_urls = [image_urls]
    return DiscRecord(
        id=str(row["id"]),
        rack_id=_opt_int(row.get("rack_id")),
        brand=row.get("brand") or NOT_SPECIFIED,
        mold=_opt_str(row.get("mold")),
        disc_type=_opt_str(row.get("disc_type")),
        color=row.get("color") or NOT_SPECIFIED,
        weight=_opt_float(row.get("weight")),
        condition=_opt_str(row.get("condition")),
        plastic_type=_opt_str(row.get("plastic_type")),
        stamp_text=_opt_str(row.get("stamp_text")),
        phone_number=_opt_str(row.get("phone_number")),
        name_on_disc=_opt_str(row.get("name_on_disc")),
        source_id=_opt_str(row.get("source_id")),
        source_name=_opt_str(row.get("source_name")),
        location_found=_opt_str(row.get("location_found")),
        found_date=_opt_str(row.get("found_date")),
        description=_opt_str(row.get("description")),
        image_urls=[str(u) for u in image_urls],
        # Both surfaces only ever return active discs
        status=row.get("status") or DiscStatus.ACTIVE.value,
        return_status=_opt_str(row.get("return_status")),
        created_at=_opt_str(row.get("created_at")),
        updated_at=_opt_str(row.get("updated_at")),
    )


def project_rows(rows: Iterable[Dict[str, Any]]) -> List[DiscRecord]:
    """Project rows in order, skipping any row without an id."""
    out = []
    for row in rows:
        try:
            out.append(row_to_disc(row))
        except (KeyError, TypeError):
            logger.debug("Skipping row without id: %r", row)
            continue
    return out


def disc_to_dict(disc: DiscRecord) -> Dict[str, Any]:
    return asdict(disc)
