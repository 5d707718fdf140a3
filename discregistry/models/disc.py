"""Found-disc record and the result envelope returned to callers."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

NOT_SPECIFIED = "Not specified"


class DiscStatus(str, Enum):
    ACTIVE = "active"
    CLAIMED = "claimed"
    EXPIRED = "expired"
    SPAM = "spam"


class ReturnStatus(str, Enum):
    FOUND = "Found"
    RETURNED_TO_OWNER = "Returned to Owner"
    DONATED = "Donated"
    SOLD = "Sold"
    TRASHED = "Trashed"
    FOR_SALE_USED = "For Sale Used"


class SortBy(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RACK_ID_ASC = "rack_id_asc"
    RACK_ID_DESC = "rack_id_desc"


@dataclass
class DiscRecord:
    """A found disc as stored by the report-submission workflow."""
    id: str
    rack_id: Optional[int] = None
    brand: str = NOT_SPECIFIED
    mold: Optional[str] = None
    disc_type: Optional[str] = None
    color: str = NOT_SPECIFIED
    weight: Optional[float] = None
    condition: Optional[str] = None
    plastic_type: Optional[str] = None
    stamp_text: Optional[str] = None
    phone_number: Optional[str] = None
    name_on_disc: Optional[str] = None
    source_id: Optional[str] = None
    source_name: Optional[str] = None
    location_found: Optional[str] = None
    found_date: Optional[str] = None
    description: Optional[str] = None
    image_urls: List[str] = field(default_factory=list)
    status: str = DiscStatus.ACTIVE.value
    return_status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class DiscPage:
    """Uniform result of every retrieval call.

    A non-None ``error`` is authoritative: ``data`` is then None. An empty
    ``data`` list with no error means "no results".
    """
    data: Optional[List[DiscRecord]]
    error: Optional[str] = None
    count: int = 0
    has_more: bool = False
    next_offset: int = 0
