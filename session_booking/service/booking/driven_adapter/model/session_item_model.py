"""
Session item records - flat storage shape of a session

Single-table layout, one partition per session:

    pk                          sk          kind
    SESSION#2025-11-10#MON#1830 METADATA    SessionMetadataRecord
    SESSION#2025-11-10#MON#1830 a@x.com     BookingRecord
    SESSION#2025-11-10#MON#1830 b@x.com     BookingRecord

Metadata records also carry the category index key and sort key used by the
`session_by_category` view.
"""

from datetime import datetime
from typing import List, Optional

import attrs


METADATA_SK = 'METADATA'


@attrs.define(frozen=True)
class SessionMetadataRecord:
    pk: str
    category_key: str
    index_sort_key: str
    category: str
    level: Optional[int]
    date: str
    weekday: str
    start_time: str
    max_spots: int
    booking_count: int
    version: int
    created_at: datetime
    updated_at: datetime
    sk: str = METADATA_SK


@attrs.define(frozen=True)
class BookingRecord:
    pk: str
    sk: str  # participant email
    booked_at: datetime


@attrs.define(frozen=True)
class SessionItems:
    metadata: SessionMetadataRecord
    bookings: List[BookingRecord] = attrs.field(factory=list)
