"""Session booking DTOs."""

from datetime import datetime
from typing import Optional

import attrs

from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate


@attrs.define(frozen=True)
class SessionWithVersion:
    """
    A loaded session plus the version it was read at.

    The version is what `save` must be given back as `expected_version`.
    """

    session: SessionAggregate
    version: int


@attrs.define(frozen=True)
class BookingResult:
    session_id: str
    email: str
    booked_at: datetime


@attrs.define(frozen=True)
class SessionView:
    id: str
    category: str
    level: Optional[int]
    date: str
    start_time: str
    max_spots: int
    spots_remaining: int

    @classmethod
    def from_aggregate(cls, session: SessionAggregate) -> 'SessionView':
        return cls(
            id=str(session.id),
            category=session.session_type.category.value,
            level=session.session_type.level,
            date=session.schedule.date,
            start_time=session.schedule.start_time,
            max_spots=session.max_spots,
            spots_remaining=session.spots_remaining,
        )
