from datetime import datetime, timezone
from typing import Optional

import attrs

from session_booking.service.booking.domain.value_object.email import Email


@attrs.frozen
class Booking:
    """
    One participant's reserved spot in a session

    Has no identity of its own: uniqueness is the (session id, email) pair.
    """

    email: Email
    booked_at: datetime

    @classmethod
    def create(cls, email: Email, booked_at: Optional[datetime] = None) -> 'Booking':
        return cls(email=email, booked_at=booked_at or datetime.now(timezone.utc))
