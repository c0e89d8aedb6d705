"""
Session Aggregate - Aggregate Root for Session Booking

[DDD Design Principles]
- SessionAggregate is the Aggregate Root
- Booking is a value object owned by the aggregate, keyed by participant email
- Version is a persistence concern and lives in SessionWithVersion, not here

[Business Invariants]
- booking_count never exceeds max_spots
- An email books a session at most once
- Identity, type, schedule and capacity are fixed once the session exists
"""

from datetime import datetime, timezone
from typing import Dict, List

import attrs

from session_booking.service.booking.domain.booking_error import (
    CapacityExceededError,
    DuplicateParticipantError,
    InvariantViolationError,
)
from session_booking.service.booking.domain.value_object.booking import Booking
from session_booking.service.booking.domain.value_object.email import Email
from session_booking.service.booking.domain.value_object.session_id import SessionId
from session_booking.service.booking.domain.value_object.session_schedule import SessionSchedule
from session_booking.service.booking.domain.value_object.session_type import SessionType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_fixed = attrs.setters.frozen


@attrs.define
class SessionAggregate:
    id: SessionId = attrs.field(on_setattr=_fixed)
    session_type: SessionType = attrs.field(on_setattr=_fixed)
    schedule: SessionSchedule = attrs.field(on_setattr=_fixed)
    max_spots: int = attrs.field(on_setattr=_fixed)

    # email -> Booking; the size of this mapping is the booked count when fully loaded
    bookings: Dict[str, Booking] = attrs.field(factory=dict)

    # Durable bookings that were not loaded (list/search read path)
    unloaded_count: int = attrs.field(default=0, on_setattr=_fixed)

    created_at: datetime = attrs.field(factory=_utcnow)
    updated_at: datetime = attrs.field(factory=_utcnow)

    # Emails booked on this instance since it was created or loaded
    _pending: List[str] = attrs.field(factory=list, init=False, repr=False, eq=False)

    def __attrs_post_init__(self) -> None:
        self.validate()

    @classmethod
    def create(
        cls,
        *,
        id: SessionId,
        session_type: SessionType,
        schedule: SessionSchedule,
        max_spots: int,
    ) -> 'SessionAggregate':
        """Create a brand-new session with no bookings."""
        now = _utcnow()
        return cls(
            id=id,
            session_type=session_type,
            schedule=schedule,
            max_spots=max_spots,
            created_at=now,
            updated_at=now,
        )

    @property
    def booking_count(self) -> int:
        return len(self.bookings) + self.unloaded_count

    @property
    def spots_remaining(self) -> int:
        return self.max_spots - self.booking_count

    @property
    def new_bookings(self) -> List[Booking]:
        """Bookings made on this instance, not yet durable."""
        return [self.bookings[email] for email in self._pending]

    @property
    def is_fully_loaded(self) -> bool:
        return self.unloaded_count == 0

    def has_booking_for(self, email: Email) -> bool:
        return email.value in self.bookings

    def book(self, email: Email) -> Booking:
        """
        Book a spot in this session for the given email

        Raises:
            CapacityExceededError: No spots remaining
            DuplicateParticipantError: Email already holds a booking in this session
        """
        if self.spots_remaining <= 0:
            raise CapacityExceededError(session_id=str(self.id), max_spots=self.max_spots)

        if self.has_booking_for(email):
            raise DuplicateParticipantError(email=email.value, session_id=str(self.id))

        booking = Booking.create(email)
        self.bookings[email.value] = booking
        self._pending.append(email.value)
        self.updated_at = booking.booked_at

        return booking

    def validate(self) -> None:
        if self.max_spots <= 0:
            raise InvariantViolationError('Max spots must be greater than 0')

        if (
            self.id.date != self.schedule.date
            or self.id.weekday != self.schedule.weekday
            or self.id.time.start_time != self.schedule.start_time
        ):
            raise InvariantViolationError(
                f'Session id {self.id} does not match schedule '
                f'{self.schedule.date} {self.schedule.weekday} {self.schedule.start_time}'
            )

        if self.unloaded_count < 0:
            raise InvariantViolationError('Unloaded booking count cannot be negative')

        if self.booking_count > self.max_spots:
            raise InvariantViolationError(
                f'Bookings exceed max spots: {self.booking_count} booked, '
                f'{self.max_spots} spots'
            )

        if self.is_fully_loaded:
            mismatched = [
                key for key, booking in self.bookings.items() if booking.email.value != key
            ]
            if mismatched:
                raise InvariantViolationError(
                    f'Booking set mismatch for {self.id}: '
                    f'entries {mismatched} are not keyed by their own email'
                )
