"""
Anti-corruption layer between the SessionAggregate and its storage records

Keeps the aggregate free from storage concerns (keys, index keys, version) so the
domain model and the table layout can evolve independently.
"""

from typing import Optional, Sequence

from session_booking.service.booking.app.dto.session_dto import SessionWithVersion
from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate
from session_booking.service.booking.domain.booking_error import DataIntegrityError
from session_booking.service.booking.domain.value_object.booking import Booking
from session_booking.service.booking.domain.value_object.email import Email
from session_booking.service.booking.domain.value_object.session_id import SessionId
from session_booking.service.booking.domain.value_object.session_schedule import SessionSchedule
from session_booking.service.booking.domain.value_object.session_type import SessionType
from session_booking.service.booking.driven_adapter.model.session_item_model import (
    BookingRecord,
    SessionItems,
    SessionMetadataRecord,
)


CATEGORY_KEY_PREFIX = 'CATEGORY'


def build_category_key(category: str, level: Optional[int] = None) -> str:
    """salsa, 1 -> CATEGORY#SALSA#1; reggaeton -> CATEGORY#REGGAETON"""
    key = f'{CATEGORY_KEY_PREFIX}#{category.upper()}'
    return key if level is None else f'{key}#{level}'


def build_index_sort_key(date: str, weekday: str, time: str) -> str:
    """Sorts lexicographically in chronological order: 2025-11-10#MON#1830"""
    return f'{date}#{weekday}#{time}'


class SessionMapper:
    @staticmethod
    def to_domain(
        metadata: SessionMetadataRecord, bookings: Sequence[BookingRecord]
    ) -> SessionWithVersion:
        """
        Rebuild the aggregate and the version it was stored at

        `bookings` is empty on the search path; the session then carries the stored
        counter as unloaded bookings instead of a booking set.

        Raises:
            DataIntegrityError: Non-empty booking records disagree with the stored counter
        """
        if bookings and len(bookings) != metadata.booking_count:
            raise DataIntegrityError(
                session_id=metadata.pk,
                expected_count=metadata.booking_count,
                actual_count=len(bookings),
            )

        loaded = {
            record.sk: Booking(email=Email(record.sk), booked_at=record.booked_at)
            for record in bookings
        }

        session = SessionAggregate(
            id=SessionId.from_string(metadata.pk),
            session_type=SessionType(category=metadata.category, level=metadata.level),
            schedule=SessionSchedule(date=metadata.date, start_time=metadata.start_time),
            max_spots=metadata.max_spots,
            bookings=loaded,
            unloaded_count=0 if bookings else metadata.booking_count,
            created_at=metadata.created_at,
            updated_at=metadata.updated_at,
        )

        return SessionWithVersion(session=session, version=metadata.version or 0)

    @staticmethod
    def to_persistence(session: SessionAggregate, version: int) -> SessionItems:
        pk = str(session.id)

        metadata = SessionMetadataRecord(
            pk=pk,
            category_key=build_category_key(
                session.session_type.category, session.session_type.level
            ),
            index_sort_key=build_index_sort_key(
                session.id.date, session.id.weekday, session.id.time
            ),
            category=session.session_type.category.value,
            level=session.session_type.level,
            date=session.schedule.date,
            weekday=session.id.weekday.value,
            start_time=session.schedule.start_time,
            max_spots=session.max_spots,
            booking_count=session.booking_count,
            version=version,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )

        bookings = [
            BookingRecord(pk=pk, sk=email, booked_at=booking.booked_at)
            for email, booking in session.bookings.items()
        ]

        return SessionItems(metadata=metadata, bookings=bookings)
