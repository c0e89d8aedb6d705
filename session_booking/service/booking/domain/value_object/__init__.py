"""Booking Domain Value Objects"""

from session_booking.service.booking.domain.value_object.booking import Booking
from session_booking.service.booking.domain.value_object.email import Email
from session_booking.service.booking.domain.value_object.session_id import SessionId
from session_booking.service.booking.domain.value_object.session_schedule import SessionSchedule
from session_booking.service.booking.domain.value_object.session_type import SessionType

__all__ = ['Booking', 'Email', 'SessionId', 'SessionSchedule', 'SessionType']
