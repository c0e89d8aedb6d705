"""Booking Domain Enums"""

from session_booking.service.booking.domain.enum.session_category import SessionCategory
from session_booking.service.booking.domain.enum.session_time import SessionTime
from session_booking.service.booking.domain.enum.weekday import Weekday

__all__ = ['SessionCategory', 'SessionTime', 'Weekday']
