"""Application layer DTOs"""

from session_booking.service.booking.app.dto.session_dto import (
    BookingResult,
    SessionView,
    SessionWithVersion,
)

__all__ = [
    'BookingResult',
    'SessionView',
    'SessionWithVersion',
]
