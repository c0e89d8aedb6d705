"""Application layer interfaces (Ports)"""

from session_booking.service.booking.app.interface.i_session_item_store import ISessionItemStore
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo

__all__ = [
    'ISessionItemStore',
    'ISessionRepo',
]
