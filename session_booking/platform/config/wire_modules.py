"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from session_booking.service.booking.app.command import (
    book_session_use_case,
    create_session_use_case,
)
from session_booking.service.booking.app.query import (
    get_session_use_case,
    search_sessions_use_case,
)
from session_booking.service.booking.driving_adapter.http_controller import session_controller


WIRE_MODULES: list[ModuleType] = [
    book_session_use_case,
    create_session_use_case,
    get_session_use_case,
    search_sessions_use_case,
    session_controller,
]
