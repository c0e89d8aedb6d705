"""
Test Configuration and Fixtures

Unit tests run against the in-memory session store; no ScyllaDB is needed.
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are created at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['SESSION_STORE_BACKEND'] = 'memory'
    os.environ.setdefault('BOOKING_MAX_ATTEMPTS', '3')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Callable  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402

from session_booking.service.booking.domain.aggregate.session_aggregate import (  # noqa: E402
    SessionAggregate,
)
from session_booking.service.booking.domain.enum.weekday import Weekday  # noqa: E402
from session_booking.service.booking.domain.value_object.email import Email  # noqa: E402
from session_booking.service.booking.domain.value_object.session_id import (  # noqa: E402
    SessionId,
)
from session_booking.service.booking.domain.value_object.session_schedule import (  # noqa: E402
    SessionSchedule,
)
from session_booking.service.booking.domain.value_object.session_type import (  # noqa: E402
    SessionType,
)
from session_booking.service.booking.driven_adapter.repo.session_repo_impl import (  # noqa: E402
    SessionRepoImpl,
)
from session_booking.service.booking.driven_adapter.store.session_item_store_in_memory_impl import (  # noqa: E402
    SessionItemStoreInMemoryImpl,
)


SessionFactory = Callable[..., SessionAggregate]


@pytest.fixture
def make_session() -> SessionFactory:
    """
    Factory for sessions on a Monday (2025-11-10) by default

    Usage:
        session = make_session(max_spots=1)
        session = make_session(date='2025-11-11', start_time='19:30', category='reggaeton')
    """

    def _create(
        *,
        date: str = '2025-11-10',
        start_time: str = '18:30',
        category: str = 'salsa',
        level: Optional[int] = 1,
        max_spots: int = 20,
        emails: tuple[str, ...] = (),
    ) -> SessionAggregate:
        schedule = SessionSchedule(date=date, start_time=start_time)
        session = SessionAggregate.create(
            id=SessionId(
                date=date,
                weekday=Weekday.of(schedule.calendar_date),
                time=start_time.replace(':', ''),
            ),
            session_type=SessionType(category=category, level=level),
            schedule=schedule,
            max_spots=max_spots,
        )
        for email in emails:
            session.book(Email(email))
        return session

    return _create


@pytest.fixture
def in_memory_store() -> SessionItemStoreInMemoryImpl:
    return SessionItemStoreInMemoryImpl()


@pytest.fixture
def session_repo(in_memory_store: SessionItemStoreInMemoryImpl) -> SessionRepoImpl:
    return SessionRepoImpl(store=in_memory_store)
