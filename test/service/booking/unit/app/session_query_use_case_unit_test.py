"""
Unit tests for CreateSessionUseCase, GetSessionUseCase and SearchSessionsUseCase
"""

from collections.abc import Callable

import pytest

from session_booking.service.booking.app.command.create_session_use_case import (
    CreateSessionUseCase,
)
from session_booking.service.booking.app.query.get_session_use_case import GetSessionUseCase
from session_booking.service.booking.app.query.search_sessions_use_case import (
    SearchSessionsUseCase,
)
from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate
from session_booking.service.booking.domain.booking_error import (
    CapacityExceededError,
    InvariantViolationError,
    SessionAlreadyExistsError,
    SessionNotFoundError,
    ValidationError,
)
from session_booking.service.booking.driven_adapter.repo.session_repo_impl import SessionRepoImpl


SessionFactory = Callable[..., SessionAggregate]


@pytest.mark.unit
class TestCreateSessionUseCase:
    @pytest.mark.asyncio
    async def test_create_derives_id_from_schedule(self, session_repo: SessionRepoImpl) -> None:
        # Arrange
        use_case = CreateSessionUseCase(session_repo=session_repo)

        # Act
        view = await use_case.create(
            date='2025-11-12', start_time='19:30', category='bachata', level=2, max_spots=10
        )

        # Assert
        assert view.id == 'SESSION#2025-11-12#WED#1930'
        assert view.category == 'bachata'
        assert view.level == 2
        assert view.spots_remaining == 10

    @pytest.mark.asyncio
    async def test_create_with_participants(self, session_repo: SessionRepoImpl) -> None:
        use_case = CreateSessionUseCase(session_repo=session_repo)

        view = await use_case.create(
            date='2025-11-10',
            start_time='18:30',
            category='salsa',
            level=1,
            max_spots=3,
            participant_emails=['a@x.com', 'b@x.com'],
        )

        assert view.spots_remaining == 1
        loaded = await GetSessionUseCase(session_repo=session_repo).get(session_id=view.id)
        assert loaded == view

    @pytest.mark.asyncio
    async def test_too_many_participants(self, session_repo: SessionRepoImpl) -> None:
        use_case = CreateSessionUseCase(session_repo=session_repo)

        with pytest.raises(CapacityExceededError):
            await use_case.create(
                date='2025-11-10',
                start_time='18:30',
                category='salsa',
                level=1,
                max_spots=1,
                participant_emails=['a@x.com', 'b@x.com'],
            )

        assert await SearchSessionsUseCase(session_repo=session_repo).search() == []

    @pytest.mark.asyncio
    async def test_create_twice(self, session_repo: SessionRepoImpl) -> None:
        use_case = CreateSessionUseCase(session_repo=session_repo)
        params = {
            'date': '2025-11-10',
            'start_time': '18:30',
            'category': 'reggaeton',
            'max_spots': 20,
        }
        await use_case.create(**params)

        with pytest.raises(SessionAlreadyExistsError):
            await use_case.create(**params)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'overrides',
        [
            {'start_time': '18:45'},
            {'start_time': '25:00'},
            {'date': '2025-02-30'},
            {'category': 'tango'},
            {'level': 4},
        ],
    )
    async def test_invalid_input(self, session_repo: SessionRepoImpl, overrides: dict) -> None:
        use_case = CreateSessionUseCase(session_repo=session_repo)
        params = {
            'date': '2025-11-10',
            'start_time': '18:30',
            'category': 'salsa',
            'level': 1,
            'max_spots': 20,
        } | overrides

        with pytest.raises(ValidationError) as exc_info:
            await use_case.create(**params)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_non_positive_max_spots(self, session_repo: SessionRepoImpl) -> None:
        use_case = CreateSessionUseCase(session_repo=session_repo)

        with pytest.raises(InvariantViolationError):
            await use_case.create(
                date='2025-11-10', start_time='18:30', category='salsa', level=1, max_spots=0
            )


@pytest.mark.unit
class TestGetSessionUseCase:
    @pytest.mark.asyncio
    async def test_get_existing(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> None:
        await session_repo.create(session=make_session(max_spots=5, emails=('a@x.com',)))

        view = await GetSessionUseCase(session_repo=session_repo).get(
            session_id='SESSION#2025-11-10#MON#1830'
        )

        assert view.id == 'SESSION#2025-11-10#MON#1830'
        assert view.date == '2025-11-10'
        assert view.start_time == '18:30'
        assert view.max_spots == 5
        assert view.spots_remaining == 4

    @pytest.mark.asyncio
    async def test_get_missing(self, session_repo: SessionRepoImpl) -> None:
        with pytest.raises(SessionNotFoundError) as exc_info:
            await GetSessionUseCase(session_repo=session_repo).get(
                session_id='SESSION#2025-11-10#MON#1830'
            )

        assert exc_info.value.session_id == 'SESSION#2025-11-10#MON#1830'

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, session_repo: SessionRepoImpl) -> None:
        with pytest.raises(ValidationError):
            await GetSessionUseCase(session_repo=session_repo).get(session_id='not-a-session')


@pytest.mark.unit
class TestSearchSessionsUseCase:
    @pytest.fixture
    async def use_case(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> SearchSessionsUseCase:
        await session_repo.create(
            session=make_session(
                date='2025-11-11', start_time='20:30', category='reggaeton', level=None
            )
        )
        await session_repo.create(
            session=make_session(date='2025-11-10', start_time='18:30', category='salsa', level=1)
        )
        await session_repo.create(
            session=make_session(date='2025-11-10', start_time='19:30', category='bachata', level=1)
        )
        return SearchSessionsUseCase(session_repo=session_repo)

    @pytest.mark.asyncio
    async def test_search_all(self, use_case: SearchSessionsUseCase) -> None:
        views = await use_case.search()

        assert [view.id for view in views] == [
            'SESSION#2025-11-10#MON#1830',
            'SESSION#2025-11-10#MON#1930',
            'SESSION#2025-11-11#TUE#2030',
        ]

    @pytest.mark.asyncio
    async def test_search_one_category(self, use_case: SearchSessionsUseCase) -> None:
        views = await use_case.search(category='reggaeton')

        assert [(view.category, view.level) for view in views] == [('reggaeton', None)]

    @pytest.mark.asyncio
    async def test_unknown_category(self, use_case: SearchSessionsUseCase) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await use_case.search(category='tango')

        assert 'Invalid category: tango' in exc_info.value.message
