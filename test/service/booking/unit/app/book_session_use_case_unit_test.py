"""
Unit tests for BookSessionUseCase

Tests:
- Happy path persists the booking and bumps the version
- ConcurrentModificationError is retried from a fresh load, up to max_attempts
- Every other failure is final and not retried
- Racing requests over the in-memory store never overbook
"""

from collections.abc import Callable
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import anyio
import pytest

from session_booking.service.booking.app.command.book_session_use_case import BookSessionUseCase
from session_booking.service.booking.app.dto.session_dto import SessionWithVersion
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo
from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate
from session_booking.service.booking.domain.booking_error import (
    BookingErrorKind,
    CapacityExceededError,
    ConcurrentModificationError,
    DuplicateParticipantAtStoreError,
    DuplicateParticipantError,
    SessionNotFoundError,
    ValidationError,
)
from session_booking.service.booking.driven_adapter.model.session_item_model import BookingRecord
from session_booking.service.booking.driven_adapter.repo.session_repo_impl import SessionRepoImpl
from session_booking.service.booking.driven_adapter.store.session_item_store_in_memory_impl import (
    SessionItemStoreInMemoryImpl,
)


SessionFactory = Callable[..., SessionAggregate]

SESSION_ID = 'SESSION#2025-11-10#MON#1830'


def _conflict() -> ConcurrentModificationError:
    return ConcurrentModificationError(session_id=SESSION_ID, expected_version=0)


@pytest.fixture
def mock_session_repo(make_session: SessionFactory) -> AsyncMock:
    """Repo that hands out a fresh version-0 session on every load"""
    repo = AsyncMock(spec=ISessionRepo)
    repo.find_by_id.side_effect = lambda **_: SessionWithVersion(
        session=make_session(max_spots=20), version=0
    )
    repo.save.return_value = 1
    return repo


@pytest.mark.unit
class TestBookSessionHappyPath:
    @pytest.mark.asyncio
    async def test_book_persists_and_returns_booking(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> None:
        # Arrange
        await session_repo.create(session=make_session(max_spots=20))
        use_case = BookSessionUseCase(session_repo=session_repo, max_attempts=3)

        # Act
        result = await use_case.book(session_id=SESSION_ID, email='a@x.com')

        # Assert
        assert result.session_id == SESSION_ID
        assert result.email == 'a@x.com'
        loaded = await session_repo.find_by_id(session_id=make_session().id)
        assert loaded is not None
        assert loaded.version == 1
        assert loaded.session.bookings['a@x.com'].booked_at == result.booked_at
        assert loaded.session.spots_remaining == 19

    @pytest.mark.asyncio
    async def test_second_booking_same_email(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> None:
        await session_repo.create(session=make_session(emails=('a@x.com',)))
        use_case = BookSessionUseCase(session_repo=session_repo, max_attempts=3)

        with pytest.raises(DuplicateParticipantError) as exc_info:
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        assert exc_info.value.kind is BookingErrorKind.DUPLICATE_PARTICIPANT

    @pytest.mark.asyncio
    async def test_full_session(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> None:
        await session_repo.create(session=make_session(max_spots=1, emails=('a@x.com',)))
        use_case = BookSessionUseCase(session_repo=session_repo, max_attempts=3)

        with pytest.raises(CapacityExceededError):
            await use_case.book(session_id=SESSION_ID, email='b@x.com')


@pytest.mark.unit
class TestBookSessionFailures:
    @pytest.mark.asyncio
    async def test_session_not_found(self, mock_session_repo: AsyncMock) -> None:
        mock_session_repo.find_by_id.side_effect = None
        mock_session_repo.find_by_id.return_value = None
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=3)

        with pytest.raises(SessionNotFoundError) as exc_info:
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        assert exc_info.value.status_code == 404
        mock_session_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'session_id,email',
        [
            ('SESSION#2025-11-10#MON', 'a@x.com'),
            ('SESSION#2025-11-10#XYZ#1830', 'a@x.com'),
            (SESSION_ID, 'not-an-email'),
        ],
    )
    async def test_malformed_input(
        self, mock_session_repo: AsyncMock, session_id: str, email: str
    ) -> None:
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=3)

        with pytest.raises(ValidationError):
            await use_case.book(session_id=session_id, email=email)

        mock_session_repo.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_at_store_is_not_retried(self, mock_session_repo: AsyncMock) -> None:
        mock_session_repo.save.side_effect = DuplicateParticipantAtStoreError(
            email='a@x.com', session_id=SESSION_ID
        )
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=3)

        with pytest.raises(DuplicateParticipantAtStoreError):
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        assert mock_session_repo.save.await_count == 1

    @pytest.mark.asyncio
    async def test_store_failure_is_not_retried(self, mock_session_repo: AsyncMock) -> None:
        mock_session_repo.save.side_effect = TimeoutError('store timed out')
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=3)

        with pytest.raises(TimeoutError):
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        assert mock_session_repo.save.await_count == 1

    @pytest.mark.asyncio
    async def test_same_email_landing_between_load_and_save(
        self, make_session: SessionFactory
    ) -> None:
        """
        Another request has bumped the version but its booking record is not stored yet
        when this request loads; the record lands before this request saves.
        """

        class LateRecordStore(SessionItemStoreInMemoryImpl):
            reads = 0

            async def query_partition(self, *, pk: str) -> list:
                self.reads += 1
                if self.reads == 2:
                    late = BookingRecord(
                        pk=pk, sk='a@x.com', booked_at=datetime.now(timezone.utc)
                    )
                    await self.put_booking_if_absent(record=late)
                return await super().query_partition(pk=pk)

        # Arrange
        store = LateRecordStore()
        repo = SessionRepoImpl(store=store)
        await repo.create(session=make_session(max_spots=20))
        assert await store.update_metadata_if_version(
            pk=SESSION_ID,
            expected_version=0,
            new_version=1,
            booking_count=1,
            updated_at=datetime.now(timezone.utc),
        )
        store.reads = 0
        use_case = BookSessionUseCase(session_repo=repo, max_attempts=3)

        # Act
        with pytest.raises(DuplicateParticipantAtStoreError):
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        # Assert
        loaded = await repo.find_by_id(session_id=make_session().id)
        assert loaded is not None
        assert loaded.version == 1
        assert set(loaded.session.bookings) == {'a@x.com'}


@pytest.mark.unit
class TestBookSessionRetry:
    @pytest.mark.asyncio
    async def test_retry_after_conflict(self, mock_session_repo: AsyncMock) -> None:
        # Arrange
        mock_session_repo.save.side_effect = [_conflict(), 2]
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=3)

        # Act
        result = await use_case.book(session_id=SESSION_ID, email='a@x.com')

        # Assert - each attempt starts from a fresh load
        assert result.email == 'a@x.com'
        assert mock_session_repo.find_by_id.await_count == 2
        assert mock_session_repo.save.await_count == 2
        first, second = (call.kwargs['session'] for call in mock_session_repo.save.await_args_list)
        assert first is not second

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, mock_session_repo: AsyncMock) -> None:
        mock_session_repo.save.side_effect = _conflict()
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=3)

        with pytest.raises(ConcurrentModificationError):
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        assert mock_session_repo.save.await_count == 3

    @pytest.mark.asyncio
    async def test_single_attempt(self, mock_session_repo: AsyncMock) -> None:
        mock_session_repo.save.side_effect = _conflict()
        use_case = BookSessionUseCase(session_repo=mock_session_repo, max_attempts=1)

        with pytest.raises(ConcurrentModificationError):
            await use_case.book(session_id=SESSION_ID, email='a@x.com')

        assert mock_session_repo.find_by_id.await_count == 1

    @pytest.mark.asyncio
    async def test_racing_requests_both_land(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> None:
        """Two requests load version 0 together; the loser retries on version 1"""
        # Arrange
        await session_repo.create(session=make_session(max_spots=2))
        use_case = BookSessionUseCase(session_repo=session_repo, max_attempts=3)

        # Act
        async with anyio.create_task_group() as tg:
            tg.start_soon(lambda: use_case.book(session_id=SESSION_ID, email='a@x.com'))
            tg.start_soon(lambda: use_case.book(session_id=SESSION_ID, email='b@x.com'))

        # Assert
        loaded = await session_repo.find_by_id(session_id=make_session().id)
        assert loaded is not None
        assert loaded.version == 2
        assert set(loaded.session.bookings) == {'a@x.com', 'b@x.com'}
        assert loaded.session.spots_remaining == 0

    @pytest.mark.asyncio
    async def test_racing_for_last_spot(
        self, session_repo: SessionRepoImpl, make_session: SessionFactory
    ) -> None:
        """max_spots=1: the retry of the losing request sees a full session"""
        await session_repo.create(session=make_session(max_spots=1))
        use_case = BookSessionUseCase(session_repo=session_repo, max_attempts=3)
        outcomes: dict[str, str] = {}

        async def book(email: str) -> None:
            try:
                await use_case.book(session_id=SESSION_ID, email=email)
                outcomes[email] = 'booked'
            except CapacityExceededError as e:
                outcomes[email] = str(e.kind)

        async with anyio.create_task_group() as tg:
            tg.start_soon(book, 'a@x.com')
            tg.start_soon(book, 'b@x.com')

        assert sorted(outcomes.values()) == ['CAPACITY_EXCEEDED', 'booked']
        loaded = await session_repo.find_by_id(session_id=make_session().id)
        assert loaded is not None
        assert loaded.version == 1
        assert loaded.session.booking_count == 1
