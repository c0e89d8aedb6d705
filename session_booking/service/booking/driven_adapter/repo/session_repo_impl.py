"""
Session repository - optimistic concurrency over ISessionItemStore

Save protocol (one attempt, never retried here):
1. Re-read the partition's booking keys; a booking made since load whose email is
   already stored is a duplicate and fails before anything is written
2. Compare-and-set the metadata version (expected -> expected + 1) with the new count
3. Only after step 2 commits, insert each new booking if absent

Bookings that were loaded with the aggregate are already durable and never rewritten.

The metadata update and booking inserts are independent atomic writes. A session that
loses step 2 leaves no trace; retrying means reloading and re-applying from scratch,
which is the caller's decision.
"""

from typing import Iterable, List, Literal, Optional

from session_booking.service.booking.app.dto.session_dto import SessionWithVersion
from session_booking.service.booking.app.interface.i_session_item_store import ISessionItemStore
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo
from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate
from session_booking.service.booking.domain.booking_error import (
    ConcurrentModificationError,
    DuplicateParticipantAtStoreError,
    SessionAlreadyExistsError,
)
from session_booking.service.booking.domain.enum.session_category import SessionCategory
from session_booking.service.booking.domain.value_object.session_id import SessionId
from session_booking.service.booking.driven_adapter.mapper.session_mapper import (
    SessionMapper,
    build_category_key,
)
from session_booking.service.booking.driven_adapter.model.session_item_model import (
    BookingRecord,
    SessionMetadataRecord,
)


def _category_keys(category: SessionCategory) -> List[str]:
    # Level is optional for leveled categories, so the bare key is searched as well
    return [build_category_key(category, level) for level in category.levels] + [
        build_category_key(category)
    ]


class SessionRepoImpl(ISessionRepo):
    def __init__(self, *, store: ISessionItemStore) -> None:
        self.store = store

    async def find_by_id(self, *, session_id: SessionId) -> Optional[SessionWithVersion]:
        items = await self.store.query_partition(pk=str(session_id))

        metadata = next((item for item in items if isinstance(item, SessionMetadataRecord)), None)
        if metadata is None:
            return None

        bookings = [item for item in items if isinstance(item, BookingRecord)]
        return SessionMapper.to_domain(metadata, bookings)

    async def find_by_category(
        self, *, category: SessionCategory | Literal['any']
    ) -> List[SessionWithVersion]:
        categories: Iterable[SessionCategory] = (
            list(SessionCategory) if category == 'any' else [SessionCategory(category)]
        )

        sessions: List[SessionWithVersion] = []
        for each in categories:
            for category_key in _category_keys(each):
                records = await self.store.query_category_index(category_key=category_key)
                sessions.extend(SessionMapper.to_domain(record, []) for record in records)

        sessions.sort(key=lambda loaded: loaded.session.schedule.to_iso_datetime())
        return sessions

    async def save(self, *, session: SessionAggregate, expected_version: int) -> int:
        session_id = str(session.id)
        new_version = expected_version + 1
        items = SessionMapper.to_persistence(session, new_version)

        pending = {booking.email.value for booking in session.new_bookings}
        new_bookings = [record for record in items.bookings if record.sk in pending]

        # 1. Another writer may have stored the same email after this aggregate was loaded
        stored = await self.store.query_partition(pk=session_id)
        stored_emails = {item.sk for item in stored if isinstance(item, BookingRecord)}
        for record in new_bookings:
            if record.sk in stored_emails:
                raise DuplicateParticipantAtStoreError(email=record.sk, session_id=session_id)

        # 2. Compare-and-set on version
        committed = await self.store.update_metadata_if_version(
            pk=session_id,
            expected_version=expected_version,
            new_version=new_version,
            booking_count=items.metadata.booking_count,
            updated_at=items.metadata.updated_at,
        )
        if not committed:
            raise ConcurrentModificationError(
                session_id=session_id, expected_version=expected_version
            )

        # 3. Insert-if-absent per new booking
        for record in new_bookings:
            if not await self.store.put_booking_if_absent(record=record):
                raise DuplicateParticipantAtStoreError(email=record.sk, session_id=session_id)

        return new_version

    async def create(self, *, session: SessionAggregate) -> int:
        items = SessionMapper.to_persistence(session, 0)

        if not await self.store.put_metadata_if_absent(record=items.metadata):
            raise SessionAlreadyExistsError(session_id=str(session.id))

        for record in items.bookings:
            if not await self.store.put_booking_if_absent(record=record):
                raise DuplicateParticipantAtStoreError(
                    email=record.sk, session_id=str(session.id)
                )

        return 0
