from abc import ABC, abstractmethod
from typing import List, Literal, Optional

from session_booking.service.booking.app.dto.session_dto import SessionWithVersion
from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate
from session_booking.service.booking.domain.enum.session_category import SessionCategory
from session_booking.service.booking.domain.value_object.session_id import SessionId


class ISessionRepo(ABC):
    """Repository interface for sessions, with optimistic concurrency on save"""

    @abstractmethod
    async def find_by_id(self, *, session_id: SessionId) -> Optional[SessionWithVersion]:
        pass

    @abstractmethod
    async def find_by_category(
        self, *, category: SessionCategory | Literal['any']
    ) -> List[SessionWithVersion]:
        """Sessions without their booking sets, sorted by date then start time"""
        pass

    @abstractmethod
    async def save(self, *, session: SessionAggregate, expected_version: int) -> int:
        """
        Persist the session if the stored version still equals expected_version

        Returns:
            The committed version (expected_version + 1)

        Raises:
            ConcurrentModificationError: Stored version moved
            DuplicateParticipantAtStoreError: A new booking's email was already stored
        """
        pass

    @abstractmethod
    async def create(self, *, session: SessionAggregate) -> int:
        """
        Persist a brand-new session at version 0

        Raises:
            SessionAlreadyExistsError: A session with the same id exists
        """
        pass
