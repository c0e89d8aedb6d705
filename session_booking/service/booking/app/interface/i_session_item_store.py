from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from session_booking.service.booking.driven_adapter.model.session_item_model import (
    BookingRecord,
    SessionMetadataRecord,
)


SessionItem = SessionMetadataRecord | BookingRecord


class ISessionItemStore(ABC):
    """
    Key-value store primitives the session repository is built on

    Every method is one store round trip. The conditional writes are atomic per record;
    there is no transaction spanning records.
    """

    @abstractmethod
    async def query_partition(self, *, pk: str) -> List[SessionItem]:
        """All records (metadata and bookings) stored under one session key"""
        pass

    @abstractmethod
    async def query_category_index(self, *, category_key: str) -> List[SessionMetadataRecord]:
        """Metadata records under one category index key, ordered by index sort key"""
        pass

    @abstractmethod
    async def update_metadata_if_version(
        self,
        *,
        pk: str,
        expected_version: int,
        new_version: int,
        booking_count: int,
        updated_at: datetime,
    ) -> bool:
        """Compare-and-set on the metadata version. False when the condition failed."""
        pass

    @abstractmethod
    async def put_booking_if_absent(self, *, record: BookingRecord) -> bool:
        """False when a record with the same (pk, email) already exists"""
        pass

    @abstractmethod
    async def put_metadata_if_absent(self, *, record: SessionMetadataRecord) -> bool:
        """False when the session already exists"""
        pass
