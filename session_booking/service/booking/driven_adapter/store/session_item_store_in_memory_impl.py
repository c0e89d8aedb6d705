"""
In-memory session item store

Same contract as the ScyllaDB store: every primitive yields to the event loop once
(the round trip) and then runs to completion without suspending, so each conditional
write is atomic with respect to other tasks on the loop.
"""

from datetime import datetime
from typing import Dict, List

import anyio.lowlevel
import attrs

from session_booking.platform.logging.loguru_io import Logger
from session_booking.service.booking.app.interface.i_session_item_store import (
    ISessionItemStore,
    SessionItem,
)
from session_booking.service.booking.driven_adapter.model.session_item_model import (
    METADATA_SK,
    BookingRecord,
    SessionMetadataRecord,
)


class SessionItemStoreInMemoryImpl(ISessionItemStore):
    def __init__(self) -> None:
        # pk -> sk -> record
        self._partitions: Dict[str, Dict[str, SessionItem]] = {}

    def clear(self) -> None:
        self._partitions.clear()

    @Logger.io
    async def query_partition(self, *, pk: str) -> List[SessionItem]:
        await anyio.lowlevel.checkpoint()
        return list(self._partitions.get(pk, {}).values())

    @Logger.io
    async def query_category_index(self, *, category_key: str) -> List[SessionMetadataRecord]:
        await anyio.lowlevel.checkpoint()
        matches = [
            item
            for partition in self._partitions.values()
            if isinstance(item := partition.get(METADATA_SK), SessionMetadataRecord)
            and item.category_key == category_key
        ]
        return sorted(matches, key=lambda record: (record.index_sort_key, record.pk))

    @Logger.io
    async def update_metadata_if_version(
        self,
        *,
        pk: str,
        expected_version: int,
        new_version: int,
        booking_count: int,
        updated_at: datetime,
    ) -> bool:
        await anyio.lowlevel.checkpoint()
        partition = self._partitions.get(pk, {})
        metadata = partition.get(METADATA_SK)
        if not isinstance(metadata, SessionMetadataRecord):
            return False
        if metadata.version != expected_version:
            return False

        partition[METADATA_SK] = attrs.evolve(
            metadata,
            version=new_version,
            booking_count=booking_count,
            updated_at=updated_at,
        )
        return True

    @Logger.io
    async def put_booking_if_absent(self, *, record: BookingRecord) -> bool:
        await anyio.lowlevel.checkpoint()
        partition = self._partitions.setdefault(record.pk, {})
        if record.sk in partition:
            return False
        partition[record.sk] = record
        return True

    @Logger.io
    async def put_metadata_if_absent(self, *, record: SessionMetadataRecord) -> bool:
        await anyio.lowlevel.checkpoint()
        partition = self._partitions.setdefault(record.pk, {})
        if METADATA_SK in partition:
            return False
        partition[METADATA_SK] = record
        return True
