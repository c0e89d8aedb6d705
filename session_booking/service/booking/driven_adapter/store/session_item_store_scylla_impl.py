"""
ScyllaDB session item store

ScyllaDB Specifics:
- Conditional writes are lightweight transactions (`IF version = ?`, `IF NOT EXISTS`);
  the outcome is read from `ResultSet.was_applied`
- Category lookups go through the `session_by_category` materialized view
  keyed by category_key; rows come back in pk order and are sorted by index_sort_key here
- The driver is blocking: every call runs in a worker thread
"""

from datetime import datetime, timezone
from functools import partial
from typing import Any, List, Optional

import anyio.to_thread
from cassandra import ConsistencyLevel
from cassandra.query import SimpleStatement
from opentelemetry import trace

from session_booking.platform.database.scylla_setting import get_scylla_session
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


_METADATA_COLUMNS = (
    'pk, sk, category_key, index_sort_key, category, level, date, weekday, start_time, '
    'max_spots, booking_count, version, created_at, updated_at'
)


def _as_utc(value: Optional[datetime]) -> datetime:
    # The driver returns naive datetimes in UTC
    if value is None:
        return datetime.fromtimestamp(0, timezone.utc)
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SessionItemStoreScyllaImpl(ISessionItemStore):
    def __init__(self) -> None:
        self._tracer: trace.Tracer | None = None

    @property
    def tracer(self) -> trace.Tracer:
        """Lazy initialize tracer to ensure TracerProvider is set up"""
        if self._tracer is None:
            self._tracer = trace.get_tracer(__name__)
        return self._tracer

    @staticmethod
    def _row_to_metadata(row: Any) -> SessionMetadataRecord:
        return SessionMetadataRecord(
            pk=row.pk,
            category_key=row.category_key,
            index_sort_key=row.index_sort_key,
            category=row.category,
            level=row.level,
            date=row.date,
            weekday=row.weekday,
            start_time=row.start_time,
            max_spots=row.max_spots,
            booking_count=row.booking_count or 0,
            version=row.version or 0,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )

    @staticmethod
    def _row_to_item(row: Any) -> SessionItem:
        if row.sk == METADATA_SK:
            return SessionItemStoreScyllaImpl._row_to_metadata(row)
        return BookingRecord(pk=row.pk, sk=row.sk, booked_at=_as_utc(row.booked_at))

    @Logger.io
    async def query_partition(self, *, pk: str) -> List[SessionItem]:
        session = await get_scylla_session()

        query = f"""
            SELECT {_METADATA_COLUMNS}, booked_at
            FROM session_item
            WHERE pk = %s
            """

        result = await anyio.to_thread.run_sync(partial(session.execute, query, (pk,)))
        return [self._row_to_item(row) for row in result]

    @Logger.io
    async def query_category_index(self, *, category_key: str) -> List[SessionMetadataRecord]:
        session = await get_scylla_session()

        query = f"""
            SELECT {_METADATA_COLUMNS}
            FROM session_by_category
            WHERE category_key = %s
            """

        result = await anyio.to_thread.run_sync(partial(session.execute, query, (category_key,)))
        records = [self._row_to_metadata(row) for row in result]
        return sorted(records, key=lambda record: (record.index_sort_key, record.pk))

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
        with self.tracer.start_as_current_span(
            'db.session.update_metadata_if_version',
            attributes={'session.id': pk, 'session.expected_version': expected_version},
        ) as span:
            session = await get_scylla_session()

            # A missing row fails the condition too
            statement = SimpleStatement(
                """
                UPDATE session_item
                SET version = %s,
                    booking_count = %s,
                    updated_at = %s
                WHERE pk = %s
                  AND sk = %s
                IF version = %s
                """,
                serial_consistency_level=ConsistencyLevel.LOCAL_SERIAL,
            )

            result = await anyio.to_thread.run_sync(
                partial(
                    session.execute,
                    statement,
                    (new_version, booking_count, updated_at, pk, METADATA_SK, expected_version),
                )
            )
            span.set_attribute('lwt.applied', result.was_applied)
            return result.was_applied

    @Logger.io
    async def put_booking_if_absent(self, *, record: BookingRecord) -> bool:
        session = await get_scylla_session()

        statement = SimpleStatement(
            """
            INSERT INTO session_item (pk, sk, booked_at)
            VALUES (%s, %s, %s)
            IF NOT EXISTS
            """,
            serial_consistency_level=ConsistencyLevel.LOCAL_SERIAL,
        )

        result = await anyio.to_thread.run_sync(
            partial(session.execute, statement, (record.pk, record.sk, record.booked_at))
        )
        return result.was_applied

    @Logger.io
    async def put_metadata_if_absent(self, *, record: SessionMetadataRecord) -> bool:
        session = await get_scylla_session()

        statement = SimpleStatement(
            f"""
            INSERT INTO session_item ({_METADATA_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            IF NOT EXISTS
            """,
            serial_consistency_level=ConsistencyLevel.LOCAL_SERIAL,
        )

        result = await anyio.to_thread.run_sync(
            partial(
                session.execute,
                statement,
                (
                    record.pk,
                    record.sk,
                    record.category_key,
                    record.index_sort_key,
                    record.category,
                    record.level,
                    record.date,
                    record.weekday,
                    record.start_time,
                    record.max_spots,
                    record.booking_count,
                    record.version,
                    record.created_at,
                    record.updated_at,
                ),
            )
        )
        return result.was_applied
