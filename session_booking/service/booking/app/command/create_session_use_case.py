from typing import Iterable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from session_booking.platform.config.di import Container
from session_booking.platform.logging.loguru_io import Logger
from session_booking.service.booking.app.dto.session_dto import SessionView
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo
from session_booking.service.booking.domain.aggregate.session_aggregate import SessionAggregate
from session_booking.service.booking.domain.value_object.email import Email
from session_booking.service.booking.domain.value_object.session_id import SessionId
from session_booking.service.booking.domain.value_object.session_schedule import SessionSchedule
from session_booking.service.booking.domain.value_object.session_type import SessionType


class CreateSessionUseCase:
    """
    Create a new session at version 0, optionally with initial participants

    The session id is derived from the schedule: date, its weekday, and the compact
    start time (18:30 -> 1830).
    """

    def __init__(self, *, session_repo: ISessionRepo) -> None:
        self.session_repo = session_repo
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        session_repo: ISessionRepo = Depends(Provide[Container.session_repo]),
    ) -> Self:
        return cls(session_repo=session_repo)

    @Logger.io
    async def create(
        self,
        *,
        date: str,
        start_time: str,
        category: str,
        level: Optional[int] = None,
        max_spots: int,
        participant_emails: Iterable[str] = (),
    ) -> SessionView:
        schedule = SessionSchedule(date=date, start_time=start_time)
        session_id = SessionId(
            date=date,
            weekday=schedule.weekday,
            time=start_time.replace(':', ''),
        )

        with self.tracer.start_as_current_span(
            'use_case.create_session',
            attributes={'session.id': str(session_id)},
        ):
            session = SessionAggregate.create(
                id=session_id,
                session_type=SessionType(category=category, level=level),
                schedule=schedule,
                max_spots=max_spots,
            )
            for email in participant_emails:
                session.book(Email(email))

            await self.session_repo.create(session=session)

            Logger.base.info(
                f'📅 [CREATE-SESSION] {session_id} created '
                f'({session.booking_count}/{max_spots} booked)'
            )
            return SessionView.from_aggregate(session)
