import time
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from session_booking.platform.config.di import Container
from session_booking.platform.exception.exceptions import CustomBaseError
from session_booking.platform.logging.loguru_io import Logger
from session_booking.platform.metrics.booking_metrics import metrics
from session_booking.service.booking.app.dto.session_dto import BookingResult
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo
from session_booking.service.booking.domain.booking_error import (
    ConcurrentModificationError,
    SessionNotFoundError,
)
from session_booking.service.booking.domain.value_object.email import Email
from session_booking.service.booking.domain.value_object.session_id import SessionId


class BookSessionUseCase:
    """
    Book one spot in a session for a participant

    Flow (per attempt):
    1. Load the session with its booking set and version
    2. Apply the booking on the aggregate (capacity and duplicate rules)
    3. Save with the loaded version as expected_version

    A ConcurrentModificationError means another request committed first: the whole
    attempt is thrown away and repeated from step 1, up to max_attempts. Every other
    failure is final.
    """

    def __init__(self, *, session_repo: ISessionRepo, max_attempts: int) -> None:
        self.session_repo = session_repo
        self.max_attempts = max_attempts
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        session_repo: ISessionRepo = Depends(Provide[Container.session_repo]),
        max_attempts: int = Depends(
            Provide[Container.config_service.provided.BOOKING_MAX_ATTEMPTS]
        ),
    ) -> Self:
        return cls(session_repo=session_repo, max_attempts=max_attempts)

    @Logger.io
    async def book(self, *, session_id: str, email: str) -> BookingResult:
        """
        Raises:
            ValidationError: Malformed session id or email
            SessionNotFoundError: No session with this id
            CapacityExceededError: Session is full
            DuplicateParticipantError: Email already booked (in memory or at the store)
            ConcurrentModificationError: Still conflicting after max_attempts
        """
        started = time.perf_counter()
        category = 'unknown'
        attempt = 0

        with self.tracer.start_as_current_span(
            'use_case.book_session',
            attributes={'session.id': session_id},
        ) as span:
            try:
                parsed_id = SessionId.from_string(session_id)
                participant = Email(email)

                while True:
                    attempt += 1
                    loaded = await self.session_repo.find_by_id(session_id=parsed_id)
                    if loaded is None:
                        raise SessionNotFoundError(session_id=session_id)

                    session = loaded.session
                    category = session.session_type.category.value
                    booking = session.book(participant)

                    try:
                        version = await self.session_repo.save(
                            session=session, expected_version=loaded.version
                        )
                    except ConcurrentModificationError:
                        metrics.record_concurrent_modification(category=category)
                        if attempt >= self.max_attempts:
                            raise
                        Logger.base.warning(
                            f'🔁 [BOOK-SESSION] Version {loaded.version} of {session_id} moved, '
                            f'retrying ({attempt}/{self.max_attempts})'
                        )
                        continue

                    break

            except CustomBaseError as e:
                result = str(getattr(e, 'kind', type(e).__name__))
                span.set_attribute('booking.result', result)
                metrics.record_booking(
                    category=category,
                    result=result,
                    attempts=attempt,
                    duration=time.perf_counter() - started,
                )
                raise

            span.set_attribute('booking.result', 'booked')
            span.set_attribute('booking.attempts', attempt)
            span.set_attribute('session.version', version)
            metrics.record_booking(
                category=category,
                result='booked',
                attempts=attempt,
                duration=time.perf_counter() - started,
            )

            Logger.base.info(
                f'✅ [BOOK-SESSION] {participant} booked {session_id} '
                f'(version {version}, {session.spots_remaining} spots left)'
            )

            return BookingResult(
                session_id=str(parsed_id),
                email=participant.value,
                booked_at=booking.booked_at,
            )
