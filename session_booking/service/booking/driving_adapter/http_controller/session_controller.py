from typing import Literal

from fastapi import APIRouter, Depends, status

from session_booking.platform.logging.loguru_io import Logger
from session_booking.service.booking.app.command.book_session_use_case import BookSessionUseCase
from session_booking.service.booking.app.dto.session_dto import SessionView
from session_booking.service.booking.app.query.get_session_use_case import GetSessionUseCase
from session_booking.service.booking.app.query.search_sessions_use_case import (
    SearchSessionsUseCase,
)
from session_booking.service.booking.driving_adapter.http_controller.schema.session_schema import (
    BookingCreateRequest,
    BookingResponse,
    SessionListResponse,
    SessionResponse,
)


router = APIRouter()


def _to_response(view: SessionView) -> SessionResponse:
    return SessionResponse(
        id=view.id,
        category=view.category,
        level=view.level,
        date=view.date,
        start_time=view.start_time,
        max_spots=view.max_spots,
        spots_remaining=view.spots_remaining,
    )


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def search_sessions(
    category: Literal['any', 'salsa', 'bachata', 'reggaeton'] = 'any',
    use_case: SearchSessionsUseCase = Depends(SearchSessionsUseCase.depends),
) -> SessionListResponse:
    views = await use_case.search(category=category)
    return SessionListResponse(sessions=[_to_response(view) for view in views])


# Session ids contain '#', so clients send them percent-encoded (%23); the router decodes
@router.get('/{session_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_session(
    session_id: str,
    use_case: GetSessionUseCase = Depends(GetSessionUseCase.depends),
) -> SessionResponse:
    return _to_response(await use_case.get(session_id=session_id))


@router.post('/{session_id}/booking', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_session(
    session_id: str,
    request: BookingCreateRequest,
    use_case: BookSessionUseCase = Depends(BookSessionUseCase.depends),
) -> BookingResponse:
    result = await use_case.book(session_id=session_id, email=request.email)
    return BookingResponse(
        session_id=result.session_id,
        email=result.email,
        booked_at=result.booked_at,
    )
