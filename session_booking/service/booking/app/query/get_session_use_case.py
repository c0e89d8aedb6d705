from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from session_booking.platform.config.di import Container
from session_booking.platform.logging.loguru_io import Logger
from session_booking.service.booking.app.dto.session_dto import SessionView
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo
from session_booking.service.booking.domain.booking_error import SessionNotFoundError
from session_booking.service.booking.domain.value_object.session_id import SessionId


class GetSessionUseCase:
    def __init__(self, *, session_repo: ISessionRepo) -> None:
        self.session_repo = session_repo

    @classmethod
    @inject
    def depends(
        cls,
        session_repo: ISessionRepo = Depends(Provide[Container.session_repo]),
    ) -> Self:
        return cls(session_repo=session_repo)

    @Logger.io
    async def get(self, *, session_id: str) -> SessionView:
        loaded = await self.session_repo.find_by_id(session_id=SessionId.from_string(session_id))
        if loaded is None:
            raise SessionNotFoundError(session_id=session_id)
        return SessionView.from_aggregate(loaded.session)
