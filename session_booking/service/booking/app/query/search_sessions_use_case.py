from typing import List, Literal, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from session_booking.platform.config.di import Container
from session_booking.platform.logging.loguru_io import Logger
from session_booking.service.booking.app.dto.session_dto import SessionView
from session_booking.service.booking.app.interface.i_session_repo import ISessionRepo
from session_booking.service.booking.domain.booking_error import ValidationError
from session_booking.service.booking.domain.enum.session_category import SessionCategory


ANY_CATEGORY = 'any'


class SearchSessionsUseCase:
    """List sessions of one category (or all of them), earliest first"""

    def __init__(self, *, session_repo: ISessionRepo) -> None:
        self.session_repo = session_repo

    @classmethod
    @inject
    def depends(
        cls,
        session_repo: ISessionRepo = Depends(Provide[Container.session_repo]),
    ) -> Self:
        return cls(session_repo=session_repo)

    @staticmethod
    def _parse_category(category: str) -> SessionCategory | Literal['any']:
        if category == ANY_CATEGORY:
            return ANY_CATEGORY
        try:
            return SessionCategory(category)
        except ValueError:
            valid = ', '.join([ANY_CATEGORY, *SessionCategory])
            raise ValidationError(f'Invalid category: {category}. Must be one of: {valid}')

    @Logger.io
    async def search(self, *, category: str = ANY_CATEGORY) -> List[SessionView]:
        sessions = await self.session_repo.find_by_category(
            category=self._parse_category(category)
        )
        return [SessionView.from_aggregate(loaded.session) for loaded in sessions]
