from typing import Any

import attrs

from session_booking.service.booking.domain.booking_error import ValidationError
from session_booking.service.booking.domain.enum.session_time import SessionTime
from session_booking.service.booking.domain.enum.weekday import Weekday
from session_booking.service.booking.domain.value_object.session_schedule import (
    parse_calendar_date,
)


SESSION_ID_PREFIX = 'SESSION'
_SEPARATOR = '#'


def _to_weekday(value: Any) -> Weekday:
    try:
        return Weekday(value)
    except ValueError:
        raise ValidationError(
            f'Invalid day of week: {value}. Must be one of: {", ".join(Weekday)}'
        )


def _to_session_time(value: Any) -> SessionTime:
    try:
        return SessionTime(value)
    except ValueError:
        raise ValidationError(
            f'Invalid time: {value}. Must be one of: {", ".join(SessionTime)}'
        )


def _validate_date(instance: object, attribute: attrs.Attribute, value: Any) -> None:
    parse_calendar_date(value)


@attrs.frozen
class SessionId:
    """
    Composite natural key of a session, also used as the storage primary key

    Format: SESSION#2025-11-10#MON#1830
    """

    date: str = attrs.field(validator=_validate_date)
    weekday: Weekday = attrs.field(converter=_to_weekday)
    time: SessionTime = attrs.field(converter=_to_session_time)

    @classmethod
    def from_string(cls, session_id: str) -> 'SessionId':
        parts = session_id.split(_SEPARATOR)
        if len(parts) != 4 or parts[0] != SESSION_ID_PREFIX:
            raise ValidationError(
                f'Invalid session id format: {session_id}. '
                f'Expected format: {SESSION_ID_PREFIX}#YYYY-MM-DD#DAY#TIME'
            )
        return cls(date=parts[1], weekday=parts[2], time=parts[3])

    def __str__(self) -> str:
        return _SEPARATOR.join((SESSION_ID_PREFIX, self.date, self.weekday, self.time))
