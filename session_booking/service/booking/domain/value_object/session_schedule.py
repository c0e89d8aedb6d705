from datetime import date
import re
from typing import Any

import attrs

from session_booking.service.booking.domain.booking_error import ValidationError
from session_booking.service.booking.domain.enum.weekday import Weekday


_DATE_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}')
_TIME_PATTERN = re.compile(r'([01]\d|2[0-3]):([0-5]\d)')


def parse_calendar_date(value: Any) -> date:
    """Parse YYYY-MM-DD, rejecting impossible dates such as 2025-02-30."""
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise ValidationError('Date must be in YYYY-MM-DD format')
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f'Invalid date: {value}')


def _validate_date(instance: object, attribute: attrs.Attribute, value: Any) -> None:
    parse_calendar_date(value)


def _validate_start_time(instance: object, attribute: attrs.Attribute, value: Any) -> None:
    if not isinstance(value, str) or not _TIME_PATTERN.fullmatch(value):
        raise ValidationError('Time must be in HH:mm format (00:00-23:59)')


@attrs.frozen
class SessionSchedule:
    date: str = attrs.field(validator=_validate_date)
    start_time: str = attrs.field(validator=_validate_start_time)

    @property
    def calendar_date(self) -> date:
        return date.fromisoformat(self.date)

    @property
    def weekday(self) -> Weekday:
        return Weekday.of(self.calendar_date)

    def to_iso_datetime(self) -> str:
        """Combined ISO datetime string, used for chronological sorting."""
        return f'{self.date}T{self.start_time}:00'
