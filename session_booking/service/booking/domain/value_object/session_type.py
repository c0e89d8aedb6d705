from typing import Any, Optional

import attrs

from session_booking.service.booking.domain.booking_error import ValidationError
from session_booking.service.booking.domain.enum.session_category import SessionCategory


def _to_category(value: Any) -> SessionCategory:
    try:
        return SessionCategory(value)
    except ValueError:
        valid = ', '.join(SessionCategory)
        raise ValidationError(f'Invalid session category: {value}. Must be one of: {valid}')


@attrs.frozen
class SessionType:
    """
    Session category plus optional level

    - salsa: level 1-3 (optional)
    - bachata: level 1-2 (optional)
    - reggaeton: no level allowed
    """

    category: SessionCategory = attrs.field(converter=_to_category)
    level: Optional[int] = None

    def __attrs_post_init__(self) -> None:
        if self.level is None:
            return

        levels = self.category.levels
        if not levels:
            raise ValidationError(f'{self.category.value.capitalize()} does not have levels')

        if isinstance(self.level, bool) or not isinstance(self.level, int):
            raise ValidationError('Session level must be an integer')

        if self.level not in levels:
            raise ValidationError(
                f'{self.category.value.capitalize()} level must be between '
                f'{levels[0]} and {levels[-1]}'
            )
