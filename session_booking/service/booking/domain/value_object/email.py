import re
from typing import Any

import attrs

from session_booking.service.booking.domain.booking_error import ValidationError


_EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')


def _validate_email(instance: object, attribute: attrs.Attribute, value: Any) -> None:
    if not isinstance(value, str) or not _EMAIL_PATTERN.fullmatch(value):
        raise ValidationError('Invalid email format')


@attrs.frozen
class Email:
    """Participant address. Compared as an exact string (case-sensitive)."""

    value: str = attrs.field(validator=_validate_email)

    def __str__(self) -> str:
        return self.value
