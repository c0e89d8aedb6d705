from enum import StrEnum


class SessionTime(StrEnum):
    """Start times a session can be scheduled at, in compact HHMM form."""

    TIME_1830 = '1830'
    TIME_1930 = '1930'
    TIME_2030 = '2030'

    @property
    def start_time(self) -> str:
        return f'{self.value[:2]}:{self.value[2:]}'
