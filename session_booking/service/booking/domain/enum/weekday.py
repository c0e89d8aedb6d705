from datetime import date
from enum import StrEnum


class Weekday(StrEnum):
    MON = 'MON'
    TUE = 'TUE'
    WED = 'WED'
    THU = 'THU'
    FRI = 'FRI'
    SAT = 'SAT'
    SUN = 'SUN'

    @classmethod
    def of(cls, day: date) -> 'Weekday':
        # date.weekday(): Monday == 0
        return list(cls)[day.weekday()]
