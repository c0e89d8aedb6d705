#!/usr/bin/env python3
"""
Seed Script

Creates four weeks of sessions from the weekly timetable below, each with 20 spots
and a varied number of bookings (some full, some nearly full, some half empty).

Sessions that already exist are skipped, so the script can be re-run.
"""

from datetime import date, timedelta
import random
from typing import Iterator, NamedTuple, Optional

import anyio

from session_booking.platform.config.di import container
from session_booking.platform.logging.loguru_io import Logger
from session_booking.service.booking.app.command.create_session_use_case import (
    CreateSessionUseCase,
)
from session_booking.service.booking.domain.booking_error import SessionAlreadyExistsError
from session_booking.service.booking.domain.enum.weekday import Weekday


WEEKS = 4
MAX_SPOTS = 20


class TimetableSlot(NamedTuple):
    weekday: Weekday
    start_time: str
    category: str
    level: Optional[int] = None


WEEKLY_TIMETABLE = [
    TimetableSlot(Weekday.MON, '18:30', 'bachata', 1),
    TimetableSlot(Weekday.MON, '19:30', 'bachata', 2),
    TimetableSlot(Weekday.MON, '20:30', 'salsa', 3),
    TimetableSlot(Weekday.TUE, '18:30', 'salsa', 1),
    TimetableSlot(Weekday.TUE, '19:30', 'salsa', 2),
    TimetableSlot(Weekday.TUE, '20:30', 'reggaeton'),
    TimetableSlot(Weekday.WED, '18:30', 'bachata', 1),
    TimetableSlot(Weekday.WED, '19:30', 'bachata', 2),
    TimetableSlot(Weekday.WED, '20:30', 'salsa', 3),
    TimetableSlot(Weekday.THU, '18:30', 'salsa', 1),
    TimetableSlot(Weekday.THU, '19:30', 'salsa', 2),
    TimetableSlot(Weekday.FRI, '18:30', 'reggaeton'),
    TimetableSlot(Weekday.FRI, '19:30', 'salsa', 3),
]

_NAMES = [
    'alice', 'bob', 'carol', 'david', 'eve', 'frank', 'grace', 'henry',
    'iris', 'jack', 'kate', 'leo', 'maria', 'noah', 'olivia', 'peter',
    'quinn', 'rose', 'sam', 'tina', 'uma', 'victor', 'wendy', 'xander',
    'yara', 'zoe', 'alex', 'blake', 'casey', 'drew',
]  # fmt: skip
_DOMAINS = ['gmail.com', 'yahoo.com', 'outlook.com', 'email.com']


def next_date(weekday: Weekday, weeks_from_now: int, today: date) -> date:
    """Next occurrence of weekday (today counts), shifted by whole weeks"""
    days_until = (list(Weekday).index(weekday) - today.weekday()) % 7
    return today + timedelta(days=days_until + weeks_from_now * 7)


def participant_emails() -> Iterator[str]:
    """alice@gmail.com, bob@gmail.com, ... then alice@yahoo.com ... then alice1@gmail.com"""
    index = 0
    while True:
        name = _NAMES[index % len(_NAMES)]
        domain = _DOMAINS[(index // len(_NAMES)) % len(_DOMAINS)]
        suffix = index // (len(_NAMES) * len(_DOMAINS))
        yield f'{name}{suffix}@{domain}' if suffix else f'{name}@{domain}'
        index += 1


def booking_count_for(session_index: int, rng: random.Random) -> int:
    match session_index % 5:
        case 0:
            return 20
        case 1:
            return 19
        case 2:
            return 18
        case 3:
            return rng.randint(10, 14)
        case _:
            return rng.randint(5, 12)


async def seed_sessions(*, use_case: CreateSessionUseCase, today: date, rng: random.Random) -> int:
    emails = participant_emails()
    created = 0

    for week in range(WEEKS):
        for i, slot in enumerate(WEEKLY_TIMETABLE):
            session_date = next_date(slot.weekday, week, today).isoformat()
            count = booking_count_for(week * len(WEEKLY_TIMETABLE) + i, rng)

            try:
                await use_case.create(
                    date=session_date,
                    start_time=slot.start_time,
                    category=slot.category,
                    level=slot.level,
                    max_spots=MAX_SPOTS,
                    participant_emails=[next(emails) for _ in range(count)],
                )
                created += 1
            except SessionAlreadyExistsError as e:
                Logger.base.warning(f'⏭️  [SEED] {e.message}, skipping')

    return created


async def main() -> None:
    print('🌱 Seeding sessions...')
    use_case = CreateSessionUseCase(session_repo=container.session_repo())
    created = await seed_sessions(use_case=use_case, today=date.today(), rng=random.Random(42))
    print(f'✅ Created {created} sessions over the next {WEEKS} weeks')


if __name__ == '__main__':
    anyio.run(main)
