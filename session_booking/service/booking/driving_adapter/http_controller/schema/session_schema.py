from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class BookingCreateRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'email': 'dancer@example.com'}})

    email: str


class BookingResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'session_id': 'SESSION#2025-11-10#MON#1830',
                'email': 'dancer@example.com',
                'booked_at': '2025-11-03T09:15:00Z',
            }
        }
    )

    session_id: str
    email: str
    booked_at: datetime


class SessionResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': 'SESSION#2025-11-10#MON#1830',
                'category': 'salsa',
                'level': 1,
                'date': '2025-11-10',
                'start_time': '18:30',
                'max_spots': 20,
                'spots_remaining': 7,
            }
        }
    )

    id: str
    category: str
    level: Optional[int] = None
    date: str
    start_time: str
    max_spots: int
    spots_remaining: int


class SessionListResponse(BaseModel):
    sessions: List[SessionResponse]
