"""
Booking failure taxonomy

Every failure the booking core can produce is one exception class with a fixed
`kind` and its own payload attributes. `__match_args__` lets callers resolve them
with class patterns:

    match error:
        case CapacityExceededError(session_id, max_spots): ...
        case ConcurrentModificationError(session_id, expected_version): ...
"""

from enum import StrEnum

from session_booking.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
)


class BookingErrorKind(StrEnum):
    VALIDATION = 'VALIDATION'
    CAPACITY_EXCEEDED = 'CAPACITY_EXCEEDED'
    DUPLICATE_PARTICIPANT = 'DUPLICATE_PARTICIPANT'
    DUPLICATE_PARTICIPANT_AT_STORE = 'DUPLICATE_PARTICIPANT_AT_STORE'
    NOT_FOUND = 'NOT_FOUND'
    SESSION_ALREADY_EXISTS = 'SESSION_ALREADY_EXISTS'
    CONCURRENT_MODIFICATION = 'CONCURRENT_MODIFICATION'
    DATA_INTEGRITY = 'DATA_INTEGRITY'
    INVARIANT_VIOLATION = 'INVARIANT_VIOLATION'


class ValidationError(DomainError):
    """Malformed value object (email, date/time, identity string, category/level)."""

    kind = BookingErrorKind.VALIDATION
    __match_args__ = ('message',)

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class CapacityExceededError(ConflictError):
    kind = BookingErrorKind.CAPACITY_EXCEEDED
    __match_args__ = ('session_id', 'max_spots')

    def __init__(self, *, session_id: str, max_spots: int) -> None:
        self.session_id = session_id
        self.max_spots = max_spots
        super().__init__(
            f'Session {session_id} is fully booked ({max_spots}/{max_spots} spots taken)'
        )


class DuplicateParticipantError(ConflictError):
    kind = BookingErrorKind.DUPLICATE_PARTICIPANT
    __match_args__ = ('email', 'session_id')

    def __init__(self, *, email: str, session_id: str) -> None:
        self.email = email
        self.session_id = session_id
        super().__init__(f'Email {email} already has a booking for session {session_id}')


class DuplicateParticipantAtStoreError(DuplicateParticipantError):
    """The store rejected the booking insert: another request booked this email first."""

    kind = BookingErrorKind.DUPLICATE_PARTICIPANT_AT_STORE


class SessionNotFoundError(NotFoundError):
    kind = BookingErrorKind.NOT_FOUND
    __match_args__ = ('session_id',)

    def __init__(self, *, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f'Session with ID {session_id} not found')


class SessionAlreadyExistsError(ConflictError):
    kind = BookingErrorKind.SESSION_ALREADY_EXISTS
    __match_args__ = ('session_id',)

    def __init__(self, *, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f'Session {session_id} already exists')


class ConcurrentModificationError(ConflictError):
    """Stored version moved past the one the aggregate was loaded with. Retryable."""

    kind = BookingErrorKind.CONCURRENT_MODIFICATION
    __match_args__ = ('session_id', 'expected_version')

    def __init__(self, *, session_id: str, expected_version: int) -> None:
        self.session_id = session_id
        self.expected_version = expected_version
        super().__init__(
            f'Session {session_id} was modified by another request '
            f'(expected version {expected_version}). Please retry.'
        )


class DataIntegrityError(InternalError):
    """Stored booking records disagree with the session's booking counter. Not retryable."""

    kind = BookingErrorKind.DATA_INTEGRITY
    __match_args__ = ('session_id', 'expected_count', 'actual_count')

    def __init__(self, *, session_id: str, expected_count: int, actual_count: int) -> None:
        self.session_id = session_id
        self.expected_count = expected_count
        self.actual_count = actual_count
        super().__init__(
            f'Booking count mismatch for {session_id}: metadata says {expected_count} '
            f'but got {actual_count} booking records'
        )


class InvariantViolationError(InternalError):
    kind = BookingErrorKind.INVARIANT_VIOLATION
    __match_args__ = ('message',)
