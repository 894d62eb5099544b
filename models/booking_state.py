"""
Booking status and listing state definitions.
Handles the status transition rules and temporal bucketing of bookings.

Two closed sets:
- BookingStatus is what a booking *is* (WAITING, APPROVED, REJECTED).
- BookingState is what a listing *asks for* (ALL, CURRENT, PAST, FUTURE,
  WAITING, REJECTED). WAITING and REJECTED filter by status; CURRENT, PAST
  and FUTURE filter by wall-clock time regardless of status.
"""

from datetime import datetime
from enum import Enum

from utils.exceptions import InvalidStateError, ValidationError


# =============================================================================
# ENUMERATIONS
# =============================================================================

class BookingStatus(str, Enum):
    WAITING = 'WAITING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'


class BookingState(str, Enum):
    ALL = 'ALL'
    CURRENT = 'CURRENT'
    PAST = 'PAST'
    FUTURE = 'FUTURE'
    WAITING = 'WAITING'
    REJECTED = 'REJECTED'


# Status filters double as statuses; the rest are pure time filters
STATUS_FILTERS = {
    BookingState.WAITING: BookingStatus.WAITING,
    BookingState.REJECTED: BookingStatus.REJECTED,
}


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

VALID_TRANSITIONS = {
    BookingStatus.WAITING: {BookingStatus.APPROVED, BookingStatus.REJECTED},
    BookingStatus.APPROVED: set(),
    BookingStatus.REJECTED: set(),
}


def get_allowed_transitions(current_status: BookingStatus) -> set:
    """Statuses reachable from current_status (empty for terminal ones)."""
    return VALID_TRANSITIONS.get(BookingStatus(current_status), set())


def validate_status_transition(booking_id: int, current_status, new_status) -> None:
    """
    Validate a status change.

    Args:
        booking_id: Booking being changed (for the error message)
        current_status: Stored status
        new_status: Requested status

    Raises:
        InvalidStateError: If the booking is not WAITING
    """
    current_status = BookingStatus(current_status)
    if BookingStatus(new_status) not in get_allowed_transitions(current_status):
        raise InvalidStateError(booking_id, current_status.value)


def decision_status(approved: bool) -> BookingStatus:
    """Status an owner decision leads to."""
    return BookingStatus.APPROVED if approved else BookingStatus.REJECTED


# =============================================================================
# PARSING
# =============================================================================

def parse_booking_state(value) -> BookingState:
    """
    Parse a listing state filter, defaulting to ALL.

    Raises:
        ValidationError: If the value is not one of the six states
    """
    if value is None or value == '':
        return BookingState.ALL
    try:
        return BookingState(str(value).upper())
    except ValueError:
        raise ValidationError(f'Unknown state: {value}', field='state')


# =============================================================================
# TEMPORAL BUCKETING
# =============================================================================

def matches_state(booking, state: BookingState, now: datetime) -> bool:
    """
    Check whether a booking belongs to a listing state at instant now.

    Windows are half-open [start, end): a booking is CURRENT from its start
    up to, not including, its end, and PAST from its end on.

    Args:
        booking: Object with start, end and status attributes
        state: Listing state filter
        now: Evaluation instant, captured once per request

    Returns:
        bool
    """
    state = BookingState(state)

    if state == BookingState.ALL:
        return True
    if state == BookingState.CURRENT:
        return booking.start <= now < booking.end
    if state == BookingState.PAST:
        return booking.end <= now
    if state == BookingState.FUTURE:
        return booking.start > now
    return booking.status == STATUS_FILTERS[state]


def filter_bookings_by_state(bookings: list, state: BookingState, now: datetime) -> list:
    """
    Apply temporal bucketing to a booking set.

    Input order is preserved.
    """
    return [booking for booking in bookings if matches_state(booking, state, now)]


def classify_by_time(booking, now: datetime) -> BookingState:
    """Return the single time bucket (CURRENT, PAST or FUTURE) of a booking."""
    if booking.start > now:
        return BookingState.FUTURE
    if booking.end <= now:
        return BookingState.PAST
    return BookingState.CURRENT
