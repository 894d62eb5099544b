"""
Booking availability checks and owner-facing booking windows.
Handles overlap detection against approved bookings and last/next booking
projection for items.
"""

from datetime import datetime

from database import get_db
from models.booking_state import BookingStatus
from utils.datetime_helpers import format_timestamp


# =============================================================================
# OVERLAP
# =============================================================================

def windows_overlap(start_1: datetime, end_1: datetime,
                    start_2: datetime, end_2: datetime) -> bool:
    """
    Check whether two half-open windows [start, end) share an instant.

    Back-to-back windows (end_1 == start_2) do not overlap.
    """
    return not (end_1 <= start_2 or start_1 >= end_2)


def exists_active_overlap(item_id: int, start: datetime, end: datetime,
                          exclude_booking_id: int = None, cursor=None) -> bool:
    """
    Check whether an APPROVED booking of the item overlaps [start, end).

    Must run inside the same transaction as the write it guards.

    Args:
        item_id: Item to check
        start: Candidate window start
        end: Candidate window end
        exclude_booking_id: Booking to ignore (when re-checking an existing one)
        cursor: Active transaction cursor (optional)

    Returns:
        bool: True if a conflicting approved booking exists
    """
    cur = cursor or get_db().cursor()

    query = '''
        SELECT 1 FROM bookings
        WHERE item_id = ?
          AND status = ?
          AND NOT (end_date <= ? OR start_date >= ?)
    '''
    params = [item_id, BookingStatus.APPROVED.value, format_timestamp(start), format_timestamp(end)]

    if exclude_booking_id:
        query += ' AND id != ?'
        params.append(exclude_booking_id)

    query += ' LIMIT 1'

    cur.execute(query, params)
    return cur.fetchone() is not None


# =============================================================================
# OWNER AUGMENTATION
# =============================================================================

def get_booking_window(approved_bookings: list, now: datetime) -> dict:
    """
    Project last and next rental times from an item's APPROVED bookings.

    Args:
        approved_bookings: APPROVED Booking objects of one item
        now: Evaluation instant

    Returns:
        dict: {'last_booking': latest end before now or None,
               'next_booking': earliest start after now or None}
    """
    ended = [booking.end for booking in approved_bookings if booking.end < now]
    upcoming = [booking.start for booking in approved_bookings if booking.start > now]

    return {
        'last_booking': max(ended) if ended else None,
        'next_booking': min(upcoming) if upcoming else None
    }
