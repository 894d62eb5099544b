"""
Booking record store.
Handles persistence and booker/owner/item scoped retrieval of bookings.

Functions that take a ``cursor`` argument run inside the caller's open
transaction when one is given.
"""

from database import get_db
from models.booking_entity import Booking
from models.booking_state import BookingStatus
from utils.datetime_helpers import format_timestamp


BOOKING_SELECT = '''
    SELECT b.id, b.start_date, b.end_date, b.status,
           b.item_id, b.booker_id,
           i.name as item_name, i.available as item_available,
           i.owner_id,
           u.name as booker_name, u.email as booker_email
    FROM bookings b
    JOIN items i ON b.item_id = i.id
    JOIN users u ON b.booker_id = u.id
'''


def _fetch_bookings(where: str, params: list, order_by: str = 'b.start_date DESC, b.id DESC',
                    cursor=None) -> list:
    cur = cursor or get_db().cursor()
    cur.execute(f'{BOOKING_SELECT} WHERE {where} ORDER BY {order_by}', params)
    return [Booking(dict(row)) for row in cur.fetchall()]


def _status_clause(where: str, params: list, status) -> tuple:
    if status is not None:
        where += ' AND b.status = ?'
        params.append(BookingStatus(status).value)
    return where, params


# =============================================================================
# READ
# =============================================================================

def get_booking_by_id(booking_id: int, cursor=None) -> Booking:
    """
    Get booking with its item and booker.

    Args:
        booking_id: Booking ID
        cursor: Active transaction cursor (optional)

    Returns:
        Booking or None if not found
    """
    bookings = _fetch_bookings('b.id = ?', [booking_id], cursor=cursor)
    return bookings[0] if bookings else None


def get_bookings_by_booker(booker_id: int, status: BookingStatus = None) -> list:
    """
    Get bookings made by a user, newest start first.

    Args:
        booker_id: Booker user ID
        status: Only bookings in this status (optional)

    Returns:
        list: Booking objects ordered by start descending
    """
    where, params = _status_clause('b.booker_id = ?', [booker_id], status)
    return _fetch_bookings(where, params)


def get_bookings_by_owner(owner_id: int, status: BookingStatus = None) -> list:
    """
    Get bookings of all items owned by a user, newest start first.

    Args:
        owner_id: Item owner user ID
        status: Only bookings in this status (optional)

    Returns:
        list: Booking objects ordered by start descending
    """
    where, params = _status_clause('i.owner_id = ?', [owner_id], status)
    return _fetch_bookings(where, params)


def get_approved_bookings_for_items(item_ids: list) -> dict:
    """
    Get APPROVED bookings of several items at once.

    Args:
        item_ids: List of item IDs

    Returns:
        dict: {item_id: [Booking, ...]} (items without bookings are absent)
    """
    if not item_ids:
        return {}

    placeholders = ','.join('?' * len(item_ids))
    where = f'b.item_id IN ({placeholders}) AND b.status = ?'
    params = list(item_ids) + [BookingStatus.APPROVED.value]

    grouped = {}
    for booking in _fetch_bookings(where, params, order_by='b.start_date'):
        grouped.setdefault(booking.item_id, []).append(booking)
    return grouped


def get_bookings_by_booker_and_item(booker_id: int, item_id: int) -> list:
    """Get a user's bookings of one item, earliest end first."""
    return _fetch_bookings('b.booker_id = ? AND b.item_id = ?', [booker_id, item_id],
                           order_by='b.end_date, b.id')


def booker_has_bookings(booker_id: int) -> bool:
    """Check whether a user ever made a booking."""
    cursor = get_db().cursor()
    cursor.execute('SELECT 1 FROM bookings WHERE booker_id = ? LIMIT 1', (booker_id,))
    return cursor.fetchone() is not None


def owner_has_bookings(owner_id: int) -> bool:
    """Check whether any item of a user was ever booked."""
    cursor = get_db().cursor()
    cursor.execute('''
        SELECT 1 FROM bookings b
        JOIN items i ON b.item_id = i.id
        WHERE i.owner_id = ?
        LIMIT 1
    ''', (owner_id,))
    return cursor.fetchone() is not None


# =============================================================================
# WRITE
# =============================================================================

def insert_booking(cursor, item_id: int, booker_id: int, start, end,
                   status: BookingStatus = BookingStatus.WAITING) -> int:
    """
    Insert a booking row inside the caller's transaction.

    Args:
        cursor: Active transaction cursor
        item_id: Booked item
        booker_id: Booking user
        start: Window start (datetime)
        end: Window end (datetime)
        status: Initial status (default WAITING)

    Returns:
        int: New booking ID
    """
    cursor.execute('''
        INSERT INTO bookings (start_date, end_date, item_id, booker_id, status)
        VALUES (?, ?, ?, ?, ?)
    ''', (format_timestamp(start), format_timestamp(end), item_id, booker_id,
          BookingStatus(status).value))
    return cursor.lastrowid


def update_booking_status(cursor, booking_id: int, new_status: BookingStatus,
                          expected_status: BookingStatus) -> bool:
    """
    Compare-and-set the status of a booking.

    The row changes only if it still holds expected_status.

    Returns:
        bool: True if the row was updated
    """
    cursor.execute('''
        UPDATE bookings SET status = ?
        WHERE id = ? AND status = ?
    ''', (BookingStatus(new_status).value, booking_id, BookingStatus(expected_status).value))
    return cursor.rowcount == 1


def delete_booking(booking_id: int) -> bool:
    """Delete one booking. Returns True if a row was deleted."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM bookings WHERE id = ?', (booking_id,))
    db.commit()
    return cursor.rowcount > 0


def clear_bookings() -> int:
    """
    Delete every booking (administrative bulk reset).

    Returns:
        int: Number of deleted bookings
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM bookings')
    db.commit()
    return cursor.rowcount
