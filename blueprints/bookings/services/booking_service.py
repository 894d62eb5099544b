"""
Booking lifecycle service.
Orchestrates booking creation, owner decisions, access checks and
state-filtered listings on top of the booking record store.

Writes run inside BEGIN IMMEDIATE transactions so that the availability
check and the write it guards see the same committed state.
"""

import logging
import sqlite3

from database import get_db, begin_immediate
from models.booking import (
    BookingState,
    BookingStatus,
    decision_status,
    validate_status_transition,
    filter_bookings_by_state,
    exists_active_overlap,
    get_booking_by_id,
    get_bookings_by_booker,
    get_bookings_by_owner,
    booker_has_bookings,
    owner_has_bookings,
    insert_booking,
    update_booking_status,
    delete_booking,
    clear_bookings,
)
from models.booking_state import STATUS_FILTERS
from models.item import get_item_or_raise
from models.user import get_user_or_raise, user_exists
from utils.datetime_helpers import get_now
from utils.exceptions import (
    ForbiddenError,
    InvalidStateError,
    ItemUnavailableError,
    NoBookingsError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

OVERLAP_TRIGGER_MESSAGE = 'approved_overlap'


# =============================================================================
# CREATE
# =============================================================================

def create_booking(booker_id: int, item_id: int, start, end):
    """
    Create a WAITING booking for an item.

    Checks, in order:
    1. Booker and item exist
    2. Booker does not own the item
    3. Item is flagged available
    4. No APPROVED booking of the item overlaps [start, end)

    Args:
        booker_id: Requesting user (trusted caller id)
        item_id: Item to book
        start: Window start (naive local datetime)
        end: Window end (naive local datetime), after start

    Returns:
        Booking: The stored booking

    Raises:
        NotFoundError: If the booker or item does not exist
        ForbiddenError: If the booker owns the item
        ItemUnavailableError: If the item is unavailable or already booked
    """
    db = get_db()

    try:
        cursor = begin_immediate(db)

        get_user_or_raise(booker_id)
        item = get_item_or_raise(item_id)

        if item['owner_id'] == booker_id:
            raise ForbiddenError('Owner cannot book their own item', booker_id)

        if not item['available']:
            raise ItemUnavailableError(item_id, 'Item is not available')

        if exists_active_overlap(item_id, start, end, cursor=cursor):
            raise ItemUnavailableError(item_id, 'Item already booked for this period')

        booking_id = insert_booking(cursor, item_id, booker_id, start, end)
        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(f"Booking {booking_id} created for item {item_id} by user {booker_id}")
    return get_booking_by_id(booking_id)


# =============================================================================
# OWNER DECISION
# =============================================================================

def approve_booking(booking_id: int, owner_id: int, approved: bool):
    """
    Approve or reject a WAITING booking.

    Only the owner of the booked item may decide, and only once: any later
    call fails with InvalidStateError, which callers should read as
    "already decided".

    Args:
        booking_id: Booking to decide
        owner_id: Caller claiming ownership of the item
        approved: True to approve, False to reject

    Returns:
        Booking: The updated booking

    Raises:
        NotFoundError: If the booking does not exist
        ForbiddenError: If the caller does not own the item
        InvalidStateError: If the booking is no longer WAITING
        ItemUnavailableError: If approving would overlap an APPROVED booking
    """
    db = get_db()
    new_status = decision_status(approved)

    try:
        cursor = begin_immediate(db)

        booking = get_booking_by_id(booking_id, cursor=cursor)
        if booking is None:
            raise NotFoundError('Booking', booking_id)

        if booking.owner_id != owner_id:
            raise ForbiddenError('Forbidden to change booking for item not owned by user', owner_id)

        validate_status_transition(booking.id, booking.status, new_status)

        if new_status == BookingStatus.APPROVED and exists_active_overlap(
                booking.item_id, booking.start, booking.end,
                exclude_booking_id=booking.id, cursor=cursor):
            raise ItemUnavailableError(booking.item_id, 'Item already booked for this period')

        if not update_booking_status(cursor, booking.id, new_status,
                                     expected_status=BookingStatus.WAITING):
            current = get_booking_by_id(booking.id, cursor=cursor)
            raise InvalidStateError(booking.id, current.status.value)

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        if OVERLAP_TRIGGER_MESSAGE in str(e):
            raise ItemUnavailableError(booking.item_id, 'Item already booked for this period')
        raise

    except Exception:
        db.rollback()
        raise

    logger.info(f"Booking {booking_id} {new_status.value.lower()} by owner {owner_id}")
    return get_booking_by_id(booking_id)


# =============================================================================
# READ
# =============================================================================

def get_booking_for_user(booking_id: int, requester_id: int):
    """
    Get a booking visible to the requester.

    Args:
        booking_id: Booking ID
        requester_id: Caller; must be the booker or the item owner

    Returns:
        Booking

    Raises:
        NotFoundError: If the booking does not exist
        ForbiddenError: If the caller is neither booker nor owner
    """
    booking = get_booking_by_id(booking_id)
    if booking is None:
        raise NotFoundError('Booking', booking_id)

    if not booking.is_related_to(requester_id):
        raise ForbiddenError(f'No access to booking {booking_id}', requester_id)

    return booking


def _list_for_user(user_id: int, state, now, has_bookings, fetch) -> list:
    state = BookingState(state)

    if not user_exists(user_id):
        raise NotFoundError('User', user_id)

    # "No bookings at all" is reported before any filtering
    if not has_bookings(user_id):
        raise NoBookingsError(user_id)

    if now is None:
        now = get_now()

    bookings = fetch(user_id, status=STATUS_FILTERS.get(state))
    return filter_bookings_by_state(bookings, state, now)


def get_bookings_by_booker_and_state(booker_id: int, state=BookingState.ALL, now=None) -> list:
    """
    List bookings made by a user, filtered by listing state.

    Args:
        booker_id: Booker user ID
        state: BookingState filter (default ALL)
        now: Evaluation instant (default: current local time)

    Returns:
        list: Booking objects ordered by start descending (may be empty)

    Raises:
        NotFoundError: If the user does not exist
        NoBookingsError: If the user never booked anything
    """
    return _list_for_user(booker_id, state, now, booker_has_bookings, get_bookings_by_booker)


def get_bookings_by_owner_and_state(owner_id: int, state=BookingState.ALL, now=None) -> list:
    """
    List bookings of a user's items, filtered by listing state.

    Args:
        owner_id: Item owner user ID
        state: BookingState filter (default ALL)
        now: Evaluation instant (default: current local time)

    Returns:
        list: Booking objects ordered by start descending (may be empty)

    Raises:
        NotFoundError: If the user does not exist
        NoBookingsError: If none of the user's items was ever booked
    """
    return _list_for_user(owner_id, state, now, owner_has_bookings, get_bookings_by_owner)


# =============================================================================
# ADMINISTRATION
# =============================================================================

def remove_booking(booking_id: int) -> None:
    """Delete one booking (administrative)."""
    if not delete_booking(booking_id):
        raise NotFoundError('Booking', booking_id)
    logger.info(f"Booking {booking_id} deleted")


def clear_all_bookings() -> int:
    """Delete every booking (administrative bulk reset)."""
    deleted = clear_bookings()
    logger.info(f"Cleared {deleted} bookings")
    return deleted
