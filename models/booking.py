"""
Booking data access functions.

This module re-exports the booking model split across:
- booking_state.py: Status/listing enumerations, transitions, bucketing
- booking_entity.py: The Booking entity
- booking_queries.py: Record store (read/write)
- booking_availability.py: Overlap checks and last/next booking windows
"""

# State management
from .booking_state import (
    BookingStatus,
    BookingState,
    VALID_TRANSITIONS,
    get_allowed_transitions,
    validate_status_transition,
    decision_status,
    parse_booking_state,
    matches_state,
    filter_bookings_by_state,
    classify_by_time,
)

# Entity
from .booking_entity import Booking

# Record store
from .booking_queries import (
    get_booking_by_id,
    get_bookings_by_booker,
    get_bookings_by_owner,
    get_approved_bookings_for_items,
    get_bookings_by_booker_and_item,
    booker_has_bookings,
    owner_has_bookings,
    insert_booking,
    update_booking_status,
    delete_booking,
    clear_bookings,
)

# Availability
from .booking_availability import (
    windows_overlap,
    exists_active_overlap,
    get_booking_window,
)

__all__ = [
    # State management
    'BookingStatus',
    'BookingState',
    'VALID_TRANSITIONS',
    'get_allowed_transitions',
    'validate_status_transition',
    'decision_status',
    'parse_booking_state',
    'matches_state',
    'filter_bookings_by_state',
    'classify_by_time',

    # Entity
    'Booking',

    # Record store
    'get_booking_by_id',
    'get_bookings_by_booker',
    'get_bookings_by_owner',
    'get_approved_bookings_for_items',
    'get_bookings_by_booker_and_item',
    'booker_has_bookings',
    'owner_has_bookings',
    'insert_booking',
    'update_booking_status',
    'delete_booking',
    'clear_bookings',

    # Availability
    'windows_overlap',
    'exists_active_overlap',
    'get_booking_window',
]
