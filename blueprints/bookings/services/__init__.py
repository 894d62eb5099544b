"""Booking services package."""

from blueprints.bookings.services.booking_service import (  # noqa: F401
    create_booking,
    approve_booking,
    get_booking_for_user,
    get_bookings_by_booker_and_state,
    get_bookings_by_owner_and_state,
    remove_booking,
    clear_all_bookings,
)
