"""
Booking API routes.
Booking creation, owner decision, single lookup and state-filtered listings.

All routes act on behalf of the caller identified by the user id header.
"""

from flask import Blueprint, request
from flask_login import login_required, current_user

from blueprints.bookings.services import (
    create_booking,
    approve_booking,
    get_booking_for_user,
    get_bookings_by_booker_and_state,
    get_bookings_by_owner_and_state,
)
from models.booking import parse_booking_state
from utils.api_response import api_success
from utils.validators import (
    get_json_body,
    parse_positive_int,
    parse_bool,
    parse_booking_window,
)

bookings_bp = Blueprint('bookings', __name__)


@bookings_bp.route('', methods=['POST'])
@login_required
def create():
    """
    Create a booking request.

    Request body:
        itemId: Item to book
        start: ISO-8601 window start
        end: ISO-8601 window end

    Returns:
        201 with the WAITING booking
    """
    data = get_json_body(request)
    item_id = parse_positive_int(data.get('itemId'), 'itemId')
    start, end = parse_booking_window(data.get('start'), data.get('end'))

    booking = create_booking(current_user.id, item_id, start, end)
    return api_success(data=booking.to_dict(), status=201)


@bookings_bp.route('/<int:booking_id>', methods=['PATCH'])
@login_required
def decide(booking_id):
    """
    Approve or reject a booking of one of the caller's items.

    Query params:
        approved: true to approve, false to reject
    """
    approved = parse_bool(request.args.get('approved'), 'approved')
    booking = approve_booking(booking_id, current_user.id, approved)
    return api_success(data=booking.to_dict())


@bookings_bp.route('/<int:booking_id>', methods=['GET'])
@login_required
def detail(booking_id):
    """Get a booking visible to its booker or the item owner."""
    booking = get_booking_for_user(booking_id, current_user.id)
    return api_success(data=booking.to_dict())


@bookings_bp.route('', methods=['GET'])
@login_required
def list_booked():
    """
    List the caller's bookings.

    Query params:
        state: ALL, CURRENT, PAST, FUTURE, WAITING or REJECTED (default ALL)
    """
    state = parse_booking_state(request.args.get('state'))
    bookings = get_bookings_by_booker_and_state(current_user.id, state)
    return api_success(data=[booking.to_dict() for booking in bookings])


@bookings_bp.route('/owner', methods=['GET'])
@login_required
def list_owned():
    """
    List bookings of the caller's items.

    Query params:
        state: ALL, CURRENT, PAST, FUTURE, WAITING or REJECTED (default ALL)
    """
    state = parse_booking_state(request.args.get('state'))
    bookings = get_bookings_by_owner_and_state(current_user.id, state)
    return api_success(data=[booking.to_dict() for booking in bookings])
