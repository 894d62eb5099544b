"""
Item and comment business logic.
Owner-only item updates, owner booking windows and the rule that only
finished renters may comment.
"""

import logging

from models.booking import (
    BookingStatus,
    get_approved_bookings_for_items,
    get_bookings_by_booker_and_item,
    get_booking_window,
)
from models.comment import (
    comment_to_dict,
    get_comment_by_id,
    get_comments_by_item,
    create_comment,
    update_comment_text,
    delete_comment,
)
from models.item import (
    item_to_dict,
    get_item_or_raise,
    get_items_by_owner,
    search_items,
    create_item,
    update_item,
)
from models.item_request import get_item_request_by_id
from models.user import get_user_or_raise
from utils.datetime_helpers import get_now, format_timestamp
from utils.exceptions import CommentNotAllowedError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


def _with_booking_window(item: dict, approved_bookings: list, now) -> dict:
    window = get_booking_window(approved_bookings, now)
    response = item_to_dict(item)
    response['lastBooking'] = format_timestamp(window['last_booking'])
    response['nextBooking'] = format_timestamp(window['next_booking'])
    return response


# =============================================================================
# ITEMS
# =============================================================================

def add_item(owner_id: int, name: str, description: str, available: bool,
             request_id: int = None) -> dict:
    """
    Create an item for an existing user.

    An unknown request_id is dropped and the item is stored unlinked.

    Raises:
        NotFoundError: If the owner does not exist
    """
    get_user_or_raise(owner_id)

    if request_id is not None and get_item_request_by_id(request_id) is None:
        request_id = None

    item = create_item(owner_id, name, description, available, request_id)
    logger.info(f"Item {item['id']} created by user {owner_id}")
    return item_to_dict(item)


def edit_item(item_id: int, owner_id: int, name: str = None,
              description: str = None, available: bool = None) -> dict:
    """
    Partially update an item owned by the caller.

    Raises:
        NotFoundError: If the item does not exist or is not owned by the caller
    """
    item = get_item_or_raise(item_id)
    if item['owner_id'] != owner_id:
        raise NotFoundError('Item', item_id, message=f'Item {item_id} not owned by user {owner_id}')

    updated = update_item(item_id, name=name, description=description, available=available)
    logger.info(f"Item {item_id} updated by owner {owner_id}")
    return item_to_dict(updated)


def get_item_view(item_id: int, viewer_id: int, now=None) -> dict:
    """
    Get one item with its comments.

    The owner additionally sees lastBooking and nextBooking, computed from
    APPROVED bookings relative to now.

    Args:
        item_id: Item ID
        viewer_id: Caller
        now: Evaluation instant (default: current local time)

    Returns:
        dict: Item JSON with comments (and booking window for the owner)
    """
    item = get_item_or_raise(item_id)
    if now is None:
        now = get_now()

    if item['owner_id'] == viewer_id:
        approved = get_approved_bookings_for_items([item_id]).get(item_id, [])
        response = _with_booking_window(item, approved, now)
    else:
        response = item_to_dict(item)
        response['lastBooking'] = None
        response['nextBooking'] = None

    response['comments'] = [comment_to_dict(c) for c in get_comments_by_item(item_id)]
    return response


def get_owner_items(owner_id: int, now=None) -> list:
    """
    List the caller's items, each with lastBooking and nextBooking.

    Raises:
        NotFoundError: If the user does not exist
    """
    get_user_or_raise(owner_id)
    if now is None:
        now = get_now()

    items = get_items_by_owner(owner_id)
    approved = get_approved_bookings_for_items([item['id'] for item in items])

    return [_with_booking_window(item, approved.get(item['id'], []), now) for item in items]


def find_items(text: str) -> list:
    """Search available items by text; blank text yields an empty list."""
    return [item_to_dict(item) for item in search_items(text)]


# =============================================================================
# COMMENTS
# =============================================================================

def add_comment(item_id: int, author_id: int, text: str, now=None) -> dict:
    """
    Comment on an item the author has rented.

    The author's APPROVED booking of the item with the earliest end must
    already be over. WAITING and REJECTED bookings never qualify, so a
    renter whose only booking was rejected cannot comment even after its
    end has passed.

    Raises:
        NotFoundError: If the user, item or such a booking does not exist
        CommentNotAllowedError: If that booking has not ended yet
    """
    get_user_or_raise(author_id)
    get_item_or_raise(item_id)
    if now is None:
        now = get_now()

    rentals = [
        booking for booking in get_bookings_by_booker_and_item(author_id, item_id)
        if booking.status == BookingStatus.APPROVED
    ]
    if not rentals:
        raise NotFoundError('Booking', message=f'No booking of item {item_id} by user {author_id}')

    if rentals[0].end > now:
        raise CommentNotAllowedError("Comment before booking's end", author_id, item_id)

    comment = create_comment(item_id, author_id, text)
    logger.info(f"Comment {comment['id']} added to item {item_id} by user {author_id}")
    return comment_to_dict(comment)


def _get_own_comment(item_id: int, comment_id: int, author_id: int) -> dict:
    comment = get_comment_by_id(comment_id)
    if comment is None:
        raise NotFoundError('Comment', comment_id)
    get_user_or_raise(author_id)
    get_item_or_raise(item_id)

    if comment['author_id'] != author_id:
        raise ForbiddenError('Forbidden to change comment not owned by user', author_id)

    if comment['item_id'] != item_id:
        raise NotFoundError('Comment', comment_id,
                            message=f'Comment {comment_id} not found for item {item_id}')
    return comment


def edit_comment(item_id: int, comment_id: int, author_id: int, text: str = None) -> dict:
    """
    Change the text of the caller's comment.

    Raises:
        NotFoundError: If the comment, user or item does not exist, or the
            comment belongs to another item
        ForbiddenError: If the caller is not the author
    """
    comment = _get_own_comment(item_id, comment_id, author_id)

    if text is not None:
        comment = update_comment_text(comment_id, text)
    return comment_to_dict(comment)


def remove_comment(item_id: int, comment_id: int, author_id: int) -> None:
    """
    Delete the caller's comment on an item.

    Raises:
        NotFoundError: If the comment, user or item does not exist, or the
            comment belongs to another item
        ForbiddenError: If the caller is not the author
    """
    _get_own_comment(item_id, comment_id, author_id)
    delete_comment(comment_id)
    logger.info(f"Comment {comment_id} on item {item_id} deleted by user {author_id}")
