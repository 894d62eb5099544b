"""
Tests for item services: owner booking windows, search and comments.
"""

import pytest
from datetime import datetime, timedelta

from blueprints.items.services.item_service import (
    add_item,
    edit_item,
    get_item_view,
    get_owner_items,
    find_items,
    add_comment,
    edit_comment,
    remove_comment,
)
from models.booking import BookingStatus
from models.item_request import create_item_request, get_item_request_with_items
from utils.exceptions import CommentNotAllowedError, ForbiddenError, NotFoundError

DAY = timedelta(days=1)
NOW = datetime(2025, 6, 15, 12, 0, 0)


class TestItems:
    """Item creation and owner-only updates."""

    def test_add_item_links_request(self, app, sharing):
        item_request = create_item_request(sharing['booker']['id'], 'Need a ladder')
        item = add_item(sharing['owner']['id'], 'Ladder', '3m ladder', True, item_request['id'])

        assert item['requestId'] == item_request['id']
        answered = get_item_request_with_items(item_request['id'])
        assert answered['items'] == [
            {'id': item['id'], 'name': 'Ladder', 'ownerId': sharing['owner']['id']}
        ]

    def test_unknown_request_is_dropped(self, app, sharing):
        item = add_item(sharing['owner']['id'], 'Ladder', '3m ladder', True, 777)
        assert item['requestId'] is None

    def test_add_item_unknown_owner(self, app):
        with pytest.raises(NotFoundError):
            add_item(999, 'Ladder', '3m ladder', True)

    def test_partial_update(self, app, sharing):
        item = edit_item(sharing['item']['id'], sharing['owner']['id'], available=False)

        assert item['available'] is False
        assert item['name'] == sharing['item']['name']

    def test_non_owner_update_is_not_found(self, app, sharing):
        with pytest.raises(NotFoundError):
            edit_item(sharing['item']['id'], sharing['booker']['id'], name='Mine now')

    def test_search(self, app, sharing, make_item):
        make_item(sharing['owner']['id'], name='Hidden drill', available=False)

        found = find_items('DRILL')
        assert [item['id'] for item in found] == [sharing['item']['id']]
        assert find_items('   ') == []


class TestOwnerBookingWindow:
    """lastBooking and nextBooking are shown to the owner only."""

    @pytest.fixture
    def rentals(self, sharing, make_booking):
        item_id = sharing['item']['id']
        booker_id = sharing['booker']['id']
        make_booking(item_id, booker_id, NOW - 4 * DAY, NOW - 3 * DAY, BookingStatus.APPROVED)
        make_booking(item_id, booker_id, NOW + 2 * DAY, NOW + 3 * DAY, BookingStatus.APPROVED)
        make_booking(item_id, booker_id, NOW + DAY, NOW + 2 * DAY, BookingStatus.WAITING)

    def test_owner_view(self, sharing, rentals):
        view = get_item_view(sharing['item']['id'], sharing['owner']['id'], now=NOW)

        assert view['lastBooking'] == '2025-06-12T12:00:00'
        assert view['nextBooking'] == '2025-06-17T12:00:00'
        assert view['comments'] == []

    def test_other_viewer(self, sharing, rentals):
        view = get_item_view(sharing['item']['id'], sharing['booker']['id'], now=NOW)

        assert view['lastBooking'] is None
        assert view['nextBooking'] is None

    def test_owner_listing(self, sharing, rentals, make_item):
        spare = make_item(sharing['owner']['id'], name='Saw')

        items = get_owner_items(sharing['owner']['id'], now=NOW)

        assert [item['id'] for item in items] == [sharing['item']['id'], spare['id']]
        assert items[0]['nextBooking'] == '2025-06-17T12:00:00'
        assert items[1]['lastBooking'] is None
        assert 'comments' not in items[0]


class TestComments:
    """Only finished renters may comment."""

    def test_comment_after_rental(self, app, sharing, make_booking):
        make_booking(sharing['item']['id'], sharing['booker']['id'],
                     NOW - 3 * DAY, NOW - DAY, BookingStatus.APPROVED)

        comment = add_comment(sharing['item']['id'], sharing['booker']['id'], 'Great drill', now=NOW)

        assert comment['text'] == 'Great drill'
        assert comment['authorName'] == 'Booker'
        view = get_item_view(sharing['item']['id'], sharing['owner']['id'], now=NOW)
        assert [c['id'] for c in view['comments']] == [comment['id']]

    def test_comment_during_rental(self, app, sharing, make_booking):
        make_booking(sharing['item']['id'], sharing['booker']['id'],
                     NOW - DAY, NOW + DAY, BookingStatus.APPROVED)

        with pytest.raises(CommentNotAllowedError):
            add_comment(sharing['item']['id'], sharing['booker']['id'], 'Too early', now=NOW)

    def test_comment_without_rental(self, app, sharing, make_booking):
        make_booking(sharing['item']['id'], sharing['booker']['id'],
                     NOW - 3 * DAY, NOW - DAY, BookingStatus.REJECTED)

        with pytest.raises(NotFoundError):
            add_comment(sharing['item']['id'], sharing['booker']['id'], 'Never had it', now=NOW)

    @pytest.fixture
    def comment(self, sharing, make_booking):
        make_booking(sharing['item']['id'], sharing['booker']['id'],
                     NOW - 3 * DAY, NOW - DAY, BookingStatus.APPROVED)
        return add_comment(sharing['item']['id'], sharing['booker']['id'], 'Fine', now=NOW)

    def test_author_edits(self, sharing, comment):
        updated = edit_comment(sharing['item']['id'], comment['id'], sharing['booker']['id'], 'Better')
        assert updated['text'] == 'Better'

    def test_other_user_cannot_edit(self, sharing, comment):
        with pytest.raises(ForbiddenError):
            edit_comment(sharing['item']['id'], comment['id'], sharing['owner']['id'], 'Nope')

    def test_comment_of_other_item(self, sharing, comment, make_item):
        other = make_item(sharing['owner']['id'], name='Saw')
        with pytest.raises(NotFoundError):
            edit_comment(other['id'], comment['id'], sharing['booker']['id'], 'Moved')

    def test_delete(self, sharing, comment):
        remove_comment(sharing['item']['id'], comment['id'], sharing['booker']['id'])
        with pytest.raises(NotFoundError):
            remove_comment(sharing['item']['id'], comment['id'], sharing['booker']['id'])

    def test_other_user_cannot_delete(self, sharing, comment):
        with pytest.raises(ForbiddenError):
            remove_comment(sharing['item']['id'], comment['id'], sharing['owner']['id'])

        view = get_item_view(sharing['item']['id'], sharing['owner']['id'], now=NOW)
        assert [c['id'] for c in view['comments']] == [comment['id']]

    def test_delete_through_other_item(self, sharing, comment, make_item):
        other = make_item(sharing['owner']['id'], name='Saw')
        with pytest.raises(NotFoundError):
            remove_comment(other['id'], comment['id'], sharing['booker']['id'])

        view = get_item_view(sharing['item']['id'], sharing['owner']['id'], now=NOW)
        assert len(view['comments']) == 1
