"""
Tests for the booking lifecycle service.
"""

import threading

import pytest
from datetime import datetime, timedelta

from blueprints.bookings.services import (
    create_booking,
    approve_booking,
    get_booking_for_user,
    get_bookings_by_booker_and_state,
    get_bookings_by_owner_and_state,
    remove_booking,
    clear_all_bookings,
)
from models.booking import (
    BookingState,
    BookingStatus,
    get_approved_bookings_for_items,
    get_booking_by_id,
)
from utils.exceptions import (
    ForbiddenError,
    InvalidStateError,
    ItemUnavailableError,
    NoBookingsError,
    NotFoundError,
)

DAY = timedelta(days=1)
NOW = datetime(2025, 6, 15, 12, 0, 0)


class TestCreateBooking:
    """Booking creation rules."""

    def test_creates_waiting_booking(self, app, sharing):
        booking = create_booking(sharing['booker']['id'], sharing['item']['id'],
                                 NOW + DAY, NOW + 2 * DAY)

        assert booking.id is not None
        assert booking.status == BookingStatus.WAITING
        assert booking.booker_id == sharing['booker']['id']
        assert booking.owner_id == sharing['owner']['id']
        assert booking.start == NOW + DAY

    def test_unknown_booker(self, app, sharing):
        with pytest.raises(NotFoundError) as exc_info:
            create_booking(999, sharing['item']['id'], NOW + DAY, NOW + 2 * DAY)
        assert exc_info.value.entity_name == 'User'

    def test_unknown_item(self, app, sharing):
        with pytest.raises(NotFoundError) as exc_info:
            create_booking(sharing['booker']['id'], 999, NOW + DAY, NOW + 2 * DAY)
        assert exc_info.value.entity_name == 'Item'

    def test_self_booking_forbidden(self, app, sharing):
        with pytest.raises(ForbiddenError):
            create_booking(sharing['owner']['id'], sharing['item']['id'],
                           NOW + DAY, NOW + 2 * DAY)

    def test_unavailable_item(self, app, sharing, make_item):
        item = make_item(sharing['owner']['id'], name='Ladder', available=False)

        with pytest.raises(ItemUnavailableError) as exc_info:
            create_booking(sharing['booker']['id'], item['id'], NOW + DAY, NOW + 2 * DAY)
        assert exc_info.value.item_id == item['id']

    def test_overlap_with_approved_rejected(self, app, sharing, make_user, make_booking):
        item_id = sharing['item']['id']
        make_booking(item_id, sharing['booker']['id'], NOW + DAY, NOW + 3 * DAY,
                     BookingStatus.APPROVED)
        other = make_user()

        with pytest.raises(ItemUnavailableError):
            create_booking(other['id'], item_id, NOW + 2 * DAY, NOW + 4 * DAY)

    def test_back_to_back_allowed(self, app, sharing, make_user, make_booking):
        item_id = sharing['item']['id']
        make_booking(item_id, sharing['booker']['id'], NOW + DAY, NOW + 3 * DAY,
                     BookingStatus.APPROVED)
        other = make_user()

        booking = create_booking(other['id'], item_id, NOW + 3 * DAY, NOW + 4 * DAY)
        assert booking.status == BookingStatus.WAITING

    def test_overlapping_waiting_requests_coexist(self, app, sharing, make_user):
        item_id = sharing['item']['id']
        first = create_booking(sharing['booker']['id'], item_id, NOW + DAY, NOW + 3 * DAY)
        second = create_booking(make_user()['id'], item_id, NOW + 2 * DAY, NOW + 4 * DAY)

        assert first.id != second.id

    def test_failed_create_leaves_no_row(self, app, sharing):
        from database import get_db

        with pytest.raises(ForbiddenError):
            create_booking(sharing['owner']['id'], sharing['item']['id'],
                           NOW + DAY, NOW + 2 * DAY)

        count = get_db().execute('SELECT COUNT(*) FROM bookings').fetchone()[0]
        assert count == 0


class TestApproveBooking:
    """Owner decisions."""

    @pytest.fixture
    def waiting(self, app, sharing):
        return create_booking(sharing['booker']['id'], sharing['item']['id'],
                              NOW + DAY, NOW + 2 * DAY)

    def test_approve(self, sharing, waiting):
        booking = approve_booking(waiting.id, sharing['owner']['id'], True)
        assert booking.status == BookingStatus.APPROVED

    def test_reject(self, sharing, waiting):
        booking = approve_booking(waiting.id, sharing['owner']['id'], False)
        assert booking.status == BookingStatus.REJECTED

    def test_unknown_booking(self, app, sharing):
        with pytest.raises(NotFoundError):
            approve_booking(999, sharing['owner']['id'], True)

    def test_booker_cannot_decide(self, sharing, waiting):
        with pytest.raises(ForbiddenError):
            approve_booking(waiting.id, sharing['booker']['id'], True)
        assert get_booking_by_id(waiting.id).status == BookingStatus.WAITING

    @pytest.mark.parametrize('first,second', [
        (True, True), (True, False), (False, True), (False, False),
    ])
    def test_no_double_decision(self, sharing, waiting, first, second):
        decided = approve_booking(waiting.id, sharing['owner']['id'], first)

        with pytest.raises(InvalidStateError):
            approve_booking(waiting.id, sharing['owner']['id'], second)

        assert get_booking_by_id(waiting.id).status == decided.status

    def test_approving_colliding_request_fails(self, sharing, waiting, make_user):
        owner_id = sharing['owner']['id']
        rival = create_booking(make_user()['id'], sharing['item']['id'],
                               NOW + DAY + timedelta(hours=6), NOW + 3 * DAY)

        approve_booking(waiting.id, owner_id, True)

        with pytest.raises(ItemUnavailableError):
            approve_booking(rival.id, owner_id, True)
        assert get_booking_by_id(rival.id).status == BookingStatus.WAITING

        rejected = approve_booking(rival.id, owner_id, False)
        assert rejected.status == BookingStatus.REJECTED


class TestGetBooking:
    """Single booking visibility."""

    def test_booker_and_owner_can_read(self, app, sharing):
        booking = create_booking(sharing['booker']['id'], sharing['item']['id'],
                                 NOW + DAY, NOW + 2 * DAY)

        assert get_booking_for_user(booking.id, sharing['booker']['id']) == booking
        assert get_booking_for_user(booking.id, sharing['owner']['id']) == booking

    def test_stranger_forbidden(self, app, sharing, make_user):
        booking = create_booking(sharing['booker']['id'], sharing['item']['id'],
                                 NOW + DAY, NOW + 2 * DAY)

        with pytest.raises(ForbiddenError):
            get_booking_for_user(booking.id, make_user()['id'])

    def test_missing(self, app, sharing):
        with pytest.raises(NotFoundError):
            get_booking_for_user(42, sharing['booker']['id'])


class TestListBookings:
    """State-filtered listings for bookers and owners."""

    @pytest.fixture
    def history(self, app, sharing, make_booking):
        """One booking in every bucket for the same booker and item."""
        item_id = sharing['item']['id']
        booker_id = sharing['booker']['id']
        return {
            'past': make_booking(item_id, booker_id, NOW - 5 * DAY, NOW - 4 * DAY,
                                 BookingStatus.APPROVED),
            'current': make_booking(item_id, booker_id, NOW - DAY, NOW + DAY,
                                    BookingStatus.APPROVED),
            'future': make_booking(item_id, booker_id, NOW + 4 * DAY, NOW + 5 * DAY,
                                   BookingStatus.WAITING),
            'rejected': make_booking(item_id, booker_id, NOW + 10 * DAY, NOW + 11 * DAY,
                                     BookingStatus.REJECTED),
        }

    def test_all_ordered_by_start_desc(self, sharing, history):
        bookings = get_bookings_by_booker_and_state(sharing['booker']['id'], BookingState.ALL, NOW)

        assert [b.id for b in bookings] == [
            history['rejected'].id, history['future'].id,
            history['current'].id, history['past'].id,
        ]

    @pytest.mark.parametrize('state,expected', [
        (BookingState.CURRENT, ['current']),
        (BookingState.PAST, ['past']),
        (BookingState.FUTURE, ['rejected', 'future']),
        (BookingState.WAITING, ['future']),
        (BookingState.REJECTED, ['rejected']),
    ])
    def test_booker_buckets(self, sharing, history, state, expected):
        bookings = get_bookings_by_booker_and_state(sharing['booker']['id'], state, NOW)
        assert [b.id for b in bookings] == [history[key].id for key in expected]

    def test_owner_sees_same_bookings(self, sharing, history):
        bookings = get_bookings_by_owner_and_state(sharing['owner']['id'], BookingState.CURRENT, NOW)
        assert bookings == [history['current']]

    def test_time_buckets_partition_all(self, sharing, history):
        booker_id = sharing['booker']['id']
        everything = get_bookings_by_booker_and_state(booker_id, BookingState.ALL, NOW)

        buckets = [
            set(get_bookings_by_booker_and_state(booker_id, state, NOW))
            for state in (BookingState.CURRENT, BookingState.PAST, BookingState.FUTURE)
        ]
        assert set().union(*buckets) == set(everything)
        assert sum(len(bucket) for bucket in buckets) == len(everything)

    def test_approve_then_list(self, app, sharing):
        booking = create_booking(sharing['booker']['id'], sharing['item']['id'],
                                 NOW + DAY, NOW + 2 * DAY)
        approve_booking(booking.id, sharing['owner']['id'], True)

        future = get_bookings_by_booker_and_state(sharing['booker']['id'], BookingState.FUTURE, NOW)
        waiting = get_bookings_by_booker_and_state(sharing['booker']['id'], BookingState.WAITING, NOW)

        assert [b.id for b in future] == [booking.id]
        assert future[0].status == BookingStatus.APPROVED
        assert waiting == []

    def test_empty_versus_none(self, app, sharing, make_booking):
        booker_id = sharing['booker']['id']

        with pytest.raises(NoBookingsError):
            get_bookings_by_booker_and_state(booker_id, BookingState.ALL, NOW)

        make_booking(sharing['item']['id'], booker_id, NOW - 3 * DAY, NOW - 2 * DAY,
                     BookingStatus.APPROVED)

        assert get_bookings_by_booker_and_state(booker_id, BookingState.FUTURE, NOW) == []

    def test_owner_without_bookings(self, app, sharing):
        with pytest.raises(NoBookingsError):
            get_bookings_by_owner_and_state(sharing['owner']['id'], BookingState.ALL, NOW)

    def test_unknown_user(self, app):
        with pytest.raises(NotFoundError):
            get_bookings_by_booker_and_state(404, BookingState.ALL, NOW)
        with pytest.raises(NotFoundError):
            get_bookings_by_owner_and_state(404, BookingState.ALL, NOW)


class TestAdministration:
    """Delete and bulk reset."""

    def test_delete_and_clear(self, app, sharing, make_booking):
        item_id = sharing['item']['id']
        booker_id = sharing['booker']['id']
        first = make_booking(item_id, booker_id, NOW + DAY, NOW + 2 * DAY)
        make_booking(item_id, booker_id, NOW + 3 * DAY, NOW + 4 * DAY)

        remove_booking(first.id)
        assert get_booking_by_id(first.id) is None

        with pytest.raises(NotFoundError):
            remove_booking(first.id)

        assert clear_all_bookings() == 1


def _run_concurrently(app, calls):
    """
    Run each call in its own thread and application context.

    Every thread gets its own SQLite connection to the same database file and
    waits on a barrier so the calls start together. Returns one outcome per
    call, in call order: 'ok' or the raised exception.
    """
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        with app.app_context():
            barrier.wait(timeout=10)
            try:
                call()
                outcomes[index] = 'ok'
            except Exception as e:
                outcomes[index] = e

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
        assert not thread.is_alive()
    return outcomes


def _approved_overlaps(bookings):
    ordered = sorted(bookings, key=lambda b: b.start)
    return [(a.id, b.id) for a, b in zip(ordered, ordered[1:]) if b.start < a.end]


class TestConcurrency:
    """Decisions racing on one database file keep the approved set consistent."""

    def test_one_approval_wins(self, app, sharing, make_booking):
        booking = make_booking(sharing['item']['id'], sharing['booker']['id'],
                               NOW + DAY, NOW + 2 * DAY)
        owner_id = sharing['owner']['id']

        outcomes = _run_concurrently(app, [
            lambda: approve_booking(booking.id, owner_id, True) for _ in range(4)
        ])

        assert outcomes.count('ok') == 1
        assert all(isinstance(o, InvalidStateError) for o in outcomes if o != 'ok')
        assert get_booking_by_id(booking.id).status == BookingStatus.APPROVED

    def test_approve_and_reject_race(self, app, sharing, make_booking):
        booking = make_booking(sharing['item']['id'], sharing['booker']['id'],
                               NOW + DAY, NOW + 2 * DAY)
        owner_id = sharing['owner']['id']

        outcomes = _run_concurrently(app, [
            lambda: approve_booking(booking.id, owner_id, True),
            lambda: approve_booking(booking.id, owner_id, False),
        ])

        assert outcomes.count('ok') == 1
        assert isinstance([o for o in outcomes if o != 'ok'][0], InvalidStateError)
        decided = get_booking_by_id(booking.id).status
        expected = BookingStatus.APPROVED if outcomes[0] == 'ok' else BookingStatus.REJECTED
        assert decided == expected

    def test_overlapping_approvals(self, app, sharing, make_user, make_booking):
        item_id = sharing['item']['id']
        owner_id = sharing['owner']['id']
        bookers = [sharing['booker']] + [make_user() for _ in range(3)]
        waiting = [
            make_booking(item_id, booker['id'], NOW + (i + 1) * DAY, NOW + (i + 3) * DAY)
            for i, booker in enumerate(bookers)
        ]

        outcomes = _run_concurrently(app, [
            lambda booking_id=booking.id: approve_booking(booking_id, owner_id, True)
            for booking in waiting
        ])

        assert all(isinstance(o, ItemUnavailableError) for o in outcomes if o != 'ok')
        approved = get_approved_bookings_for_items([item_id]).get(item_id, [])
        assert len(approved) == outcomes.count('ok')
        assert _approved_overlaps(approved) == []

    def test_create_and_approve_race(self, app, sharing, make_user):
        item_id = sharing['item']['id']
        owner_id = sharing['owner']['id']
        bookers = [sharing['booker']] + [make_user() for _ in range(3)]

        def book_and_approve(booker_id, offset):
            booking = create_booking(booker_id, item_id, NOW + offset * DAY, NOW + (offset + 2) * DAY)
            approve_booking(booking.id, owner_id, True)

        outcomes = _run_concurrently(app, [
            lambda booker_id=booker['id'], offset=i + 1: book_and_approve(booker_id, offset)
            for i, booker in enumerate(bookers)
        ])

        assert 'ok' in outcomes
        assert all(isinstance(o, ItemUnavailableError) for o in outcomes if o != 'ok')
        approved = get_approved_bookings_for_items([item_id]).get(item_id, [])
        assert len(approved) == outcomes.count('ok')
        assert _approved_overlaps(approved) == []
