"""
Booking entity.
Wraps a joined booking row with typed fields and the public JSON shape.
"""

from models.booking_state import BookingStatus
from utils.datetime_helpers import parse_timestamp, format_timestamp


class Booking:
    """
    A reservation of an item by a booker for a [start, end) window.

    Built from a row of the booking queries (booking joined with its item
    and booker). Two Booking objects are equal when they share an id.
    """

    def __init__(self, row: dict):
        """
        Initialize Booking from a joined database row.

        Args:
            row: Dictionary with booking, item and booker columns
        """
        self.id = row['id']
        self.start = parse_timestamp(row['start_date'])
        self.end = parse_timestamp(row['end_date'])
        self.status = BookingStatus(row['status'])
        self.item_id = row['item_id']
        self.item_name = row['item_name']
        self.item_available = bool(row['item_available'])
        self.owner_id = row['owner_id']
        self.booker_id = row['booker_id']
        self.booker_name = row['booker_name']
        self.booker_email = row['booker_email']

    def __eq__(self, other):
        if not isinstance(other, Booking):
            return NotImplemented
        return self.id is not None and self.id == other.id

    def __hash__(self):
        return hash((Booking, self.id))

    def __repr__(self):
        return f'<Booking {self.id} item={self.item_id} {self.status.value}>'

    def is_related_to(self, user_id: int) -> bool:
        """True if user_id is the booker or the owner of the booked item."""
        return user_id in (self.booker_id, self.owner_id)

    def to_dict(self) -> dict:
        """Public JSON shape."""
        return {
            'id': self.id,
            'start': format_timestamp(self.start),
            'end': format_timestamp(self.end),
            'status': self.status.value,
            'item': {
                'id': self.item_id,
                'name': self.item_name
            },
            'booker': {
                'id': self.booker_id,
                'name': self.booker_name,
                'email': self.booker_email
            }
        }
