"""
Domain exceptions for the ShareIt service.

Every exception carries the HTTP status and the machine readable code the
API reports. Services raise them; app.py turns them into JSON responses.
"""


class ShareItError(Exception):
    """Base class for all domain errors."""

    status_code = 500
    code = 'INTERNAL_ERROR'

    def to_payload(self) -> dict:
        """Extra fields merged into the error response."""
        return {'code': self.code}


class NotFoundError(ShareItError):
    """Referenced user, item, booking, request or comment does not exist."""

    status_code = 404
    code = 'NOT_FOUND'

    def __init__(self, entity_name: str, entity_id=None, message: str = None):
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(message or f'{entity_name} with id {entity_id} not found')

    def to_payload(self) -> dict:
        return {'code': self.code, 'entity': self.entity_name}


class ForbiddenError(ShareItError):
    """Caller lacks the relationship required for the operation."""

    status_code = 403
    code = 'ACCESS_FORBIDDEN'

    def __init__(self, message: str, user_id: int = None):
        self.user_id = user_id
        super().__init__(message)


class ItemUnavailableError(ShareItError):
    """Item flagged unavailable, or requested window is already taken."""

    status_code = 400
    code = 'ITEM_UNAVAILABLE'

    def __init__(self, item_id: int, message: str):
        self.item_id = item_id
        super().__init__(f'Item with id {item_id} is not available: {message}')

    def to_payload(self) -> dict:
        return {'code': self.code, 'item_id': self.item_id}


class InvalidStateError(ShareItError):
    """Booking decision attempted on a booking that is no longer WAITING."""

    status_code = 409
    code = 'INVALID_STATE'

    def __init__(self, booking_id: int, current_status: str):
        self.booking_id = booking_id
        self.current_status = current_status
        super().__init__(f'Booking {booking_id} status cannot be changed from {current_status}')


class NoBookingsError(ShareItError):
    """The user exists but has no bookings at all. Not an application error."""

    status_code = 204
    code = 'NO_CONTENT'

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f'No bookings found for user {user_id}')


class DuplicatedDataError(ShareItError):
    """Unique field value already taken."""

    status_code = 409
    code = 'DUPLICATED_DATA'

    def __init__(self, field_name: str, value):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Field '{field_name}' with value '{value}' already exists")

    def to_payload(self) -> dict:
        return {'code': self.code, 'field': self.field_name}


class CommentNotAllowedError(ShareItError):
    """Comment attempted before the author's rental has ended."""

    status_code = 400
    code = 'COMMENT_NOT_ALLOWED'

    def __init__(self, message: str, user_id: int, item_id: int):
        self.user_id = user_id
        self.item_id = item_id
        super().__init__(f'Comment to item {item_id} is not allowed to user {user_id}: {message}')


class ValidationError(ShareItError):
    """Malformed request shape."""

    status_code = 400
    code = 'VALIDATION_ERROR'

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)

    def to_payload(self) -> dict:
        payload = {'code': self.code}
        if self.field:
            payload['field'] = self.field
        return payload
