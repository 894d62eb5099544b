"""
Item request model.
Requests posted by users looking for an item nobody lists yet.
"""

from database import get_db
from models.item import get_items_by_request_ids
from utils.datetime_helpers import get_now, format_timestamp


def _to_response(request_row: dict, items: list) -> dict:
    return {
        'id': request_row['id'],
        'description': request_row['description'],
        'requestorId': request_row['requestor_id'],
        'created': request_row['created'],
        'items': [
            {'id': item['id'], 'name': item['name'], 'ownerId': item['owner_id']}
            for item in items
        ]
    }


def get_item_request_by_id(request_id: int) -> dict:
    """Get item request row by ID, or None."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM item_requests WHERE id = ?', (request_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_item_request(requestor_id: int, description: str) -> dict:
    """
    Create new item request.

    Args:
        requestor_id: User posting the request
        description: What the user is looking for

    Returns:
        Response dict with an empty items list
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO item_requests (description, requestor_id, created)
        VALUES (?, ?, ?)
    ''', (description, requestor_id, format_timestamp(get_now())))
    db.commit()
    return _to_response(get_item_request_by_id(cursor.lastrowid), [])


def get_item_request_with_items(request_id: int) -> dict:
    """Get one item request with the items that answer it, or None."""
    request_row = get_item_request_by_id(request_id)
    if request_row is None:
        return None
    items = get_items_by_request_ids([request_id]).get(request_id, [])
    return _to_response(request_row, items)


def _list_with_items(where: str = '', params: tuple = ()) -> list:
    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'''
        SELECT * FROM item_requests
        {where}
        ORDER BY created DESC, id DESC
    ''', params)
    rows = [dict(row) for row in cursor.fetchall()]
    items_by_request = get_items_by_request_ids([row['id'] for row in rows])
    return [_to_response(row, items_by_request.get(row['id'], [])) for row in rows]


def get_item_requests_by_requestor(requestor_id: int) -> list:
    """Get a user's own item requests, newest first, with answering items."""
    return _list_with_items('WHERE requestor_id = ?', (requestor_id,))


def get_all_item_requests() -> list:
    """Get every item request, newest first, with answering items."""
    return _list_with_items()
