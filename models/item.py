"""
Item model and data access functions.
Handles item CRUD, owner listings and text search.
"""

from database import get_db
from utils.exceptions import NotFoundError


def item_to_dict(item: dict) -> dict:
    """Public JSON shape of an item row."""
    return {
        'id': item['id'],
        'name': item['name'],
        'description': item['description'],
        'available': bool(item['available']),
        'requestId': item.get('request_id')
    }


def get_item_by_id(item_id: int) -> dict:
    """
    Get item by ID.

    Args:
        item_id: Item ID

    Returns:
        Item dict (with owner_id) or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM items WHERE id = ?', (item_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_item_or_raise(item_id: int) -> dict:
    """Get item by ID or raise NotFoundError."""
    item = get_item_by_id(item_id)
    if item is None:
        raise NotFoundError('Item', item_id)
    return item


def get_items_by_owner(owner_id: int) -> list:
    """Get all items of an owner ordered by ID."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM items WHERE owner_id = ? ORDER BY id', (owner_id,))
    return [dict(row) for row in cursor.fetchall()]


def get_items_by_request_ids(request_ids: list) -> dict:
    """
    Get items created in answer to item requests.

    Args:
        request_ids: List of item request IDs

    Returns:
        dict: {request_id: [item dicts]}
    """
    if not request_ids:
        return {}

    db = get_db()
    cursor = db.cursor()
    placeholders = ','.join('?' * len(request_ids))
    cursor.execute(f'''
        SELECT * FROM items
        WHERE request_id IN ({placeholders})
        ORDER BY id
    ''', list(request_ids))

    grouped = {}
    for row in cursor.fetchall():
        grouped.setdefault(row['request_id'], []).append(dict(row))
    return grouped


def search_items(text: str) -> list:
    """
    Search available items by text in name or description.

    Args:
        text: Search text (case-insensitive)

    Returns:
        list: Matching available items, empty for blank text
    """
    if not text or not text.strip():
        return []

    pattern = f'%{text.strip().lower()}%'
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM items
        WHERE available = 1
          AND (LOWER(name) LIKE ? OR LOWER(description) LIKE ?)
        ORDER BY id
    ''', (pattern, pattern))
    return [dict(row) for row in cursor.fetchall()]


def create_item(owner_id: int, name: str, description: str, available: bool,
                request_id: int = None) -> dict:
    """
    Create new item.

    Args:
        owner_id: Owner user ID
        name: Item name
        description: Item description
        available: Whether the item may be booked
        request_id: Item request this item answers (optional)

    Returns:
        Created item dict
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO items (name, description, available, owner_id, request_id)
        VALUES (?, ?, ?, ?, ?)
    ''', (name, description, 1 if available else 0, owner_id, request_id))
    db.commit()
    return get_item_by_id(cursor.lastrowid)


def update_item(item_id: int, **fields) -> dict:
    """
    Partially update an item.

    Args:
        item_id: Item ID
        **fields: Any of name, description, available (None values ignored)

    Returns:
        Updated item dict
    """
    allowed_fields = ['name', 'description', 'available']
    updates = []
    values = []

    for field in allowed_fields:
        if fields.get(field) is not None:
            value = fields[field]
            if field == 'available':
                value = 1 if value else 0
            updates.append(f'{field} = ?')
            values.append(value)

    if updates:
        values.append(item_id)
        db = get_db()
        db.execute(f'UPDATE items SET {", ".join(updates)} WHERE id = ?', values)
        db.commit()

    return get_item_by_id(item_id)
