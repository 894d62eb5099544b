"""
Comment model.
Stores renter comments on items.
"""

from database import get_db
from utils.datetime_helpers import get_now, format_timestamp


def comment_to_dict(comment: dict) -> dict:
    """Public JSON shape of a comment row joined with its author."""
    return {
        'id': comment['id'],
        'text': comment['text'],
        'authorName': comment['author_name'],
        'created': comment['created']
    }


def get_comment_by_id(comment_id: int) -> dict:
    """Get comment with author name, or None."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT c.*, u.name as author_name
        FROM comments c
        JOIN users u ON c.author_id = u.id
        WHERE c.id = ?
    ''', (comment_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_comments_by_item(item_id: int) -> list:
    """Get all comments of an item, oldest first."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT c.*, u.name as author_name
        FROM comments c
        JOIN users u ON c.author_id = u.id
        WHERE c.item_id = ?
        ORDER BY c.created, c.id
    ''', (item_id,))
    return [dict(row) for row in cursor.fetchall()]


def create_comment(item_id: int, author_id: int, text: str) -> dict:
    """
    Insert a comment stamped with the current time.

    Returns:
        Created comment dict with author name
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO comments (text, item_id, author_id, created)
        VALUES (?, ?, ?, ?)
    ''', (text, item_id, author_id, format_timestamp(get_now())))
    db.commit()
    return get_comment_by_id(cursor.lastrowid)


def update_comment_text(comment_id: int, text: str) -> dict:
    """Replace comment text and return the updated comment."""
    db = get_db()
    db.execute('UPDATE comments SET text = ? WHERE id = ?', (text, comment_id))
    db.commit()
    return get_comment_by_id(comment_id)


def delete_comment(comment_id: int) -> bool:
    """Delete a comment. Returns True if a row was deleted."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM comments WHERE id = ?', (comment_id,))
    db.commit()
    return cursor.rowcount > 0
