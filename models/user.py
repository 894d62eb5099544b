"""
User model and data access functions.
Handles user CRUD operations and Flask-Login caller integration.
"""

import sqlite3

from flask_login import UserMixin

from database import get_db
from utils.exceptions import DuplicatedDataError, NotFoundError


class Sharer(UserMixin):
    """
    Caller identity for Flask-Login.

    Holds the numeric id forwarded by the edge tier. The id is trusted as
    is; whether such a user exists is decided by the services.
    """

    def __init__(self, user_id: int):
        self.id = user_id

    def __eq__(self, other):
        return isinstance(other, Sharer) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


def user_to_dict(user: dict) -> dict:
    """Public JSON shape of a user row."""
    return {
        'id': user['id'],
        'name': user['name'],
        'email': user['email']
    }


def get_user_by_id(user_id: int) -> dict:
    """
    Get user by ID.

    Args:
        user_id: User ID

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM users WHERE id = ?', (user_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_or_raise(user_id: int) -> dict:
    """Get user by ID or raise NotFoundError."""
    user = get_user_by_id(user_id)
    if user is None:
        raise NotFoundError('User', user_id)
    return user


def user_exists(user_id: int) -> bool:
    """Check whether a user with this ID exists."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT 1 FROM users WHERE id = ?', (user_id,))
    return cursor.fetchone() is not None


def get_user_by_email(email: str) -> dict:
    """
    Get user by email.

    Args:
        email: Email to search for

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM users WHERE email = ?', (email,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_all_users() -> list:
    """Get all users ordered by ID."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM users ORDER BY id')
    return [dict(row) for row in cursor.fetchall()]


def create_user(name: str, email: str) -> dict:
    """
    Create new user.

    Args:
        name: Display name
        email: Email address (unique)

    Returns:
        Created user dict

    Raises:
        DuplicatedDataError: If the email is already registered
    """
    if get_user_by_email(email):
        raise DuplicatedDataError('email', email)

    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute('INSERT INTO users (name, email) VALUES (?, ?)', (name, email))
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise DuplicatedDataError('email', email)

    return get_user_by_id(cursor.lastrowid)


def update_user(user_id: int, name: str = None, email: str = None) -> dict:
    """
    Partially update a user.

    Only provided fields are changed. Email uniqueness is checked only when
    the email actually changes.

    Args:
        user_id: User ID
        name: New name (optional)
        email: New email (optional)

    Returns:
        Updated user dict

    Raises:
        NotFoundError: If the user does not exist
        DuplicatedDataError: If the new email belongs to another user
    """
    user = get_user_or_raise(user_id)

    if email is not None and email != user['email'] and get_user_by_email(email):
        raise DuplicatedDataError('email', email)

    updates = []
    values = []
    if name is not None:
        updates.append('name = ?')
        values.append(name)
    if email is not None:
        updates.append('email = ?')
        values.append(email)

    if not updates:
        return user

    values.append(user_id)
    db = get_db()
    try:
        db.execute(f'UPDATE users SET {", ".join(updates)} WHERE id = ?', values)
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise DuplicatedDataError('email', email)

    return get_user_by_id(user_id)


def delete_user(user_id: int) -> bool:
    """
    Delete user (cascades to the user's items, bookings and comments).

    Returns:
        bool: True if a row was deleted
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM users WHERE id = ?', (user_id,))
    db.commit()
    return cursor.rowcount > 0
