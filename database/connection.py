"""
Database connection management.
Handles per-context connections, initialization, and teardown.
"""

import os
import sqlite3
from flask import g, current_app


def get_db():
    """
    Get the database connection of the current application context.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/shareit.db')
        if db_path != ':memory:':
            directory = os.path.dirname(db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
        g.db = sqlite3.connect(db_path, timeout=10)
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # Enable WAL mode for better concurrency
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


def begin_immediate(db) -> sqlite3.Cursor:
    """
    Open a write transaction that takes SQLite's reserved lock up front.

    Concurrent writers serialize on this lock, so a read made inside the
    transaction stays valid until commit.

    Args:
        db: Connection from get_db()

    Returns:
        sqlite3.Cursor: Cursor bound to the open transaction
    """
    cursor = db.cursor()
    cursor.execute('BEGIN IMMEDIATE')
    return cursor


def init_db():
    """
    Initialize database: drop existing tables and create the schema.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes, create_triggers

    db = get_db()

    drop_tables(db)
    create_tables(db)
    create_indexes(db)
    create_triggers(db)

    db.commit()
    current_app.logger.info('Database initialized at %s',
                            current_app.config.get('DATABASE_PATH'))
