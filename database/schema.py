"""
Database schema definitions.
Table creation, indexes, and storage-level booking constraints.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'comments',
        'bookings',
        'items',
        'item_requests',
        'users'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT UNIQUE NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE item_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            description TEXT NOT NULL,
            requestor_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created TEXT NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT NOT NULL,
            available INTEGER NOT NULL DEFAULT 1,
            owner_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            request_id INTEGER REFERENCES item_requests(id) ON DELETE SET NULL
        )
    ''')

    # Timestamps are stored as fixed-width ISO text (YYYY-MM-DDTHH:MM:SS)
    # so that text comparison equals chronological comparison.
    db.execute('''
        CREATE TABLE bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            item_id INTEGER NOT NULL REFERENCES items(id) ON DELETE CASCADE,
            booker_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            status TEXT NOT NULL DEFAULT 'WAITING'
                CHECK (status IN ('WAITING', 'APPROVED', 'REJECTED')),
            CHECK (start_date < end_date)
        )
    ''')

    db.execute('''
        CREATE TABLE comments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            text TEXT NOT NULL,
            item_id INTEGER NOT NULL REFERENCES items(id) ON DELETE CASCADE,
            author_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created TEXT NOT NULL
        )
    ''')


def create_indexes(db):
    """Create indexes for the booking queries."""
    indexes = [
        'CREATE INDEX IF NOT EXISTS idx_items_owner ON items(owner_id)',
        'CREATE INDEX IF NOT EXISTS idx_items_request ON items(request_id)',
        'CREATE INDEX IF NOT EXISTS idx_bookings_booker ON bookings(booker_id, start_date)',
        'CREATE INDEX IF NOT EXISTS idx_bookings_item_status ON bookings(item_id, status)',
        'CREATE INDEX IF NOT EXISTS idx_comments_item ON comments(item_id)',
        'CREATE INDEX IF NOT EXISTS idx_item_requests_requestor ON item_requests(requestor_id)',
    ]
    for statement in indexes:
        db.execute(statement)


def create_triggers(db):
    """
    Create the storage-level backstop against double-booking.

    Any write that would leave two APPROVED bookings of one item with
    overlapping [start, end) windows is aborted with 'approved_overlap'.
    """
    overlap_condition = '''
        EXISTS (
            SELECT 1 FROM bookings b
            WHERE b.item_id = NEW.item_id
              AND b.id IS NOT NEW.id
              AND b.status = 'APPROVED'
              AND NOT (b.end_date <= NEW.start_date OR b.start_date >= NEW.end_date)
        )
    '''

    db.execute(f'''
        CREATE TRIGGER IF NOT EXISTS trg_bookings_approved_overlap_insert
        BEFORE INSERT ON bookings
        WHEN NEW.status = 'APPROVED' AND {overlap_condition}
        BEGIN
            SELECT RAISE(ABORT, 'approved_overlap');
        END
    ''')

    db.execute(f'''
        CREATE TRIGGER IF NOT EXISTS trg_bookings_approved_overlap_update
        BEFORE UPDATE OF status ON bookings
        WHEN NEW.status = 'APPROVED' AND {overlap_condition}
        BEGIN
            SELECT RAISE(ABORT, 'approved_overlap');
        END
    ''')
