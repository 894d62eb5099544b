"""
Database package for the ShareIt service.

This package provides modular database operations:
- connection: Database connection management (get_db, close_db, init_db)
- schema: Table creation, indexes and booking triggers

All functions are re-exported from this module.
"""

from database.connection import get_db, close_db, init_db, begin_immediate
from database.schema import drop_tables, create_tables, create_indexes, create_triggers

__all__ = [
    # Connection
    'get_db',
    'close_db',
    'init_db',
    'begin_immediate',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    'create_triggers',
]
