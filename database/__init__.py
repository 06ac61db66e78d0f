"""
SQLite persistence for spaces, reservations, participants and the audit log.

- connection: request-scoped connection (get_db, close_db) and init_db
- schema: tables and indexes
- seed: roles, permissions, admin account and sample spaces
"""

from database.connection import get_db, close_db, init_db

__all__ = ['get_db', 'close_db', 'init_db']
