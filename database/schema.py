"""
Database schema definitions.
Table creation, indexes, and structure management.

Timestamps are stored as UTC text 'YYYY-MM-DD HH:MM:SS' so that string
comparison in SQL matches chronological order.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'audit_log',
        'reservation_participants',
        'reservations',
        'spaces',
        'floors',
        'role_permissions',
        'permissions',
        'users',
        'roles'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Users & Auth Tables
    db.execute('''
        CREATE TABLE roles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL,
            display_name TEXT NOT NULL,
            description TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT UNIQUE NOT NULL,
            name TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            role_id INTEGER REFERENCES roles(id),
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            last_login TEXT
        )
    ''')

    db.execute('''
        CREATE TABLE permissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            code TEXT UNIQUE NOT NULL,
            name TEXT NOT NULL,
            module TEXT NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE role_permissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            role_id INTEGER NOT NULL REFERENCES roles(id) ON DELETE CASCADE,
            permission_id INTEGER NOT NULL REFERENCES permissions(id) ON DELETE CASCADE,
            UNIQUE(role_id, permission_id)
        )
    ''')

    # 2. Building registry
    db.execute('''
        CREATE TABLE floors (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            building TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE spaces (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            floor_id INTEGER REFERENCES floors(id),
            name TEXT NOT NULL,
            space_type TEXT NOT NULL DEFAULT 'room',
            description TEXT,
            capacity INTEGER NOT NULL,
            min_capacity INTEGER NOT NULL DEFAULT 1,
            availability_status TEXT NOT NULL DEFAULT 'AVAILABLE'
                CHECK(availability_status IN ('AVAILABLE', 'UNAVAILABLE')),
            unavailability_start TEXT,
            unavailability_end TEXT,
            unavailability_reason TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            CHECK(min_capacity >= 1 AND capacity >= min_capacity)
        )
    ''')

    # 3. Reservations
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            space_id INTEGER NOT NULL REFERENCES spaces(id),
            user_id INTEGER NOT NULL REFERENCES users(id),
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            seat_count INTEGER NOT NULL DEFAULT 1,
            status TEXT NOT NULL DEFAULT 'confirmed'
                CHECK(status IN ('confirmed', 'cancelled', 'completed')),
            notes TEXT,
            invitation_token TEXT UNIQUE,
            cancelled_by TEXT CHECK(cancelled_by IN ('user', 'admin')),
            cancellation_reason TEXT,
            cancellation_notes TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT,
            CHECK(start_time < end_time)
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_participants (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL REFERENCES reservations(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id),
            role TEXT NOT NULL CHECK(role IN ('organizer', 'participant')),
            status TEXT NOT NULL DEFAULT 'confirmed',
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(reservation_id, user_id)
        )
    ''')

    # 4. Audit trail
    db.execute('''
        CREATE TABLE audit_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER REFERENCES users(id),
            action TEXT NOT NULL,
            entity_type TEXT NOT NULL,
            entity_id INTEGER,
            details TEXT,
            ip_address TEXT,
            user_agent TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""

    # Interval-overlap lookups for capacity and per-user conflict checks
    db.execute('CREATE INDEX idx_reservations_space_window ON reservations(space_id, status, start_time, end_time)')
    db.execute('CREATE INDEX idx_reservations_user_window ON reservations(user_id, status, start_time, end_time)')
    db.execute('CREATE INDEX idx_reservations_created ON reservations(created_at)')

    db.execute('CREATE INDEX idx_participants_reservation ON reservation_participants(reservation_id)')

    db.execute('CREATE INDEX idx_spaces_floor ON spaces(floor_id)')
    db.execute('CREATE INDEX idx_spaces_status ON spaces(availability_status, unavailability_end)')

    db.execute('CREATE INDEX idx_permissions_code ON permissions(code)')

    db.execute('CREATE INDEX idx_audit_log_created ON audit_log(created_at)')
    db.execute('CREATE INDEX idx_audit_log_entity ON audit_log(entity_type, entity_id)')
