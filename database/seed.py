"""
Database seed data.
Initial data population for fresh database installations.
"""

from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # 1. Create Roles
    roles_data = [
        ('student', 'Student', 'Books spaces and joins group reservations'),
        ('instructor', 'Instructor', 'Books spaces and organizes group sessions'),
        ('admin', 'Administrator', 'Full access to spaces and reservations')
    ]

    for name, display_name, description in roles_data:
        db.execute('''
            INSERT INTO roles (name, display_name, description)
            VALUES (?, ?, ?)
        ''', (name, display_name, description))

    # 2. Create Permissions
    permissions_data = [
        ('spaces.view', 'View spaces', 'spaces'),
        ('reservations.view', 'View own reservations', 'reservations'),
        ('reservations.create', 'Create reservations', 'reservations'),
        ('reservations.cancel', 'Cancel own reservations', 'reservations'),
        ('reservations.participants.manage', 'Manage group participants', 'reservations'),
        ('invitations.join', 'Join group reservations', 'invitations'),
        ('admin.reservations.view', 'View all reservations', 'admin'),
        ('admin.reservations.manage', 'Cancel any reservation', 'admin'),
        ('admin.spaces.manage', 'Manage spaces', 'admin'),
        ('admin.stats.view', 'View statistics', 'admin'),
        ('admin.audit.view', 'View audit log', 'admin'),
    ]

    for code, name, module in permissions_data:
        db.execute('''
            INSERT INTO permissions (code, name, module)
            VALUES (?, ?, ?)
        ''', (code, name, module))

    # 3. Assign Permissions to Roles
    member_permissions = [code for code, _, module in permissions_data if module != 'admin']
    role_assignments = {
        'student': member_permissions,
        'instructor': member_permissions,
        'admin': [code for code, _, _ in permissions_data],
    }

    for role_name, codes in role_assignments.items():
        role_id = db.execute('SELECT id FROM roles WHERE name = ?', (role_name,)).fetchone()[0]
        for code in codes:
            db.execute('''
                INSERT INTO role_permissions (role_id, permission_id)
                SELECT ?, id FROM permissions WHERE code = ?
            ''', (role_id, code))

    # 4. Create Admin User
    admin_role_id = db.execute("SELECT id FROM roles WHERE name = 'admin'").fetchone()[0]
    db.execute('''
        INSERT INTO users (email, name, password_hash, role_id)
        VALUES (?, ?, ?, ?)
    ''', ('admin@example.com', 'Administrator', generate_password_hash('admin123'), admin_role_id))

    # 5. Create Building Layout
    db.execute('''
        INSERT INTO floors (name, building)
        VALUES ('Ground floor', 'Main building')
    ''')
    floor_id = db.execute('SELECT last_insert_rowid()').fetchone()[0]

    spaces_data = [
        ('Quiet desk A1', 'desk', 1, 1),
        ('Meeting room B2', 'meeting_room', 4, 2),
        ('Lab C3', 'lab', 12, 3),
        ('Auditorium', 'auditorium', 60, 10),
    ]

    for name, space_type, capacity, min_capacity in spaces_data:
        db.execute('''
            INSERT INTO spaces (floor_id, name, space_type, capacity, min_capacity)
            VALUES (?, ?, ?, ?, ?)
        ''', (floor_id, name, space_type, capacity, min_capacity))
