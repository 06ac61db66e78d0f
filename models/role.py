"""
Role data access functions.
Roles map users to the permission codes checked by the API decorators.
"""

from database import get_db


def get_role_by_name(name: str) -> dict:
    """
    Get role by name.

    Args:
        name: Role name (student, instructor, admin)

    Returns:
        Role dict or None if not found
    """
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute('SELECT * FROM roles WHERE name = ?', (name,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_role_permissions(role_id: int) -> list:
    """
    Get all permissions assigned to a role.

    Args:
        role_id: Role ID

    Returns:
        List of permission dicts
    """
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute('''
            SELECT p.*
            FROM permissions p
            JOIN role_permissions rp ON p.id = rp.permission_id
            WHERE rp.role_id = ?
            ORDER BY p.module, p.code
        ''', (role_id,))
        rows = cursor.fetchall()
        return [dict(row) for row in rows]
