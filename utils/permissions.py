"""
Permission checking and caching utilities.
Provides functions to load and check user permissions.
"""

from flask import g

from database import get_db
from models.role import get_role_permissions


def load_user_permissions(user_id: int) -> set:
    """
    Load all permissions for a user based on their role.

    Args:
        user_id: User ID

    Returns:
        Set of permission codes
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT role_id FROM users WHERE id = ?', (user_id,))
    row = cursor.fetchone()

    if not row or not row['role_id']:
        return set()

    permissions = get_role_permissions(row['role_id'])

    return {perm['code'] for perm in permissions}


def has_permission(user, permission_code: str) -> bool:
    """
    Check if user has a specific permission.

    Args:
        user: User object (Flask-Login)
        permission_code: Permission code to check

    Returns:
        True if user has permission
    """
    if not getattr(user, 'is_authenticated', False):
        return False
    return permission_code in load_user_permissions(user.id)


def cache_user_permissions(user_id: int):
    """
    Cache user permissions in flask g object for the current request.

    Args:
        user_id: User ID
    """
    g.user_permissions = load_user_permissions(user_id)
