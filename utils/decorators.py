"""
Route decorators for authentication and authorization.
Provides permission-based access control for API routes.
"""

from functools import wraps
from flask import g
from flask_login import login_required, current_user

from utils.api_response import api_error
from utils.messages import MESSAGES


def permission_required(permission_code: str):
    """
    Decorator to require specific permission for a route.

    Usage:
        @bp.route('/reservations', methods=['POST'])
        @login_required
        @permission_required('reservations.create')
        def create():
            ...

    Args:
        permission_code: Permission code required (e.g., 'admin.spaces.manage')

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not hasattr(g, 'user_permissions'):
                from utils.permissions import load_user_permissions
                g.user_permissions = load_user_permissions(current_user.id)

            if permission_code not in g.user_permissions:
                return api_error(MESSAGES['permission_denied'], status=403, code='FORBIDDEN')

            return func(*args, **kwargs)
        return wrapper
    return decorator


# Re-export login_required for convenience
__all__ = ['login_required', 'permission_required']
