"""
User model and data access functions.
Users are the identity collaborator of the reservation core: they supply
the id and role that booking operations trust.
"""

import sqlite3
from werkzeug.security import generate_password_hash, check_password_hash
from database import get_db
from utils.validators import validate_email


class User:
    """
    User class for Flask-Login integration.
    Wraps database row dictionary with required Flask-Login properties.
    """

    def __init__(self, user_dict):
        self.id = user_dict['id']
        self.email = user_dict['email']
        self.name = user_dict['name']
        self.role_id = user_dict['role_id']
        self.role_name = user_dict.get('role_name')
        self.active = user_dict['active']
        self.created_at = user_dict['created_at']
        self.last_login = user_dict.get('last_login')

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return self.active == 1

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    @property
    def is_admin(self):
        return self.role_name == 'admin'

    def get_id(self):
        """Required by Flask-Login. Returns user ID as string."""
        return str(self.id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role_name,
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
    cursor.execute('''
        SELECT u.*, r.name as role_name
        FROM users u
        LEFT JOIN roles r ON u.role_id = r.id
        WHERE u.id = ?
    ''', (user_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_by_email(email: str) -> dict:
    """
    Get user by email (case-insensitive).

    Args:
        email: Email address

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT u.*, r.name as role_name
        FROM users u
        LEFT JOIN roles r ON u.role_id = r.id
        WHERE lower(u.email) = lower(?)
    ''', (email,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_user(name: str, email: str, password: str, role_id: int = None) -> int:
    """
    Create new user with hashed password.

    Args:
        name: Display name
        email: Unique email
        password: Plain text password (will be hashed)
        role_id: Role ID to assign

    Returns:
        New user ID

    Raises:
        ValueError: If the email is malformed or already exists
    """
    if not validate_email(email):
        raise ValueError(f'Invalid email: {email}')

    db = get_db()
    password_hash = generate_password_hash(password)

    cursor = db.cursor()
    try:
        cursor.execute('''
            INSERT INTO users (email, name, password_hash, role_id)
            VALUES (?, ?, ?, ?)
        ''', (email, name, password_hash, role_id))
    except sqlite3.IntegrityError:
        db.rollback()
        raise ValueError(f'Email already registered: {email}')

    db.commit()
    return cursor.lastrowid


def update_last_login(user_id: int) -> None:
    """
    Update last login timestamp.

    Args:
        user_id: User ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE users SET last_login = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (user_id,))
    db.commit()


def check_password(user_dict: dict, password: str) -> bool:
    """
    Verify password against stored hash.

    Args:
        user_dict: User dictionary with password_hash
        password: Plain text password to check

    Returns:
        True if password matches
    """
    return check_password_hash(user_dict['password_hash'], password)
