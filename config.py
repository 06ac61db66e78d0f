"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os
from datetime import timedelta


class Config:
    """Base configuration class with common settings."""

    # Secret key for session management and CSRF protection
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration (raw SQLite)
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/spaces.db'

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    PERMANENT_SESSION_LIFETIME = timedelta(
        hours=int(os.environ.get('SESSION_TIMEOUT_HOURS', 8))
    )

    # Pagination
    ITEMS_PER_PAGE = 10
    ADMIN_ITEMS_PER_PAGE = 50

    # Calendar used for day-grid availability
    TIMEZONE = os.environ.get('TIMEZONE', 'UTC')

    # Invitations
    APP_BASE_URL = os.environ.get('APP_BASE_URL', 'http://localhost:3000')
    INVITATION_TTL_DAYS = int(os.environ.get('INVITATION_TTL_DAYS', 30))

    # Day grid: hourly slots from start hour up to (not including) end hour
    DAY_GRID_START_HOUR = 8
    DAY_GRID_END_HOUR = 22

    # 'seats': each reservation occupies its seat_count (group size or 1)
    # 'reservations': each reservation occupies exactly one seat
    SEAT_ACCOUNTING = os.environ.get('SEAT_ACCOUNTING', 'seats')

    # Application settings
    APP_NAME = 'SpaceBooking'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_SSL_STRICT = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'true').lower() == 'true'
    WTF_CSRF_SSL_STRICT = SESSION_COOKIE_SECURE

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    PREFERRED_URL_SCHEME = 'https' if SESSION_COOKIE_SECURE else 'http'

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")
        if not os.environ.get('APP_BASE_URL'):
            raise ValueError("APP_BASE_URL environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    WTF_CSRF_ENABLED = False  # Disable CSRF for tests
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    SECRET_KEY = 'test-secret-key'
    TIMEZONE = 'UTC'
    APP_BASE_URL = 'http://testserver'
    SEAT_ACCOUNTING = 'seats'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
