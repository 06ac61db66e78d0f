"""
SpaceBooking - Building space reservation service
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from flask_wtf.csrf import CSRFError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from config import config
from extensions import login_manager, csrf
from database import close_db, init_db


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    if config_name == 'production':
        config[config_name].validate()

    initialize_extensions(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_cli_commands(app)
    register_teardown_handlers(app)
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    login_manager.init_app(app)
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.auth.routes import auth_bp
    from blueprints.api.routes import api_bp
    from blueprints.admin.routes import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/admin')


def register_error_handlers(app):
    """Register error handlers."""
    from utils.api_response import api_error
    from utils.errors import ReservationError
    from utils.messages import MESSAGES

    @app.errorhandler(ReservationError)
    def reservation_error(error):
        """Translate domain errors into the standard JSON envelope."""
        return api_error(error.message, status=error.status_code, code=error.error_code)

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        """Missing or stale X-CSRFToken header on a state-changing call."""
        return api_error(MESSAGES['csrf_failed'], status=400, code='CSRF_FAILED')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(MESSAGES['not_found'], status=404, code='NOT_FOUND')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error(MESSAGES['method_not_allowed'], status=405, code='METHOD_NOT_ALLOWED')

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors."""
        return api_error(MESSAGES['permission_denied'], status=403, code='FORBIDDEN')

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        app.logger.error('Unhandled error: %s', error)
        return api_error(MESSAGES['internal_error'], status=500, code='INTERNAL_ERROR')


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('name')
    @click.argument('email')
    @click.option('--role', default='student',
                  type=click.Choice(['student', 'instructor', 'admin']))
    @click.password_option()
    def create_user_command(name, email, role, password):
        """Create a new user."""
        from models.user import create_user
        from models.role import get_role_by_name

        with app.app_context():
            role_row = get_role_by_name(role)

            try:
                user_id = create_user(
                    name=name,
                    email=email,
                    password=password,
                    role_id=role_row['id']
                )
                click.echo(f'User created successfully! ID: {user_id}')
            except ValueError as e:
                click.echo(f'Error creating user: {e}', err=True)

    @app.cli.command('housekeeping')
    def housekeeping_command():
        """Release expired maintenance windows and complete past reservations.

        Meant to be scheduled hourly (cron / systemd timer).
        """
        from models.space import release_expired_unavailability
        from models.reservation import complete_finished_reservations

        with app.app_context():
            released = release_expired_unavailability()
            completed = complete_finished_reservations()
        click.echo(f'Spaces released: {released}, reservations completed: {completed}')


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/spacebooking.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('models').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('SpaceBooking startup')
    else:
        app.logger.setLevel(logging.DEBUG)


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
