"""
API routes for JSON endpoints.
Assembles the reservation, invitation and space route modules onto one
blueprint.
"""

from flask import Blueprint, current_app

from utils.api_response import api_success

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status and version
    """
    return api_success(data={
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'SpaceBooking')
    })


# Import and register routes from submodules
from blueprints.api import reservations
from blueprints.api import invitations
from blueprints.api import spaces

reservations.register_routes(api_bp)
invitations.register_routes(api_bp)
spaces.register_routes(api_bp)
