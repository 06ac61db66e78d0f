"""
Space and availability API routes.
Availability snapshots are public; the registry needs a session.
"""

from flask import request
from flask_login import login_required

from models.space import get_all_spaces, get_space_by_id, serialize_space
from models.reservation import get_availability, get_space_day_availability
from utils.api_response import api_success
from utils.decorators import permission_required
from utils.errors import NotFoundError
from utils.messages import MESSAGES


def register_routes(bp):
    """Register space and availability routes on the blueprint."""

    @bp.route('/availability')
    def availability():
        """
        Status of every space at one instant.

        Query params:
            datetime: ISO 8601 instant (default: now)
        """
        return api_success(data=get_availability(request.args.get('datetime')))

    @bp.route('/spaces')
    @login_required
    @permission_required('spaces.view')
    def list_spaces():
        """
        List spaces.

        Query params:
            space_type, floor_id, min_capacity (optional)
        """
        spaces = get_all_spaces(
            space_type=request.args.get('space_type', '').strip() or None,
            floor_id=request.args.get('floor_id', type=int),
            min_capacity=request.args.get('min_capacity', type=int)
        )
        return api_success(data=[serialize_space(s) for s in spaces], count=len(spaces))

    @bp.route('/spaces/<int:space_id>')
    @login_required
    @permission_required('spaces.view')
    def space_detail(space_id):
        """Get a single space."""
        space = get_space_by_id(space_id)
        if not space:
            raise NotFoundError(MESSAGES['space_not_found'], 'SPACE_NOT_FOUND')
        return api_success(data=serialize_space(space))

    @bp.route('/spaces/<int:space_id>/availability')
    def space_day_availability(space_id):
        """
        Hourly slots of one space for one day.

        Query params:
            date: YYYY-MM-DD (required)
        """
        return api_success(data=get_space_day_availability(space_id, request.args.get('date', '').strip()))
