"""
Invitation API routes.
Validating an invitation token is public; joining requires a session.
"""

from flask_login import login_required, current_user

from models.reservation import validate_invitation, join_reservation
from utils.api_response import api_success
from utils.audit import log_audit
from utils.decorators import permission_required
from utils.messages import MESSAGES


def register_routes(bp):
    """Register invitation routes on the blueprint."""

    @bp.route('/invitations/<token>', methods=['GET'])
    def validate_invitation_route(token):
        """Describe the reservation behind an invitation token."""
        return api_success(data=validate_invitation(token))

    @bp.route('/invitations/<token>/join', methods=['POST'])
    @login_required
    @permission_required('invitations.join')
    def join_invitation_route(token):
        """Join a group reservation as participant."""
        reservation = join_reservation(token, current_user.id)

        log_audit('JOINED', 'reservation', reservation['id'])

        return api_success(data=reservation, message=MESSAGES['participant_joined'])
