"""
Reservation API routes.
Booking, listing, cancellation and participant management for the
current user.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.api.forms import ReservationForm
from models.reservation import (
    create_reservation,
    get_reservation,
    list_reservations,
    cancel_reservation,
    remove_participant,
)
from utils.api_response import api_success, api_paginated
from utils.audit import log_audit
from utils.decorators import permission_required
from utils.forms import bind_json_form, form_error
from utils.messages import MESSAGES


def register_routes(bp):
    """Register reservation routes on the blueprint."""

    @bp.route('/reservations', methods=['POST'])
    @login_required
    @permission_required('reservations.create')
    def create_reservation_route():
        """
        Book a space.

        Body:
            space_id, start_time, end_time (ISO 8601), type
            ('individual' | 'group'), group_size (group only), notes

        Returns:
            201 with the reservation; group bookings include the
            invitation token and link
        """
        form, payload = bind_json_form(ReservationForm)
        if not form.validate():
            return form_error(form)

        reservation = create_reservation(
            user_id=current_user.id,
            space_id=form.space_id.data,
            start_time=form.start_time.data,
            end_time=form.end_time.data,
            kind=form.type.data,
            group_size=payload.get('group_size'),
            notes=form.notes.data
        )

        log_audit('CREATED', 'reservation', reservation['id'], details={
            'space_id': reservation['space_id'],
            'type': reservation['type'],
            'seat_count': reservation['seat_count'],
            'start_time': reservation['start_time'],
            'end_time': reservation['end_time'],
        })

        return api_success(data=reservation, message=MESSAGES['reservation_created'], status=201)

    @bp.route('/reservations', methods=['GET'])
    @login_required
    @permission_required('reservations.view')
    def list_reservations_route():
        """
        List the current user's reservations.

        Query params:
            page, limit, status, start_date, end_date (YYYY-MM-DD)
        """
        result = list_reservations(
            user_id=current_user.id,
            page=request.args.get('page', 1, type=int),
            limit=request.args.get('limit', type=int),
            status=request.args.get('status', '').strip() or None,
            start_date=request.args.get('start_date', '').strip() or None,
            end_date=request.args.get('end_date', '').strip() or None
        )
        return api_paginated(result['items'], result['page'], result['limit'], result['total'])

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    @login_required
    @permission_required('reservations.view')
    def get_reservation_route(reservation_id):
        """Get one of the current user's reservations."""
        return api_success(data=get_reservation(reservation_id, current_user.id))

    @bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
    @login_required
    @permission_required('reservations.cancel')
    def cancel_reservation_route(reservation_id):
        """Cancel one of the current user's reservations."""
        reservation = cancel_reservation(reservation_id, current_user.id)

        log_audit('CANCELLED', 'reservation', reservation_id)

        return api_success(data=reservation, message=MESSAGES['reservation_cancelled'])

    @bp.route('/reservations/<int:reservation_id>/participants/<int:participant_id>',
              methods=['DELETE'])
    @login_required
    @permission_required('reservations.participants.manage')
    def remove_participant_route(reservation_id, participant_id):
        """Remove a participant from a group reservation (organizer only)."""
        reservation = remove_participant(reservation_id, participant_id, current_user.id)

        log_audit('PARTICIPANT_REMOVED', 'reservation', reservation_id, details={
            'participant_id': participant_id,
        })

        return api_success(data=reservation, message=MESSAGES['participant_removed'])
